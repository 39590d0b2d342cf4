"""UCloud UFile storage backend.

Small payloads are written with a single signed PUT. Larger payloads use the
UFile multipart protocol: a session is opened, full-size parts are uploaded
concurrently from a bounded thread pool, the remainder part is uploaded last,
and the session is finalized with the part ETags in part-number order.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from urllib.parse import quote, urlencode

import requests
from requests.adapters import HTTPAdapter

from ufilestore.config.ufile_config import UfileConfig
from ufilestore.core.const import ETAG_HEADER, OCTET_STREAM, TEXT_PLAIN
from ufilestore.core.exceptions import (
    DecodeError,
    PartialUploadError,
    TransportError,
    UfileError,
    UploadCancelledError,
)
from ufilestore.core.models import (
    PartResult,
    PartUploadResponse,
    StorageCredential,
    UploadOutcome,
    UploadSession,
)
from ufilestore.core.signer import authorization_header
from ufilestore.core.utils.http_errors import ensure_ok, parse_json_model
from ufilestore.storage.multipart import PartRange, plan_parts
from ufilestore.storage.object_storage import ObjectStorage, ProgressCallback

logger = logging.getLogger(__name__)

# How often the part join wakes up to look at the cancel event.
_CANCEL_POLL_SECONDS = 0.1


class UfileStorage(ObjectStorage):
    """Upload objects to a UFile bucket.

    The HTTP session, configuration and credential are shared read-only by
    all part upload workers.
    """

    def __init__(
        self, config: UfileConfig, http_session: requests.Session | None = None
    ):
        """Initialize the storage client.

        Args:
            config: Bucket, credential and transport settings.
            http_session: Optional pre-built session, mainly for tests. A
                session with a connection pool sized to ``max_workers`` is
                created otherwise.
        """
        self._config = config
        self._credential = config.credential
        self._http = http_session or self._build_http_session(config.max_workers)

    @staticmethod
    def _build_http_session(pool_size: int) -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    @property
    def config(self) -> UfileConfig:
        return self._config

    @property
    def credential(self) -> StorageCredential:
        return self._credential

    def close(self) -> None:
        self._http.close()

    def _object_url(self, bucket: str, key: str, query: str = "") -> str:
        url = f"{self._config.base_url(bucket)}/{quote(key, safe='/')}"
        return f"{url}?{query}" if query else url

    def _send(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        content_type: str,
        bucket: str,
        key: str,
        data: bytes | None = None,
        content_length: int | None = None,
    ) -> requests.Response:
        """Sign and send one request.

        ``content_length`` replaces the Content-Length that requests derives
        from the body, so the declared value is sent as given.

        Raises:
            TransportError: If no response was received.
        """
        headers = {
            "Authorization": authorization_header(
                self._credential, method, content_type, bucket, key
            ),
            "Content-Type": content_type,
        }
        prepared = self._http.prepare_request(
            requests.Request(method, url, headers=headers, data=data)
        )
        if content_length is not None:
            prepared.headers["Content-Length"] = str(content_length)

        try:
            return self._http.send(prepared, timeout=self._config.http_timeout)
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"{operation} request to {url} failed: {exc}") from exc

    def put(self, content: bytes, filename: str) -> None:
        """Upload a whole payload with one PUT request.

        Raises:
            TransportError: If the request could not be sent.
            ProtocolError: If the service does not answer 200.
        """
        bucket = self._config.bucket_name
        logger.info(
            "PUT object: bucket=%s key=%s bytes=%d", bucket, filename, len(content)
        )
        response = self._send(
            "put",
            "PUT",
            self._object_url(bucket, filename),
            content_type=OCTET_STREAM,
            bucket=bucket,
            key=filename,
            data=content,
            content_length=len(content),
        )
        ensure_ok(response, "put")

    def initiate_multipart_upload(self, filename: str) -> UploadSession:
        """Open a multipart upload session for a key.

        Returns:
            The session, whose block size drives all later partitioning.

        Raises:
            TransportError: If the request could not be sent.
            ProtocolError: If the service does not answer 200.
            DecodeError: If the response body is not a valid session.
        """
        bucket = self._config.bucket_name
        response = self._send(
            "initiate_multipart_upload",
            "POST",
            self._object_url(bucket, filename, "uploads"),
            content_type=OCTET_STREAM,
            bucket=bucket,
            key=filename,
        )
        ensure_ok(response, "initiate_multipart_upload")
        session = parse_json_model(
            response, UploadSession, "initiate_multipart_upload"
        )
        logger.info(
            "Multipart session opened: upload_id=%s bucket=%s key=%s block_size=%d",
            session.upload_id,
            session.bucket,
            session.key,
            session.block_size,
        )
        return session

    def upload_part(
        self, content: bytes, session: UploadSession, part_number: int
    ) -> PartResult:
        """Upload one part of a multipart session.

        The request declares the session's block size as its Content-Length,
        including for a shorter remainder part. Safe to call concurrently for
        different parts of the same session.

        Raises:
            TransportError: If the request could not be sent.
            ProtocolError: If the service does not answer 200.
            DecodeError: If the response lacks a valid body or ETag.
        """
        query = urlencode({"uploadId": session.upload_id, "partNumber": part_number})
        logger.debug(
            "PUT part: upload_id=%s part=%d bytes=%d",
            session.upload_id,
            part_number,
            len(content),
        )
        response = self._send(
            "upload_part",
            "PUT",
            self._object_url(session.bucket, session.key, query),
            content_type=OCTET_STREAM,
            bucket=session.bucket,
            key=session.key,
            data=content,
            content_length=session.block_size,
        )
        ensure_ok(response, "upload_part")
        parse_json_model(response, PartUploadResponse, "upload_part")

        etag = response.headers.get(ETAG_HEADER)
        if not etag:
            raise DecodeError(f"upload_part {part_number} response has no ETag")
        return PartResult(part_number=part_number, etag=etag)

    def finish_multipart_upload(
        self, session: UploadSession, etags: str
    ) -> UploadOutcome:
        """Commit a multipart session.

        Args:
            session: The session being finalized.
            etags: Comma-joined part ETags in part-number order.

        Raises:
            TransportError: If the request could not be sent.
            ProtocolError: If the service does not answer 200.
            DecodeError: If the response body is not a valid outcome.
        """
        body = etags.encode("utf-8")
        # newKey repeats the upload key; the service expects the field.
        query = urlencode(
            {"uploadId": session.upload_id, "newKey": session.key}, safe="/"
        )
        response = self._send(
            "finish_multipart_upload",
            "POST",
            self._object_url(session.bucket, session.key, query),
            content_type=TEXT_PLAIN,
            bucket=session.bucket,
            key=session.key,
            data=body,
            content_length=len(body),
        )
        ensure_ok(response, "finish_multipart_upload")
        outcome = parse_json_model(response, UploadOutcome, "finish_multipart_upload")
        logger.info(
            "Multipart upload finished: upload_id=%s bucket=%s key=%s size=%d",
            session.upload_id,
            outcome.bucket,
            outcome.key,
            outcome.file_size,
        )
        return outcome

    def abort_multipart_upload(self, session: UploadSession) -> None:
        """Discard an open multipart session and its uploaded parts.

        Raises:
            TransportError: If the request could not be sent.
            ProtocolError: If the service does not answer 200.
        """
        query = urlencode({"uploadId": session.upload_id})
        response = self._send(
            "abort_multipart_upload",
            "DELETE",
            self._object_url(session.bucket, session.key, query),
            content_type=OCTET_STREAM,
            bucket=session.bucket,
            key=session.key,
        )
        ensure_ok(response, "abort_multipart_upload")
        logger.info("Multipart session aborted: upload_id=%s", session.upload_id)

    def save(
        self,
        content: bytes,
        filename: str,
        *,
        cancel_event: threading.Event | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> UploadOutcome:
        """Upload a payload, choosing single PUT or multipart by size.

        Args:
            content: Bytes to upload.
            filename: Destination object key.
            cancel_event: When set, no further part is started and the upload
                stops without being finalized. Parts already in flight are
                awaited only when the session is aborted afterwards.
            progress_callback: Called with (part_number, nbytes) after each
                part is acknowledged. A single PUT reports part 0.

        Returns:
            The committed object.

        Raises:
            TransportError: If a request could not be sent.
            ProtocolError: If the single PUT, initiate or finalize call fails.
            DecodeError: If a session or outcome response is malformed.
            PartialUploadError: If any part fails; nothing is finalized.
            UploadCancelledError: If cancel_event is set before finalization.
        """
        size = len(content)
        if size <= self._config.max_put_size:
            self.put(content, filename)
            if progress_callback is not None:
                progress_callback(0, size)
            return UploadOutcome(
                bucket=self._config.bucket_name, key=filename, file_size=size
            )

        session = self.initiate_multipart_upload(filename)
        full_parts, remainder = plan_parts(size, session.block_size)
        logger.debug(
            "Upload plan: upload_id=%s full_parts=%d remainder=%s",
            session.upload_id,
            len(full_parts),
            remainder.size if remainder is not None else 0,
        )

        try:
            etags = self._upload_full_parts(
                content, session, full_parts, cancel_event, progress_callback
            )
            if remainder is not None:
                etags.append(
                    self._upload_remainder(
                        content, session, remainder, cancel_event, progress_callback
                    )
                )
        except Exception:
            if self._config.abort_on_failure:
                self._abort_after_failure(session)
            raise

        return self.finish_multipart_upload(session, ",".join(etags))

    def _upload_full_parts(
        self,
        content: bytes,
        session: UploadSession,
        parts: list[PartRange],
        cancel_event: threading.Event | None,
        progress_callback: ProgressCallback | None,
    ) -> list[str]:
        """Upload full-size parts concurrently and return their ETags in order.

        Each worker writes its ETag into the slot of its part number, so the
        returned list is ordered by part number whatever the completion order.
        """
        if not parts:
            return []

        etags: list[str | None] = [None] * len(parts)
        stop = threading.Event()

        def upload(part: PartRange) -> None:
            if stop.is_set() or (cancel_event is not None and cancel_event.is_set()):
                return
            result = self.upload_part(
                content[part.start : part.end], session, part.part_number
            )
            etags[part.part_number] = result.etag
            if progress_callback is not None and not stop.is_set():
                progress_callback(part.part_number, part.size)

        executor = ThreadPoolExecutor(
            max_workers=min(self._config.max_workers, len(parts)),
            thread_name_prefix="ufile-part",
        )
        futures: dict[Future[None], int] = {
            executor.submit(upload, part): part.part_number for part in parts
        }

        first_error: BaseException | None = None
        failed_part: int | None = None
        cancelled = False
        poll = _CANCEL_POLL_SECONDS if cancel_event is not None else None
        pending = set(futures)
        try:
            while pending:
                done, pending = wait(pending, timeout=poll, return_when=FIRST_EXCEPTION)
                for future in sorted(done, key=futures.__getitem__):
                    error = future.exception()
                    if error is not None:
                        first_error, failed_part = error, futures[future]
                        break
                if first_error is not None:
                    break
                if cancel_event is not None and cancel_event.is_set():
                    cancelled = True
                    break
        finally:
            stop.set()
            # Running parts cannot be interrupted. A cancelled upload returns
            # without them unless the session is aborted afterwards.
            executor.shutdown(
                wait=not cancelled or self._config.abort_on_failure,
                cancel_futures=True,
            )

        completed = [index for index, etag in enumerate(etags) if etag is not None]
        # Workers only skip their part once the upload is cancelled.
        if first_error is None and len(completed) < len(parts):
            cancelled = True
        if cancelled:
            logger.debug(
                "Upload %s cancelled, completed parts: %s",
                session.upload_id,
                completed,
            )
            raise UploadCancelledError(
                f"upload {session.upload_id} cancelled",
                upload_id=session.upload_id,
                completed_parts=completed,
            )
        if first_error is not None:
            logger.warning(
                "Part %d of upload %s failed: %s",
                failed_part,
                session.upload_id,
                first_error,
            )
            logger.debug(
                "Upload %s completed parts before failure: %s",
                session.upload_id,
                completed,
            )
            if not isinstance(first_error, UfileError):
                raise first_error
            raise PartialUploadError(
                f"part {failed_part} of upload {session.upload_id} failed: "
                f"{first_error}",
                upload_id=session.upload_id,
                failed_part=failed_part,
                completed_parts=completed,
            ) from first_error

        return [etag for etag in etags if etag is not None]

    def _upload_remainder(
        self,
        content: bytes,
        session: UploadSession,
        part: PartRange,
        cancel_event: threading.Event | None,
        progress_callback: ProgressCallback | None,
    ) -> str:
        """Upload the trailing short part after all full parts are in."""
        completed = list(range(part.part_number))
        if cancel_event is not None and cancel_event.is_set():
            raise UploadCancelledError(
                f"upload {session.upload_id} cancelled",
                upload_id=session.upload_id,
                completed_parts=completed,
            )
        try:
            result = self.upload_part(
                content[part.start : part.end], session, part.part_number
            )
        except UfileError as exc:
            logger.warning(
                "Remainder part %d of upload %s failed: %s",
                part.part_number,
                session.upload_id,
                exc,
            )
            raise PartialUploadError(
                f"part {part.part_number} of upload {session.upload_id} failed: "
                f"{exc}",
                upload_id=session.upload_id,
                failed_part=part.part_number,
                completed_parts=completed,
            ) from exc
        if progress_callback is not None:
            progress_callback(part.part_number, part.size)
        return result.etag

    def _abort_after_failure(self, session: UploadSession) -> None:
        try:
            self.abort_multipart_upload(session)
        except UfileError as exc:
            logger.warning(
                "Failed to abort multipart upload %s: %s", session.upload_id, exc
            )
