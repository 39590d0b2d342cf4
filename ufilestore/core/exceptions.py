"""Exception classes for the UFile storage client."""

from __future__ import annotations

from collections.abc import Sequence


class UfileError(Exception):
    """Base error for the UFile storage client."""


class ConfigError(UfileError):
    """Raised when client configuration is missing or invalid."""


class TransportError(UfileError):
    """Raised when a request fails before any response is received."""


class ProtocolError(UfileError):
    """Raised when the service answers with a non-200 status."""

    def __init__(self, operation: str, status_code: int, body: str):
        """Initialize ProtocolError.

        Args:
            operation: Name of the client operation that failed.
            status_code: HTTP status returned by the service.
            body: Raw response body text.
        """
        super().__init__(f"{operation} failed ({status_code}), {body}")
        self.operation = operation
        self.status_code = status_code
        self.body = body


class DecodeError(UfileError):
    """Raised when a successful response carries an unusable body."""


class PartialUploadError(UfileError):
    """Raised when a multipart upload cannot be finalized.

    The remote session is left open unless the client is configured to
    abort it.
    """

    def __init__(
        self,
        message: str,
        *,
        upload_id: str,
        failed_part: int | None = None,
        completed_parts: Sequence[int] = (),
    ):
        """Initialize PartialUploadError.

        Args:
            message: Human readable description of the first failure.
            upload_id: Identifier of the multipart session.
            failed_part: Part number of the first failed part, if any.
            completed_parts: Part numbers that were uploaded successfully.
        """
        super().__init__(message)
        self.upload_id = upload_id
        self.failed_part = failed_part
        self.completed_parts = list(completed_parts)


class UploadCancelledError(PartialUploadError):
    """Raised when a multipart upload is cancelled before finalization."""
