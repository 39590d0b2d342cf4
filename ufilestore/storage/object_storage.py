"""Abstract base class for object storage backends."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

from ufilestore.core.models import UploadOutcome

ProgressCallback = Callable[[int, int], None]


class ObjectStorage(ABC):
    """Write-side interface of an object storage backend.

    Implementations decide how a payload reaches the remote bucket; callers
    only hand over bytes and a destination key.
    """

    @abstractmethod
    def save(
        self,
        content: bytes,
        filename: str,
        *,
        cancel_event: threading.Event | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> UploadOutcome:
        """Store a payload under the given key.

        Args:
            content: Bytes to store.
            filename: Destination object key.
            cancel_event: When set, stops the upload before it is committed.
            progress_callback: Called with (part_number, nbytes) after each
                part reaches the service.

        Returns:
            The committed object.
        """

    def close(self) -> None:
        """Release network resources held by the backend."""

    def __enter__(self) -> ObjectStorage:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
