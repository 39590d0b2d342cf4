"""Pydantic model for UFile client configuration."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ufilestore.config.helpers import parse_bytes
from ufilestore.core.const import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_SCHEME,
    DEFAULT_SUFFIX,
    MAX_PUT_SIZE,
    default_max_workers,
)
from ufilestore.core.models import StorageCredential


class UfileConfig(BaseModel):
    """Configuration for one UFile bucket.

    Attributes:
        public_key: Public half of the UCloud key pair.
        private_key: Secret half of the UCloud key pair.
        bucket_name: Bucket objects are written to.
        scheme: URL scheme used to reach the bucket host.
        suffix: Domain suffix appended to the bucket name to form the host.
        max_put_size: Largest payload, in bytes, sent as a single PUT.
        max_workers: Number of parts uploaded concurrently.
        http_timeout: Per-request timeout in seconds.
        abort_on_failure: Abort the remote multipart session when an upload
            fails or is cancelled instead of leaving it open.
    """

    model_config = ConfigDict(frozen=True)

    public_key: str = Field(min_length=1)
    private_key: str = Field(min_length=1, repr=False)
    bucket_name: str = Field(min_length=1)
    scheme: str = DEFAULT_SCHEME
    suffix: str = DEFAULT_SUFFIX
    max_put_size: int = Field(default=MAX_PUT_SIZE, ge=0)
    max_workers: int = Field(default_factory=default_max_workers, ge=1)
    http_timeout: float = Field(default=DEFAULT_HTTP_TIMEOUT_SECONDS, gt=0)
    abort_on_failure: bool = False

    @field_validator("max_put_size", mode="before")
    @classmethod
    def _parse_max_put_size(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_bytes(value)
        return value

    @field_validator("scheme")
    @classmethod
    def _check_scheme(cls, value: str) -> str:
        value = value.lower()
        if value not in {"http", "https"}:
            raise ValueError(f"unsupported scheme {value!r}")
        return value

    @property
    def credential(self) -> StorageCredential:
        """Credential used to sign every request."""
        return StorageCredential(
            public_key=self.public_key,
            private_key=self.private_key,
            bucket_name=self.bucket_name,
        )

    def base_url(self, bucket: str | None = None) -> str:
        """Return the host URL of a bucket, the configured one by default."""
        return f"{self.scheme}://{bucket or self.bucket_name}{self.suffix}"
