"""Data types exchanged with the UFile multipart upload API.

Service responses use UCloud's capitalised JSON field names; the models below
accept those names on input and expose snake_case attributes to callers.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt


@dataclass(frozen=True)
class StorageCredential:
    """Key pair and bucket a client signs its requests for."""

    public_key: str
    private_key: str
    bucket_name: str

    def __repr__(self) -> str:
        return (
            f"StorageCredential(public_key={self.public_key!r}, "
            f"private_key='***', bucket_name={self.bucket_name!r})"
        )


class UploadSession(BaseModel):
    """Server-assigned multipart upload context.

    The block size decides how the payload is partitioned and stays fixed for
    the lifetime of the session.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    upload_id: str = Field(alias="UploadId", min_length=1)
    block_size: PositiveInt = Field(alias="BlkSize")
    bucket: str = Field(alias="Bucket")
    key: str = Field(alias="Key")


class PartUploadResponse(BaseModel):
    """JSON body returned for an uploaded part."""

    model_config = ConfigDict(populate_by_name=True)

    part_number: NonNegativeInt = Field(alias="PartNumber")


class UploadOutcome(BaseModel):
    """The committed object returned by the finalize call."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    bucket: str = Field(alias="Bucket")
    key: str = Field(alias="Key")
    file_size: NonNegativeInt = Field(alias="FileSize")


@dataclass(frozen=True)
class PartResult:
    """Acknowledgement of one uploaded part and its integrity tag."""

    part_number: int
    etag: str
