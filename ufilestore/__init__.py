from .config import ConfigManager, JsonConfig, UfileConfig
from .core.exceptions import (
    ConfigError,
    DecodeError,
    PartialUploadError,
    ProtocolError,
    TransportError,
    UfileError,
    UploadCancelledError,
)
from .core.models import PartResult, StorageCredential, UploadOutcome, UploadSession
from .core.signer import authorization_header, sign
from .storage import ObjectStorage, UfileStorage, create_storage, plan_parts

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ConfigManager",
    "DecodeError",
    "JsonConfig",
    "ObjectStorage",
    "PartResult",
    "PartialUploadError",
    "ProtocolError",
    "StorageCredential",
    "TransportError",
    "UfileConfig",
    "UfileError",
    "UfileStorage",
    "UploadCancelledError",
    "UploadOutcome",
    "UploadSession",
    "authorization_header",
    "create_storage",
    "plan_parts",
    "sign",
]
