"""Object storage backends."""

from .multipart import PartRange, plan_parts
from .object_storage import ObjectStorage
from .storage_factory import create_storage
from .ufile_storage import UfileStorage

__all__ = [
    "ObjectStorage",
    "PartRange",
    "UfileStorage",
    "create_storage",
    "plan_parts",
]
