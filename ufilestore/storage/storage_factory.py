"""Factory for object storage backends."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from ufilestore.config.ufile_config import UfileConfig
from ufilestore.core.exceptions import ConfigError
from ufilestore.storage.object_storage import ObjectStorage
from ufilestore.storage.ufile_storage import UfileStorage


def create_storage(config: UfileConfig | None = None, **settings: Any) -> ObjectStorage:
    """Build a storage backend from a config object or keyword settings.

    Args:
        config: Ready-made configuration. Mutually exclusive with settings.
        **settings: ``UfileConfig`` fields, e.g. public_key, private_key and
            bucket_name.

    Raises:
        ConfigError: If both or neither source is given, or settings are invalid.
    """
    if config is not None and settings:
        raise ConfigError("pass either a config object or settings, not both")
    if config is None:
        if not settings:
            raise ConfigError("no storage configuration given")
        try:
            config = UfileConfig(**settings)
        except ValidationError as exc:
            raise ConfigError(f"invalid UFile configuration: {exc}") from exc
    return UfileStorage(config)
