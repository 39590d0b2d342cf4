"""Resolve client configuration from a config file, environment, and CLI."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ufilestore.config.json_config import JsonConfig
from ufilestore.config.ufile_config import UfileConfig
from ufilestore.core.const import DEFAULT_CONFIG_SECTION
from ufilestore.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

_ENV_MAP: dict[str, str] = {
    "public_key": "UFILE_PUBLIC_KEY",
    "private_key": "UFILE_PRIVATE_KEY",
    "bucket_name": "UFILE_BUCKET",
    "scheme": "UFILE_SCHEME",
    "suffix": "UFILE_SUFFIX",
    "max_put_size": "UFILE_MAX_PUT_SIZE",
    "max_workers": "UFILE_MAX_WORKERS",
    "http_timeout": "UFILE_HTTP_TIMEOUT",
    "abort_on_failure": "UFILE_ABORT_ON_FAILURE",
}


class ConfigManager:
    """Build effective client configuration from file, env, and CLI overrides.

    Later sources win: file values are overridden by environment variables,
    which are overridden by explicit CLI values.
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        section: str | None = DEFAULT_CONFIG_SECTION,
    ) -> None:
        """Initialise ConfigManager.

        Args:
            config_path: Optional JSON or YAML file holding the base values.
            section: Dotted key of the mapping inside the file that holds the
                client settings. ``None`` uses the whole document.
        """
        self.config_path = Path(config_path) if config_path is not None else None
        self.section = section

    def _read_file_values(self) -> dict[str, Any]:
        """Read base configuration values from the config file.

        Raises:
            ConfigError: If the file or section is missing or not a mapping.
        """
        if self.config_path is None:
            return {}

        document = JsonConfig.from_file(self.config_path)
        if not self.section:
            values = document.to_dict()
        else:
            values = document.get(self.section)
        if not isinstance(values, dict):
            raise ConfigError(
                f"section {self.section!r} of {self.config_path} is not a mapping"
            )
        logger.debug(
            "Loaded %d configuration values from %s", len(values), self.config_path
        )
        return dict(values)

    def _read_env_overrides(self) -> dict[str, Any]:
        """Read configuration overrides from environment variables.

        Returns:
            A dictionary of configuration field names to override values.
        """
        overrides: dict[str, Any] = {}
        for field_name, env_var_name in _ENV_MAP.items():
            env_value = os.getenv(env_var_name)
            if env_value is None:
                continue
            overrides[field_name] = env_value
        return overrides

    def resolve_effective_config(
        self, cli_config: dict[str, Any] | None = None
    ) -> UfileConfig:
        """Resolve the effective client configuration for this run.

        Args:
            cli_config: Optional CLI-provided overrides. ``None`` values are
                ignored and do not overwrite lower-priority sources.

        Returns:
            The validated ``UfileConfig``.

        Raises:
            ConfigError: If the merged values are incomplete or invalid.
        """
        merged = self._read_file_values()
        merged.update(self._read_env_overrides())
        if cli_config:
            merged.update(
                {name: value for name, value in cli_config.items() if value is not None}
            )

        try:
            return UfileConfig(**merged)
        except ValidationError as exc:
            raise ConfigError(f"invalid UFile configuration: {exc}") from exc
