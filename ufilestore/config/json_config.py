"""Read-only access to hierarchical JSON/YAML configuration documents.

Values are addressed with dotted keys, e.g. ``config.get("ufile.bucket_name")``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from ufilestore.core.exceptions import ConfigError

_YAML_SUFFIXES = {".yaml", ".yml"}


class JsonConfig:
    """A parsed configuration document with dotted-key lookup."""

    def __init__(self, data: dict[str, Any]) -> None:
        """Initialise JsonConfig.

        Args:
            data: Top-level mapping of the parsed document.
        """
        if not isinstance(data, dict):
            raise ConfigError("configuration document must be a mapping")
        self._data = data

    @classmethod
    def from_bytes(cls, raw: bytes | str) -> JsonConfig:
        """Parse a JSON document."""
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise ConfigError(f"invalid JSON configuration: {exc}") from exc
        return cls(data)

    @classmethod
    def from_file(cls, path: str | Path) -> JsonConfig:
        """Load a JSON or YAML document from disk.

        YAML is selected by a ``.yaml``/``.yml`` suffix, JSON otherwise.

        Raises:
            ConfigError: If the file cannot be read or parsed.
        """
        config_path = Path(path)
        try:
            raw = config_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"cannot read configuration {path}: {exc}") from exc

        if config_path.suffix.lower() not in _YAML_SUFFIXES:
            return cls.from_bytes(raw)

        try:
            data = yaml.safe_load(raw) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML configuration {path}: {exc}") from exc
        return cls(data)

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the top-level mapping."""
        return dict(self._data)

    def dump(self) -> str:
        """Return the document as tab-indented JSON."""
        return json.dumps(self._data, indent="\t")

    def get(self, key: str) -> Any:
        """Look up a dotted key.

        Lookup stops at the first value that is not a mapping and returns it,
        even if more key segments follow.

        Raises:
            ConfigError: If a segment is missing.
        """
        node: Any = self._data
        for segment in key.split("."):
            if segment not in node:
                raise ConfigError(f"no value for key {key}")
            node = node[segment]
            if not isinstance(node, dict):
                return node
        return node

    def has(self, key: str) -> bool:
        """Return whether a dotted key resolves to a value."""
        try:
            self.get(key)
        except ConfigError:
            return False
        return True

    def get_string(self, key: str) -> str:
        value = self.get(key)
        if not isinstance(value, str):
            raise ConfigError(f"value for key {key} is not string")
        return value

    def get_int(self, key: str) -> int:
        value = self.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"value for key {key} is not int")
        return int(value)

    def get_float(self, key: str) -> float:
        value = self.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"value for key {key} is not float")
        return float(value)

    def get_list(self, key: str) -> list[Any]:
        value = self.get(key)
        if not isinstance(value, list):
            raise ConfigError(f"value for key {key} is not a list")
        return value

    def get_string_list(self, key: str) -> list[str]:
        values = self.get_list(key)
        for index, value in enumerate(values):
            if not isinstance(value, str):
                raise ConfigError(f"{key}[{index}] is not a string")
        return list(values)
