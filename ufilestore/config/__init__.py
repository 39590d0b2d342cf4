"""Client configuration."""

from .config_manager import ConfigManager
from .json_config import JsonConfig
from .ufile_config import UfileConfig

__all__ = ["ConfigManager", "JsonConfig", "UfileConfig"]
