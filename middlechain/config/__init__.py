"""Settings schema and loading."""

from middlechain.config.loader import get_config_path, load_settings, save_settings
from middlechain.config.schema import ChainSettings

__all__ = ["ChainSettings", "get_config_path", "load_settings", "save_settings"]
