from .env import load_credentials
from .loader import find_settings_file, load_settings
from .types import ConfigError, Credentials, Settings, UnsupportedConfigFormatError

__all__ = [
    "load_settings",
    "load_credentials",
    "find_settings_file",
    "Settings",
    "Credentials",
    "ConfigError",
    "UnsupportedConfigFormatError",
]
