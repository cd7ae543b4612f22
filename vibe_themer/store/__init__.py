"""Configuration store backends."""

from .json_file import JsonSettingsStore, SettingsFileError
from .memory import InMemoryConfigurationStore
from .protocol import ConfigurationStore

__all__ = [
    "ConfigurationStore",
    "InMemoryConfigurationStore",
    "JsonSettingsStore",
    "SettingsFileError",
]
