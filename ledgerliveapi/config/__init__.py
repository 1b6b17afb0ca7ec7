"""Configuration module for ledgerliveapi."""

from ledgerliveapi.config.loader import load_config, get_config_path, save_config
from ledgerliveapi.config.schema import Config, LoggingConfig, BridgeConfig, TransportConfig

__all__ = [
    "Config",
    "LoggingConfig",
    "BridgeConfig",
    "TransportConfig",
    "load_config",
    "save_config",
    "get_config_path",
]
