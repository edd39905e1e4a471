"""
Config Module - Black Box Interface

Purpose: Process-wide immutable configuration
Interface: ConfigProvider.get_*_config()
Hidden: Environment parsing, duration formats, .env loading
"""

from .provider import (
    APIConfig,
    CloudinaryConfig,
    ConfigProvider,
    EnvConfigProvider,
    MongoConfig,
    RedisConfig,
    TokenConfig,
    UploadConfig,
    parse_duration,
)

__all__ = [
    "APIConfig",
    "CloudinaryConfig",
    "ConfigProvider",
    "EnvConfigProvider",
    "MongoConfig",
    "RedisConfig",
    "TokenConfig",
    "UploadConfig",
    "parse_duration",
]
