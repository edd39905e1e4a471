"""Configuration provider following Black Box Design principles."""
import os
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional, Protocol

from dotenv import load_dotenv

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(value: str) -> timedelta:
    """
    Parse an expiry string such as "15m", "10d", "1h", "30s" or "900".

    Raises:
        ValueError: If the value is not a positive duration
    """
    match = _DURATION_PATTERN.match(value or "")
    if not match:
        raise ValueError(f"Invalid duration: {value!r} (expected e.g. 15m, 10d, 3600)")

    amount, unit = int(match.group(1)), match.group(2)
    if amount <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")

    return timedelta(**{_DURATION_UNITS[unit]: amount})


@dataclass(frozen=True)
class TokenConfig:
    """Signing material and lifetimes for session tokens."""
    access_token_secret: str
    access_token_expiry: timedelta
    refresh_token_secret: str
    refresh_token_expiry: timedelta
    algorithm: str = "HS256"


@dataclass(frozen=True)
class MongoConfig:
    """Document store connection."""
    uri: str
    database: str


@dataclass(frozen=True)
class CloudinaryConfig:
    """Blob hosting credentials."""
    cloud_name: Optional[str]
    api_key: Optional[str]
    api_secret: Optional[str]
    upload_timeout: float = 120.0

    @property
    def is_configured(self) -> bool:
        """Check if all credentials are present."""
        return bool(self.cloud_name and self.api_key and self.api_secret)


@dataclass(frozen=True)
class RedisConfig:
    """Optional Redis connection for the auth audit trail."""
    url: Optional[str]

    @property
    def is_configured(self) -> bool:
        return bool(self.url)


@dataclass(frozen=True)
class APIConfig:
    """API configuration."""
    port: int
    host: str
    debug: bool
    log_level: str
    cors_origins: List[str]
    cookie_secure: bool = True


@dataclass(frozen=True)
class UploadConfig:
    """Local staging area for multipart uploads."""
    temp_dir: str
    max_bytes: int


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_token_config(self) -> TokenConfig:
        ...

    def get_mongo_config(self) -> MongoConfig:
        ...

    def get_cloudinary_config(self) -> CloudinaryConfig:
        ...

    def get_redis_config(self) -> RedisConfig:
        ...

    def get_api_config(self) -> APIConfig:
        ...

    def get_upload_config(self) -> UploadConfig:
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def __init__(self, env_file: Optional[str] = ".env"):
        if env_file:
            load_dotenv(env_file)

    def get_token_config(self) -> TokenConfig:
        """Get token signing configuration from environment variables."""
        access_secret = os.getenv("ACCESS_TOKEN_SECRET")
        refresh_secret = os.getenv("REFRESH_TOKEN_SECRET")

        # Secrets are required - no default for security
        missing = [
            name
            for name, value in (
                ("ACCESS_TOKEN_SECRET", access_secret),
                ("REFRESH_TOKEN_SECRET", refresh_secret),
            )
            if not value
        ]
        if missing:
            raise ValueError(
                f"Missing required token secrets: {', '.join(missing)}. "
                "Generate them with e.g. `openssl rand -hex 32`."
            )
        if access_secret == refresh_secret:
            raise ValueError("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must differ")

        return TokenConfig(
            access_token_secret=access_secret,
            access_token_expiry=parse_duration(os.getenv("ACCESS_TOKEN_EXPIRY", "15m")),
            refresh_token_secret=refresh_secret,
            refresh_token_expiry=parse_duration(os.getenv("REFRESH_TOKEN_EXPIRY", "10d")),
        )

    def get_mongo_config(self) -> MongoConfig:
        """Get document store configuration from environment variables."""
        return MongoConfig(
            uri=os.getenv("MONGODB_URI", "mongodb://localhost:27017"),
            database=os.getenv("DB_NAME", "vidtube"),
        )

    def get_cloudinary_config(self) -> CloudinaryConfig:
        """Get Cloudinary configuration from environment variables."""
        return CloudinaryConfig(
            cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME"),
            api_key=os.getenv("CLOUDINARY_API_KEY"),
            api_secret=os.getenv("CLOUDINARY_API_SECRET"),
            upload_timeout=float(os.getenv("CLOUDINARY_UPLOAD_TIMEOUT", "120")),
        )

    def get_redis_config(self) -> RedisConfig:
        """Get audit trail Redis configuration from environment variables."""
        return RedisConfig(url=os.getenv("REDIS_URL") or None)

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=int(os.getenv("PORT", "8000")),
            host=os.getenv("API_HOST", "0.0.0.0"),
            debug=os.getenv("API_DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            cors_origins=os.getenv("CORS_ORIGIN", "*").split(","),
            cookie_secure=os.getenv("COOKIE_SECURE", "true").lower() == "true",
        )

    def get_upload_config(self) -> UploadConfig:
        """Get multipart staging configuration from environment variables."""
        return UploadConfig(
            temp_dir=os.getenv("UPLOAD_TEMP_DIR", "./public/temp"),
            max_bytes=int(os.getenv("UPLOAD_MAX_BYTES", str(500 * 1024 * 1024))),
        )
