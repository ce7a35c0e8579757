from enum import Enum
from functools import lru_cache
from typing import Optional, cast

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from castify.errors import ConfigurationError

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
BROWSER_ACCEPT = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,"
    "image/avif,image/webp,*/*;q=0.8"
)


class ImagePolicy(str, Enum):
    """Whether a page without og:image can still be cast."""

    REQUIRED = "required"
    OPTIONAL = "optional"


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    app_name: str = Field(default="Castify API", description="Application name")

    neynar_api_key: Optional[str] = Field(
        default=None,
        description="API key for the publish API",
    )
    neynar_signer_uuid: Optional[str] = Field(
        default=None,
        description="Pre-approved signer that casts are published under",
    )
    publish_api_base_url: AnyHttpUrl = Field(
        default=cast(AnyHttpUrl, "https://api.neynar.com"),
        description="Base URL for the publish API",
    )
    web_client_base_url: str = Field(
        default="https://warpcast.com",
        description="Web client used for cast and composer links",
    )

    image_policy: ImagePolicy = Field(default=ImagePolicy.REQUIRED)
    include_image_embed: bool = Field(
        default=True,
        description="Append the resolved og:image as a second embed",
    )

    fetch_timeout: float = Field(default=10.0, ge=5.0, le=15.0)
    fetch_max_bytes: int = Field(default=2 * 1024 * 1024, gt=0)
    publish_timeout: float = Field(default=10.0, gt=0)
    user_agent: str = Field(default=BROWSER_USER_AGENT)
    accept_header: str = Field(default=BROWSER_ACCEPT)

    fallback_title: str = Field(default="Watch this video!")
    cast_text_prefix: str = Field(default="")
    cast_hashtag: str = Field(default="#Castify")
    max_cast_bytes: int = Field(default=320, gt=0)

    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def require_publishing_credentials(self) -> tuple[str, str]:
        """Return (api_key, signer_uuid) or fail if either is unset."""
        missing = [
            name.upper()
            for name in ("neynar_api_key", "neynar_signer_uuid")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )
        return cast(str, self.neynar_api_key), cast(str, self.neynar_signer_uuid)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
