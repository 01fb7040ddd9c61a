"""Configuration models for witstream."""

from pydantic import BaseModel, Field, HttpUrl, field_validator
from pathlib import Path
import httpx
import os
import stat

from witstream.constants import BASE_URL, CURRENT_VERSION


def check_config_permissions(path: Path) -> None:
    """
    Refuse config files readable by group or others.

    Raises:
        PermissionError: If file permissions are not 600 or stricter
    """
    mode = os.stat(path).st_mode
    if mode & (stat.S_IRWXG | stat.S_IRWXO):
        raise PermissionError(
            f"Config file has overly permissive permissions: {oct(mode)}\n"
            f"Run: chmod 600 {path}"
        )


class TimeoutConfig(BaseModel):
    """HTTP timeouts in seconds."""

    connect: float = Field(default=10.0, gt=0)
    read: float = Field(
        default=60.0,
        gt=0,
        description="Per-read timeout; bounds the silence between streamed events"
    )
    write: float = Field(default=30.0, gt=0)
    pool: float = Field(default=10.0, gt=0)

    model_config = {"frozen": True}

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.connect,
            read=self.read,
            write=self.write,
            pool=self.pool,
        )


class WitConfig(BaseModel):
    """Configuration for the Wit.ai API connection."""

    api_token: str = Field(
        ...,
        description="Wit.ai server or client access token"
    )

    base_url: HttpUrl = Field(
        default=BASE_URL,
        description="Wit.ai API base URL"
    )

    api_version: str = Field(
        default=CURRENT_VERSION,
        pattern=r"^\d{8}$",
        description="API version sent as the 'v' query parameter (YYYYMMDD)"
    )

    timeout: TimeoutConfig = Field(default_factory=TimeoutConfig)

    strict_stream_end: bool = Field(
        default=False,
        description="Raise instead of discarding an incomplete object at the end of a stream"
    )

    model_config = {"frozen": True}

    @field_validator("api_token")
    @classmethod
    def validate_api_token(cls, v: str) -> str:
        """Reject empty or whitespace-only tokens."""
        v = v.strip()
        if not v:
            raise ValueError("api_token must not be empty")
        return v

    def url(self, path: str) -> str:
        """Absolute URL for an API path such as "speech" or "voices/Rebecca"."""
        return str(self.base_url).rstrip("/") + "/" + path.lstrip("/")
