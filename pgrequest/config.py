"""
Client configuration, read from keyword arguments or ``PGREQUEST_*`` variables.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_SCHEMA = "public"


class ClientConfig(BaseSettings):
    """
    Connection settings for a PostgREST endpoint.

    Every field can come from the environment: ``PGREQUEST_URL``,
    ``PGREQUEST_SCHEMA``, ``PGREQUEST_TOKEN``, ``PGREQUEST_USERNAME``,
    ``PGREQUEST_PASSWORD`` and ``PGREQUEST_TIMEOUT``. Keyword arguments win
    over the environment, and empty variables count as unset.
    """
    base_url: str = Field(DEFAULT_BASE_URL, validation_alias="PGREQUEST_URL", description="Root URL of the PostgREST server")
    schema_name: str = Field(DEFAULT_SCHEMA, validation_alias="PGREQUEST_SCHEMA", description="Schema sent in the profile headers")
    token: Optional[str] = Field(None, description="Bearer token")
    username: Optional[str] = Field(None, description="Basic-auth user; takes precedence over token")
    password: str = Field("", description="Basic-auth password")
    timeout: float = Field(10.0, gt=0, description="Per-request timeout in seconds")

    model_config = SettingsConfigDict(
        env_prefix="PGREQUEST_",
        env_ignore_empty=True,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_env(cls, **overrides) -> "ClientConfig":
        """Build a configuration from the environment, with keyword overrides on top."""
        return cls(**overrides)
