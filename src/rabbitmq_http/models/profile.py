"""Configuration models persisted as JSON in the user's config directory.

:class:`ConnectionProfile` describes one broker's management endpoint and
how to obtain the password for it; :class:`GlobalConfig` holds user-wide
defaults. Both are loaded and saved by :mod:`rabbitmq_http.config`.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ENDPOINT = "http://localhost:15672/api"
DEFAULT_USERNAME = "guest"


class RequestConfig(BaseModel):
    """Transport settings applied to every request made with a profile."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/rabbitmq-http/config.json``.

    Fields here have the lowest precedence and can be overridden by project
    config, environment variables, or CLI flags. See
    :func:`~rabbitmq_http.config.resolve_config` for the full chain.
    """

    default_profile: Optional[str] = None
    auto_select_single_profile: bool = True
    output: OutputConfig = Field(default_factory=OutputConfig)


class ConnectionProfile(BaseModel):
    """A named management endpoint, stored as ``profiles/<name>.json``.

    The password is never stored directly; ``password_source`` says where
    to read it from at connection time (see
    :func:`~rabbitmq_http.config.resolve_credential`).

    Example::

        ConnectionProfile(
            name="staging",
            endpoint="https://rabbit.staging.internal:15671/api",
            username="ops",
            password_source="env:RABBITMQ_STAGING_PASSWORD",
        )
    """

    model_config = ConfigDict(extra="allow")

    name: str
    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="Management API base URL")
    username: str = DEFAULT_USERNAME
    password_source: str = Field(
        default="literal:guest",
        description="Credential source: env:VAR, file:/path, prompt, literal:value",
    )
    request: RequestConfig = Field(default_factory=RequestConfig)

    @field_validator("endpoint")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"endpoint must be an http(s) URL, got {value!r}")
        return value.rstrip("/")
