"""Client configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .exceptions import ConfigError, SplitAdminErrorCodes

__version__ = "0.1.0"

DEFAULT_API_BASE_URL = "https://api.split.io/internal/api/v2"
DEFAULT_FLAG_SETS_URL = "https://api.split.io/api/v3/flag-sets"
DEFAULT_USER_AGENT = f"split-admin/{__version__}"
DEFAULT_CONTENT_TYPE = "application/json"
DEFAULT_ACCEPT = "application/json"
DEFAULT_CLIENT_TIMEOUT = 300  # 5 min
DEFAULT_REQUEST_TIMEOUT = 120.0

# Environment variable -> config field
ENV_OVERRIDES: dict[str, str] = {
    "SPLIT_API_KEY": "api_key",
    "SPLIT_API_URL": "base_url",
    "HARNESS_TOKEN": "harness_token",
    "SPLIT_CLIENT_TIMEOUT": "client_timeout",
}


class AuthScheme(StrEnum):
    """Authentication header scheme."""

    BEARER = "bearer"
    API_KEY_HEADER = "api_key_header"


class SplitConfig(BaseModel):
    """Configuration for SplitClient.

    Exactly one of ``api_key`` (sent as ``Authorization: Bearer``) or
    ``harness_token`` (sent as ``x-api-key``) must be set.
    """

    base_url: str = DEFAULT_API_BASE_URL
    flag_sets_url: str = DEFAULT_FLAG_SETS_URL
    api_key: str = ""
    harness_token: str = ""
    user_agent: str = DEFAULT_USER_AGENT
    content_type: str = DEFAULT_CONTENT_TYPE
    accept: str = DEFAULT_ACCEPT
    client_timeout: int = Field(default=DEFAULT_CLIENT_TIMEOUT, ge=0)
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("base_url", "flag_sets_url")
    @classmethod
    def _no_trailing_slash(cls, value: str) -> str:
        if not value:
            raise ValueError("URL must not be empty")
        if value.endswith("/"):
            raise ValueError("custom base URL cannot contain a trailing slash")
        return value

    @model_validator(mode="after")
    def _exactly_one_credential(self) -> SplitConfig:
        if self.api_key and self.harness_token:
            raise ValueError("api_key and harness_token are mutually exclusive")
        if not self.api_key and not self.harness_token:
            raise ValueError("one of api_key or harness_token is required")
        return self

    @property
    def auth_scheme(self) -> AuthScheme:
        if self.harness_token:
            return AuthScheme.API_KEY_HEADER
        return AuthScheme.BEARER

    def auth_headers(self) -> dict[str, str]:
        """Return the single authentication header for the active scheme."""
        if self.auth_scheme is AuthScheme.API_KEY_HEADER:
            return {"x-api-key": self.harness_token}
        return {"Authorization": f"Bearer {self.api_key}"}


def read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            code=SplitAdminErrorCodes.READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            code=SplitAdminErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    if not isinstance(data, dict):
        raise ConfigError(
            code=SplitAdminErrorCodes.PARSE_YAML,
            message=f"Config file must contain a mapping: {path}",
        )
    return data


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> SplitConfig:
    """Build a SplitConfig from an optional YAML file and environment variables.

    path: YAML file with SplitConfig fields (optional).
    environ: variables to read overrides from; defaults to ``os.environ``.
    Non-empty environment values win over the file.
    """
    data: dict[str, Any] = read_yaml(path) if path is not None else {}
    env = os.environ if environ is None else environ
    for var, field_name in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            data[field_name] = value
    try:
        return SplitConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            code=SplitAdminErrorCodes.CONFIG_VALIDATION,
            message=f"Config validation failed: {e}",
            cause=e,
        ) from e
