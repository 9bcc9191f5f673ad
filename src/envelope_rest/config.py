"""Client configuration loaded from .envelope_rest/client.json."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = ".envelope_rest/client.json"
BASE_URL_ENV = "ENVELOPE_REST_BASE_URL"
ACCESS_TOKEN_ENV = "ENVELOPE_REST_ACCESS_TOKEN"

_ENV_PREFIX = "$env:"


class ClientConfig(BaseModel):
    """Where the backend lives and how to talk to it.

    ``access_token`` supports two formats:

    - ``$env:VAR_NAME`` — resolved from an environment variable at load time
    - plain string — used as-is
    """

    base_url: str = Field(min_length=1, description="Absolute http(s) URL of the API root.")
    access_token: str | None = Field(default=None, description="Credential sent as the access_token parameter.")
    timeout_seconds: float = Field(default=30.0, gt=0, description="Per-request timeout (seconds).")
    headers: dict[str, str] = Field(default_factory=dict, description="Extra headers sent with every request.")
    verify_tls: bool = Field(default=True, description="Verify TLS certificates.")

    model_config = {"extra": "forbid"}

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"base_url must be an HTTP(S) URL, got: '{v}'")
        if not parsed.hostname:
            raise ValueError(f"base_url must include a hostname, got: '{v}'")
        return v

    @field_validator("access_token")
    @classmethod
    def _resolve_access_token(cls, v: str | None) -> str | None:
        if v is None or not v.startswith(_ENV_PREFIX):
            return v
        var_name = v[len(_ENV_PREFIX) :]
        resolved = os.environ.get(var_name)
        if resolved is None:
            logger.warning("access_token references unset environment variable %s", var_name)
        return resolved

    @classmethod
    def from_file(cls, path: str | Path = DEFAULT_CONFIG_PATH) -> ClientConfig:
        """Load config from a JSON file, falling back to environment variables.

        Raises:
            ValueError: If neither the file nor ``ENVELOPE_REST_BASE_URL``
                provides a base URL.
        """
        p = Path(path)
        if p.exists():
            data: dict[str, Any] = json.loads(p.read_text())
            return cls.model_validate(data)
        base_url = os.environ.get(BASE_URL_ENV)
        if not base_url:
            raise ValueError(f"No client config at '{p}' and {BASE_URL_ENV} is not set.")
        return cls(base_url=base_url, access_token=os.environ.get(ACCESS_TOKEN_ENV))
