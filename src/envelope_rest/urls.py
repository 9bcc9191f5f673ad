"""URL joining and credential handling for outbound requests."""

from __future__ import annotations

import re
from typing import Sequence

ACCESS_TOKEN_PARAM = "access_token"

# Matches the value of an access_token query parameter.
_TOKEN_RE = re.compile(rf"([?&]{ACCESS_TOKEN_PARAM}=)[^&#]*")


def join_url(base: str, *segments: str) -> str:
    """Join URL parts with exactly one ``/`` between each pair.

    >>> join_url("https://api.test/v1/", "/users", "7")
    'https://api.test/v1/users/7'
    >>> join_url("a/", "/b")
    'a/b'
    """
    url = base
    for segment in segments:
        if not segment:
            continue
        url = f"{url.rstrip('/')}/{segment.lstrip('/')}"
    return url


def with_access_token(params: Sequence[tuple[str, str]], token: str | None) -> list[tuple[str, str]]:
    """Return ``params`` with ``("access_token", token)`` appended when a token is given."""
    pairs = list(params)
    if token is not None:
        pairs.append((ACCESS_TOKEN_PARAM, token))
    return pairs


def redact_url(url: str) -> str:
    """Replace the access_token value in a URL with ``***``.

    >>> redact_url("https://api.test/users?limit=5&access_token=s3cret")
    'https://api.test/users?limit=5&access_token=***'
    """
    return _TOKEN_RE.sub(r"\1***", url)


def redact_params(params: Sequence[tuple[str, str]]) -> list[tuple[str, str]]:
    """Copy of ``params`` safe for logging."""
    return [(key, "***" if key == ACCESS_TOKEN_PARAM else value) for key, value in params]
