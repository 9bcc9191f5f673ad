"""HTTP transport used by the CRUD operations.

Operations only depend on the :class:`Transport` protocol; the httpx-backed
implementation below is the default. One ``send`` call issues exactly one
request, with no retry, caching or deduplication.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, Sequence, runtime_checkable

import httpx

from envelope_rest.errors import BadStatusError, ConnectionFailedError, DecodeError, RequestTimeoutError
from envelope_rest.urls import redact_url

if TYPE_CHECKING:
    from envelope_rest.config import ClientConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_HEADERS = {"Accept": "application/json", "User-Agent": "envelope-rest/0.1"}


@dataclass(frozen=True)
class RawResponse:
    """A successful (2xx) response as received from the backend."""

    status_code: int
    content: bytes = b""

    def json(self) -> Any:
        """Parse the body as JSON, raising :class:`DecodeError` on malformed input."""
        try:
            return json.loads(self.content)
        except (ValueError, UnicodeDecodeError) as exc:
            raise DecodeError("response body is not valid JSON", cause=exc) from exc


@runtime_checkable
class Transport(Protocol):
    """Sends one request and returns the 2xx response.

    Implementations raise :class:`BadStatusError` for non-2xx answers and
    another :class:`~envelope_rest.errors.TransportError` subclass for
    network failures and timeouts. ``body`` is ``None`` when the request has
    no body; otherwise it is JSON-serialized.
    """

    async def send(
        self,
        method: str,
        url: str,
        params: Sequence[tuple[str, str]],
        body: Any | None = None,
    ) -> RawResponse: ...


class HttpxTransport:
    """:class:`Transport` backed by ``httpx.AsyncClient``.

    Pass ``client`` to share an existing connection pool; otherwise a client
    is created and closed together with this transport.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        headers: dict[str, str] | None = None,
        verify: bool = True,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            merged = dict(DEFAULT_HEADERS)
            if headers:
                merged.update(headers)
            client = httpx.AsyncClient(timeout=httpx.Timeout(timeout), headers=merged, verify=verify)
        self._client = client

    @classmethod
    def from_config(cls, config: ClientConfig) -> HttpxTransport:
        return cls(timeout=config.timeout_seconds, headers=config.headers, verify=config.verify_tls)

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def send(
        self,
        method: str,
        url: str,
        params: Sequence[tuple[str, str]],
        body: Any | None = None,
    ) -> RawResponse:
        kwargs: dict[str, Any] = {"params": list(params)}
        if body is not None:
            kwargs["json"] = body
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            logger.error("%s %s timed out: %s", method, redact_url(url), type(exc).__name__)
            raise RequestTimeoutError(f"{method} {redact_url(url)} timed out", cause=exc) from exc
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, redact_url(url), type(exc).__name__)
            raise ConnectionFailedError(
                f"{method} {redact_url(url)} could not be completed ({type(exc).__name__})",
                cause=exc,
            ) from exc

        logger.debug("%s %s -> %d", method, redact_url(str(response.url)), response.status_code)
        if not response.is_success:
            raise BadStatusError(
                response.status_code,
                f"{method} {redact_url(str(response.url))} returned {response.status_code}",
                body=response.content,
            )
        return RawResponse(status_code=response.status_code, content=response.content)

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
