"""CRUD operations against an enveloped REST backend.

Each operation is an independent coroutine taking the transport, the base
URL, an optional access token, a :class:`ResourceDescriptor` and its own
arguments. Every operation issues exactly one request. Failures are raised
after passing through ``resource.map_error``; the only recovery is
:func:`get`, which reports a 404 as ``None``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, NoReturn, Sequence, TypeVar

from envelope_rest.descriptor import ResourceDescriptor
from envelope_rest.envelope import Entity, decode_collection, decode_entity, decode_single
from envelope_rest.errors import BadStatusError, DecodeError, RestError
from envelope_rest.identifiers import Identifier
from envelope_rest.transport import RawResponse, Transport
from envelope_rest.urls import join_url, redact_params, redact_url, with_access_token

logger = logging.getLogger(__name__)

TagT = TypeVar("TagT")
V = TypeVar("V")
P = TypeVar("P")
T = TypeVar("T")

GET = "GET"
POST = "POST"
PUT = "PUT"
PATCH = "PATCH"
DELETE = "DELETE"


def _query(resource: ResourceDescriptor[Any, Any, P], params: P | None, token: str | None) -> list[tuple[str, str]]:
    return with_access_token(resource.encode_params(params), token)


def _entity_url(base_url: str, resource: ResourceDescriptor[TagT, Any, Any], identifier: Identifier[TagT]) -> str:
    return join_url(base_url, resource.path, str(resource.unwrap_identifier(identifier)))


async def _send(
    transport: Transport,
    method: str,
    url: str,
    params: Sequence[tuple[str, str]],
    body: Any | None = None,
) -> RawResponse:
    logger.debug("%s %s params=%s", method, redact_url(url), redact_params(params))
    return await transport.send(method, url, params, body)


def _decode(decoder: Callable[[Any], T], response: RawResponse) -> T:
    try:
        return decoder(response.json())
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise DecodeError(f"value decoder failed: {type(exc).__name__}: {exc}", cause=exc) from exc


def _raise_mapped(resource: ResourceDescriptor[Any, Any, Any], operation: str, error: RestError) -> NoReturn:
    error.bind(resource=resource.name, operation=operation)
    logger.warning("%s on %s failed: %s", operation, resource.name, type(error).__name__)
    mapped = resource.map_error(error)
    if mapped is error:
        raise error
    raise mapped from error


async def select(
    transport: Transport,
    base_url: str,
    token: str | None,
    resource: ResourceDescriptor[TagT, V, P],
    params: P | None = None,
) -> list[Entity[TagT, V]]:
    """List the resource collection, in the order the backend returns it."""
    url = join_url(base_url, resource.path)
    decoder = decode_collection(decode_entity(resource.wrap_identifier, resource.decode_value))
    try:
        response = await _send(transport, GET, url, _query(resource, params, token))
        return _decode(decoder, response)
    except RestError as exc:
        _raise_mapped(resource, "select", exc)


async def get(
    transport: Transport,
    base_url: str,
    token: str | None,
    resource: ResourceDescriptor[TagT, V, P],
    identifier: Identifier[TagT],
    params: P | None = None,
) -> Entity[TagT, V] | None:
    """Fetch one entity, returning ``None`` when the backend answers 404.

    Any other failure is mapped and raised.
    """
    url = _entity_url(base_url, resource, identifier)
    decoder = decode_single(decode_entity(resource.wrap_identifier, resource.decode_value))
    try:
        response = await _send(transport, GET, url, _query(resource, params, token))
        return _decode(decoder, response)
    except BadStatusError as exc:
        if exc.is_not_found:
            logger.debug("get on %s: %s not found", resource.name, redact_url(url))
            return None
        _raise_mapped(resource, "get", exc)
    except RestError as exc:
        _raise_mapped(resource, "get", exc)


async def get_404(
    transport: Transport,
    base_url: str,
    token: str | None,
    resource: ResourceDescriptor[TagT, V, P],
    identifier: Identifier[TagT],
    params: P | None = None,
) -> Entity[TagT, V]:
    """Fetch one entity that must exist; a 404 is raised like any other failure."""
    url = _entity_url(base_url, resource, identifier)
    decoder = decode_single(decode_entity(resource.wrap_identifier, resource.decode_value))
    try:
        response = await _send(transport, GET, url, _query(resource, params, token))
        return _decode(decoder, response)
    except RestError as exc:
        _raise_mapped(resource, "get_404", exc)


async def create(
    transport: Transport,
    base_url: str,
    token: str | None,
    resource: ResourceDescriptor[TagT, V, P],
    value: V,
    params: P | None = None,
) -> Entity[TagT, V]:
    """POST a new entity and return it with its backend-assigned identifier."""
    url = join_url(base_url, resource.path)
    body = resource.encode_value(value)
    decoder = decode_single(decode_entity(resource.wrap_identifier, resource.decode_value))
    try:
        response = await _send(transport, POST, url, _query(resource, params, token), body)
        return _decode(decoder, response)
    except RestError as exc:
        _raise_mapped(resource, "create", exc)


async def replace(
    transport: Transport,
    base_url: str,
    token: str | None,
    resource: ResourceDescriptor[TagT, V, P],
    identifier: Identifier[TagT],
    value: V,
    params: P | None = None,
) -> V:
    """PUT a full value and return the value echoed back by the backend."""
    url = _entity_url(base_url, resource, identifier)
    body = resource.encode_value(value)
    try:
        response = await _send(transport, PUT, url, _query(resource, params, token), body)
        return _decode(decode_single(resource.decode_value), response)
    except RestError as exc:
        _raise_mapped(resource, "replace", exc)


async def replace_ignore_response(
    transport: Transport,
    base_url: str,
    token: str | None,
    resource: ResourceDescriptor[TagT, V, P],
    identifier: Identifier[TagT],
    value: V,
    params: P | None = None,
) -> None:
    """PUT a full value; the response body is not read."""
    url = _entity_url(base_url, resource, identifier)
    body = resource.encode_value(value)
    try:
        await _send(transport, PUT, url, _query(resource, params, token), body)
    except RestError as exc:
        _raise_mapped(resource, "replace_ignore_response", exc)


async def patch(
    transport: Transport,
    base_url: str,
    token: str | None,
    resource: ResourceDescriptor[TagT, V, P],
    identifier: Identifier[TagT],
    patch_body: Any,
    params: P | None = None,
) -> V:
    """PATCH with a raw partial JSON document and return the updated value.

    ``patch_body`` is sent verbatim, not through ``resource.encode_value``:
    a partial update need not be a complete value.
    """
    url = _entity_url(base_url, resource, identifier)
    try:
        response = await _send(transport, PATCH, url, _query(resource, params, token), patch_body)
        return _decode(decode_single(resource.decode_value), response)
    except RestError as exc:
        _raise_mapped(resource, "patch", exc)


async def patch_ignore_response(
    transport: Transport,
    base_url: str,
    token: str | None,
    resource: ResourceDescriptor[TagT, V, P],
    identifier: Identifier[TagT],
    patch_body: Any,
    params: P | None = None,
) -> None:
    """PATCH with a raw partial JSON document; the response body is not read."""
    url = _entity_url(base_url, resource, identifier)
    try:
        await _send(transport, PATCH, url, _query(resource, params, token), patch_body)
    except RestError as exc:
        _raise_mapped(resource, "patch_ignore_response", exc)


async def delete(
    transport: Transport,
    base_url: str,
    token: str | None,
    resource: ResourceDescriptor[TagT, V, P],
    identifier: Identifier[TagT],
    params: P | None = None,
) -> None:
    """DELETE one entity; the response body is not read."""
    url = _entity_url(base_url, resource, identifier)
    try:
        await _send(transport, DELETE, url, _query(resource, params, token))
    except RestError as exc:
        _raise_mapped(resource, "delete", exc)
