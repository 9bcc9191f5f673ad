"""Decoders for the backend's ``{"data": [...]}`` response envelope.

A decoder is any callable taking an already-parsed JSON value and returning
a Python value, raising :class:`~envelope_rest.errors.DecodeError` when the
input does not fit. The helpers here build envelope-aware decoders out of
per-entity ones; none of them perform I/O.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, NamedTuple, TypeVar

from envelope_rest.errors import DecodeError
from envelope_rest.identifiers import Identifier, _coerce_int

T = TypeVar("T")
V = TypeVar("V")
TagT = TypeVar("TagT")

Decoder = Callable[[Any], T]

DATA_FIELD = "data"
ID_FIELD = "id"


class Entity(NamedTuple, Generic[TagT, V]):
    """A decoded resource instance: its identifier and its value."""

    id: Identifier[TagT]
    value: V


def _data_array(body: Any) -> list[Any]:
    if not isinstance(body, dict):
        raise DecodeError(f"expected a JSON object envelope, got {type(body).__name__}")
    if DATA_FIELD not in body:
        raise DecodeError(f"missing '{DATA_FIELD}' field")
    data = body[DATA_FIELD]
    if not isinstance(data, list):
        raise DecodeError(f"expected an array, got {type(data).__name__}", path=DATA_FIELD)
    return data


def decode_collection(inner: Decoder[T]) -> Decoder[list[T]]:
    """Decode every element of the ``data`` array with ``inner``, preserving order."""

    def decode(body: Any) -> list[T]:
        items: list[T] = []
        for index, element in enumerate(_data_array(body)):
            try:
                items.append(inner(element))
            except DecodeError as exc:
                raise exc.at(index).at(DATA_FIELD)
        return items

    return decode


def decode_single(inner: Decoder[T]) -> Decoder[T]:
    """Decode the first element of the ``data`` array with ``inner``.

    The backend wraps single entities in a one-element array; anything past
    index 0 is ignored.
    """

    def decode(body: Any) -> T:
        data = _data_array(body)
        if not data:
            raise DecodeError("expected at least one element, got an empty array", path=DATA_FIELD)
        try:
            return inner(data[0])
        except DecodeError as exc:
            raise exc.at(0).at(DATA_FIELD)

    return decode


def decode_entity_id(wrap_identifier: Callable[[int], Identifier[TagT]]) -> Decoder[Identifier[TagT]]:
    """Read the ``"id"`` field of a JSON object and wrap it."""

    def decode(obj: Any) -> Identifier[TagT]:
        if not isinstance(obj, dict):
            raise DecodeError(f"expected a JSON object, got {type(obj).__name__}")
        if ID_FIELD not in obj:
            raise DecodeError(f"missing '{ID_FIELD}' field")
        try:
            return wrap_identifier(_coerce_int(obj[ID_FIELD]))
        except DecodeError as exc:
            raise exc.at(ID_FIELD)

    return decode


def decode_entity(
    wrap_identifier: Callable[[int], Identifier[TagT]],
    decode_value: Decoder[V],
) -> Decoder[Entity[TagT, V]]:
    """Decode one JSON object into an :class:`Entity` tuple."""
    decode_id = decode_entity_id(wrap_identifier)

    def decode(obj: Any) -> Entity[TagT, V]:
        return Entity(decode_id(obj), decode_value(obj))

    return decode
