"""Typed entity identifiers.

``Identifier[Tag]`` wraps the backend's integer id. ``Tag`` is a phantom
type parameter: it is never instantiated and only lets the type checker
reject an ``Identifier[User]`` where an ``Identifier[Order]`` is expected.
At runtime an identifier is just an immutable box around an ``int``.
"""

from __future__ import annotations

import re
from typing import Any, Generic, TypeVar

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

from envelope_rest.errors import DecodeError

TagT = TypeVar("TagT")

# JSON-style integer text: ASCII digits, optional sign, no underscores.
_INT_STRING_RE = re.compile(r"^\s*[+-]?\d+\s*$", re.ASCII)


class Identifier(Generic[TagT]):
    """Opaque integer id belonging to the resource kind ``TagT``."""

    __slots__ = ("_value",)

    def __init__(self, value: int) -> None:
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def value(self) -> int:
        return self._value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Identifier):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash((Identifier, self._value))

    def __repr__(self) -> str:
        return f"Identifier({self._value})"

    def __reduce__(self) -> tuple[Any, ...]:
        return (Identifier, (self._value,))

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            _validate_identifier,
            serialization=core_schema.plain_serializer_function_ser_schema(
                encode_identifier,
                return_schema=core_schema.int_schema(),
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {"type": "integer"}


def wrap(value: int) -> Identifier[Any]:
    """Wrap a raw integer. No sign or range check: the backend is authoritative."""
    return Identifier(value)


def unwrap(identifier: Identifier[Any]) -> int:
    """Return the raw integer behind ``identifier``."""
    return identifier.value


def decode_identifier(raw: Any) -> Identifier[Any]:
    """Decode a JSON number or numeric string into an :class:`Identifier`.

    Raises:
        DecodeError: If ``raw`` is not integer-coercible. Booleans and
            fractional numbers are rejected.
    """
    return Identifier(_coerce_int(raw))


def encode_identifier(identifier: Identifier[Any]) -> int:
    """Encode ``identifier`` as a bare JSON number."""
    return identifier.value


def _coerce_int(raw: Any) -> int:
    if isinstance(raw, bool):
        raise DecodeError(f"expected an integer id, got {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if raw.is_integer():
            return int(raw)
        raise DecodeError(f"expected an integer id, got {raw!r}")
    if isinstance(raw, str):
        if not _INT_STRING_RE.match(raw):
            raise DecodeError(f"expected a numeric string id, got {raw!r}")
        return int(raw.strip())
    raise DecodeError(f"expected an integer id, got {type(raw).__name__}")


def _validate_identifier(raw: Any) -> Identifier[Any]:
    if isinstance(raw, Identifier):
        return raw
    try:
        return decode_identifier(raw)
    except DecodeError as exc:
        # pydantic only converts ValueError into a ValidationError
        raise ValueError(exc.detail) from exc
