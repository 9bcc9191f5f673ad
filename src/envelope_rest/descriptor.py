"""Per-resource configuration shared by every CRUD operation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Sequence, TypeVar

from pydantic import BaseModel, ValidationError

from envelope_rest.errors import DecodeError, RestError
from envelope_rest.identifiers import Identifier, unwrap, wrap

TagT = TypeVar("TagT")
V = TypeVar("V")
P = TypeVar("P")
M = TypeVar("M", bound=BaseModel)

QueryParams = list[tuple[str, str]]


def identity_error(error: RestError) -> Exception:
    """Default error mapping: surface the package's own exception."""
    return error


def no_params(params: Any) -> QueryParams:
    """Parameter encoder for resources that take no query parameters."""
    if params is not None:
        raise TypeError(f"this resource accepts no query parameters, got {type(params).__name__}")
    return []


@dataclass(frozen=True)
class ResourceDescriptor(Generic[TagT, V, P]):
    """Everything the CRUD operations need to know about one backend resource.

    Build one per resource kind and share it freely: it is never mutated,
    so concurrent operations can use the same instance without locking.

    Attributes:
        path: Collection path relative to the base URL, e.g. ``"users"``.
        decode_value: Parses one JSON object of the ``data`` array into a value.
        encode_value: Serializes a value into the JSON request body. The
            identifier is assigned by the backend and must not be emitted.
        wrap_identifier: Builds a typed identifier from a raw integer.
        unwrap_identifier: Inverse of ``wrap_identifier``.
        map_error: Converts a :class:`RestError` into the exception the
            caller wants raised.
        encode_params: Converts the caller's query-parameter value into an
            ordered list of ``(key, value)`` string pairs.
    """

    path: str
    decode_value: Callable[[Any], V]
    encode_value: Callable[[V], Any]
    wrap_identifier: Callable[[int], Identifier[TagT]] = field(default=wrap)
    unwrap_identifier: Callable[[Identifier[TagT]], int] = field(default=unwrap)
    map_error: Callable[[RestError], Exception] = field(default=identity_error)
    encode_params: Callable[[P], Sequence[tuple[str, str]]] = field(default=no_params)

    @property
    def name(self) -> str:
        return self.path.strip("/")


def model_decoder(model: type[M]) -> Callable[[Any], M]:
    """Decoder validating a JSON object against a pydantic model."""

    def decode(obj: Any) -> M:
        try:
            return model.model_validate(obj)
        except ValidationError as exc:
            errors = exc.errors()
            loc = ".".join(str(part) for part in errors[0]["loc"]) if errors else ""
            raise DecodeError(
                f"{model.__name__} validation failed: {errors[0]['msg'] if errors else exc}",
                path=loc,
                cause=exc,
            ) from exc

    return decode


def model_encoder(model: type[M]) -> Callable[[M], Any]:
    """Encoder dumping a pydantic model to JSON-compatible data, minus ``id``."""

    def encode(value: M) -> Any:
        return value.model_dump(mode="json", exclude={"id"})

    return encode


def _param_value(key: str, value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise TypeError(f"query parameter {key!r} must be a scalar or a list of scalars, got {type(value).__name__}")


def model_params_encoder(params_model: type[BaseModel]) -> Callable[[BaseModel | None], QueryParams]:
    """Encode a pydantic params model as query pairs in field-declaration order.

    ``None`` fields are skipped; list fields become repeated keys. Nested
    objects have no query-string form and raise :class:`TypeError`.
    """

    def encode(params: BaseModel | None) -> QueryParams:
        if params is None:
            return []
        if not isinstance(params, params_model):
            raise TypeError(f"expected {params_model.__name__}, got {type(params).__name__}")
        dumped = params.model_dump(mode="json", by_alias=True, exclude_none=True)
        pairs: QueryParams = []
        for key, value in dumped.items():
            if isinstance(value, list):
                pairs.extend((key, _param_value(key, item)) for item in value)
            else:
                pairs.append((key, _param_value(key, value)))
        return pairs

    return encode


def model_descriptor(
    path: str,
    model: type[M],
    *,
    params_model: type[BaseModel] | None = None,
    map_error: Callable[[RestError], Exception] = identity_error,
    wrap_identifier: Callable[[int], Identifier[Any]] = wrap,
    unwrap_identifier: Callable[[Identifier[Any]], int] = unwrap,
) -> ResourceDescriptor[Any, M, Any]:
    """Build a :class:`ResourceDescriptor` whose values are instances of ``model``.

    Example::

        class User(BaseModel):
            name: str
            email: str

        users = model_descriptor("users", User)
    """
    return ResourceDescriptor(
        path=path,
        decode_value=model_decoder(model),
        encode_value=model_encoder(model),
        wrap_identifier=wrap_identifier,
        unwrap_identifier=unwrap_identifier,
        map_error=map_error,
        encode_params=model_params_encoder(params_model) if params_model is not None else no_params,
    )
