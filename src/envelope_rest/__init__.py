"""Envelope REST — typed CRUD client for REST backends using the ``{"data": [...]}`` envelope."""

from envelope_rest.client import ResourceClient
from envelope_rest.config import ClientConfig
from envelope_rest.descriptor import (
    ResourceDescriptor,
    identity_error,
    model_decoder,
    model_descriptor,
    model_encoder,
    model_params_encoder,
    no_params,
)
from envelope_rest.envelope import Decoder, Entity, decode_collection, decode_entity, decode_entity_id, decode_single
from envelope_rest.errors import (
    BadStatusError,
    ConnectionFailedError,
    DecodeError,
    RequestTimeoutError,
    RestError,
    TransportError,
)
from envelope_rest.identifiers import Identifier, decode_identifier, encode_identifier, unwrap, wrap
from envelope_rest.operations import (
    create,
    delete,
    get,
    get_404,
    patch,
    patch_ignore_response,
    replace,
    replace_ignore_response,
    select,
)
from envelope_rest.transport import HttpxTransport, RawResponse, Transport
from envelope_rest.urls import join_url, redact_url, with_access_token

__all__ = [
    "BadStatusError",
    "ClientConfig",
    "ConnectionFailedError",
    "DecodeError",
    "Decoder",
    "Entity",
    "HttpxTransport",
    "Identifier",
    "RawResponse",
    "RequestTimeoutError",
    "ResourceClient",
    "ResourceDescriptor",
    "RestError",
    "Transport",
    "TransportError",
    "create",
    "decode_collection",
    "decode_entity",
    "decode_entity_id",
    "decode_identifier",
    "decode_single",
    "delete",
    "encode_identifier",
    "get",
    "get_404",
    "identity_error",
    "join_url",
    "model_decoder",
    "model_descriptor",
    "model_encoder",
    "model_params_encoder",
    "no_params",
    "patch",
    "patch_ignore_response",
    "redact_url",
    "replace",
    "replace_ignore_response",
    "select",
    "unwrap",
    "with_access_token",
    "wrap",
]
