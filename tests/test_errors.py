"""Tests for the error taxonomy."""

from envelope_rest.errors import (
    BadStatusError,
    ConnectionFailedError,
    DecodeError,
    RequestTimeoutError,
    RestError,
    TransportError,
)


def test_rest_error_message_without_context():
    """An unbound error prints just its detail."""
    assert str(RestError("something broke")) == "something broke"


def test_rest_error_bind_formats_context():
    """Binding adds the resource and operation to the message."""
    exc = RestError("something broke").bind(resource="labels", operation="create")
    assert str(exc) == "[labels] create failed: something broke"
    assert exc.detail == "something broke"


def test_bind_keeps_existing_context():
    """bind never overwrites context that is already set."""
    exc = RestError("x", resource="users", operation="get")
    exc.bind(resource="labels", operation="select")
    assert exc.resource == "users"
    assert exc.operation == "get"


def test_rest_error_with_cause():
    """cause is chained as __cause__."""
    cause = ValueError("original")
    exc = RestError("wrapped", cause=cause)
    assert exc.__cause__ is cause


def test_transport_errors_are_rest_errors():
    for exc in (BadStatusError(500), ConnectionFailedError("down"), RequestTimeoutError("slow")):
        assert isinstance(exc, TransportError)
        assert isinstance(exc, RestError)


def test_decode_error_is_not_transport_error():
    """Decode and transport failures are distinct branches."""
    assert not isinstance(DecodeError("bad"), TransportError)
    assert isinstance(DecodeError("bad"), RestError)


def test_bad_status_default_detail():
    exc = BadStatusError(418)
    assert exc.status_code == 418
    assert exc.body == b""
    assert str(exc) == "unexpected status 418"
    assert not exc.is_not_found
    assert BadStatusError(404).is_not_found


def test_decode_error_path_prefixing():
    """Each at() call prepends one segment to the dotted path."""
    exc = DecodeError("bad id").at("id").at(2).at("data")
    assert exc.path == "data.2.id"
    assert str(exc) == "bad id (at data.2.id)"
