"""Tests for typed identifiers."""

import pickle

import pytest
from envelope_rest.errors import DecodeError
from envelope_rest.identifiers import Identifier, decode_identifier, encode_identifier, unwrap, wrap
from pydantic import BaseModel, ValidationError


class User:
    pass


class UserRecord(BaseModel):
    id: Identifier[User]
    name: str


class TestWrapUnwrap:
    @pytest.mark.parametrize("n", [0, 1, 42, 2**40])
    def test_round_trip(self, n):
        """unwrap(wrap(n)) gives back n."""
        assert unwrap(wrap(n)) == n

    def test_wrap_of_unwrap_is_equal(self):
        """wrap(unwrap(x)) is interchangeable with x, hash included."""
        x = Identifier[User](7)
        assert wrap(unwrap(x)) == x
        assert hash(wrap(unwrap(x))) == hash(x)

    def test_wrap_does_not_validate_sign(self):
        """The backend is authoritative on sign and range."""
        assert unwrap(wrap(-3)) == -3

    def test_value_property(self):
        assert Identifier(9).value == 9

    def test_repr(self):
        assert repr(Identifier(9)) == "Identifier(9)"

    def test_not_equal_to_raw_int(self):
        """An identifier never compares equal to a bare integer."""
        assert Identifier(9) != 9

    def test_immutable(self):
        """Assigning or adding attributes raises AttributeError."""
        x = Identifier(1)
        with pytest.raises(AttributeError):
            x._value = 2
        with pytest.raises(AttributeError):
            x.other = 2
        with pytest.raises(AttributeError):
            del x._value

    def test_slotted(self):
        """Instances carry a single slot and no per-instance __dict__."""
        assert Identifier.__slots__ == ("_value",)
        assert not hasattr(Identifier(1), "__dict__")

    def test_usable_as_dict_key(self):
        seen = {Identifier(1): "a", Identifier(2): "b"}
        assert seen[wrap(1)] == "a"

    def test_pickles(self):
        assert pickle.loads(pickle.dumps(Identifier(5))) == Identifier(5)


class TestDecodeIdentifier:
    def test_int(self):
        assert decode_identifier(5) == Identifier(5)

    def test_numeric_string(self):
        assert decode_identifier("12") == Identifier(12)

    def test_numeric_string_with_whitespace(self):
        """Surrounding whitespace is tolerated."""
        assert decode_identifier(" 12 ") == Identifier(12)

    @pytest.mark.parametrize(("raw", "expected"), [("+5", 5), ("-3", -3)])
    def test_signed_numeric_string(self, raw, expected):
        """A leading sign is accepted."""
        assert decode_identifier(raw) == Identifier(expected)

    def test_integral_float(self):
        assert decode_identifier(3.0) == Identifier(3)

    @pytest.mark.parametrize(
        "raw",
        [True, False, 3.5, "abc", "1.5", "", None, [1], {"id": 1}, "1_000", "١٢", "1 2"],
    )
    def test_rejects_non_integer(self, raw):
        """Booleans, fractions, underscores, non-ASCII digits and non-numbers are rejected."""
        with pytest.raises(DecodeError):
            decode_identifier(raw)

    def test_encode_is_bare_number(self):
        assert encode_identifier(Identifier(5)) == 5


class TestPydanticIntegration:
    def test_validates_int(self):
        """A model field typed Identifier[T] accepts a bare integer."""
        record = UserRecord.model_validate({"id": 3, "name": "ada"})
        assert record.id == Identifier(3)

    def test_validates_numeric_string(self):
        record = UserRecord.model_validate({"id": "4", "name": "ada"})
        assert record.id == Identifier(4)

    def test_accepts_identifier_instance(self):
        record = UserRecord(id=Identifier(5), name="ada")
        assert record.id == Identifier(5)

    def test_rejects_garbage(self):
        """Non-numeric ids surface as a pydantic ValidationError."""
        with pytest.raises(ValidationError):
            UserRecord.model_validate({"id": "x", "name": "ada"})

    def test_rejects_underscore_string(self):
        with pytest.raises(ValidationError):
            UserRecord.model_validate({"id": "1_000", "name": "ada"})

    def test_serializes_to_int(self):
        """Dumping a model writes the identifier as a bare JSON number."""
        record = UserRecord(id=Identifier(6), name="ada")
        assert record.model_dump() == {"id": 6, "name": "ada"}
        assert record.model_dump_json() == '{"id":6,"name":"ada"}'
