import pytest

from bencodec.decoder import UnexpectedCharacter, UnexpectedEndOfBuffer
from bencodec.value import (BencodeDict,
                            BencodeInteger,
                            BencodeList,
                            BencodeString)
from bencodec.helpers import (BadTypeError,
                              HelperDecodeError,
                              MissingKeyError,
                              TextDecodeError,
                              WrappedDecodeError,
                              decode_dict,
                              pop_value_bytestring,
                              pop_value_bytestring_option,
                              pop_value_integer,
                              pop_value_integer_option,
                              pop_value_utf8_string,
                              pop_value_utf8_string_option)


@pytest.fixture
def bmap():
    return {
        b"foo": BencodeString(b"bar"),
        b"baz": BencodeString(b"qux"),
        b"quux": BencodeInteger(42),
        b"raw": BencodeString(b"\xff\xfe"),
        b"list": BencodeList([]),
    }


class TestPopValueInteger:
    def test_pops_integer(self, bmap):
        assert pop_value_integer(bmap, "quux") == 42
        assert b"quux" not in bmap

    def test_missing_key(self, bmap):
        with pytest.raises(MissingKeyError) as excinfo:
            pop_value_integer(bmap, "absent")
        assert excinfo.value.key == "absent"
        assert str(excinfo.value) == "Missing key 'absent'"

    def test_bad_type(self, bmap):
        with pytest.raises(BadTypeError) as excinfo:
            pop_value_integer(bmap, "foo")
        assert str(excinfo.value) == \
            "Expected integer for key 'foo', got: BencodeString"
        assert b"foo" not in bmap

    def test_option(self, bmap):
        assert pop_value_integer_option(bmap, "quux") == 42
        assert pop_value_integer_option(bmap, "quux") is None
        with pytest.raises(BadTypeError):
            pop_value_integer_option(bmap, "list")


class TestPopValueBytestring:
    def test_pops_bytes(self, bmap):
        assert pop_value_bytestring(bmap, "raw") == b"\xff\xfe"
        assert b"raw" not in bmap

    @pytest.mark.parametrize("key, exc_type", [
        ("absent", MissingKeyError),
        ("quux", BadTypeError),
        ("list", BadTypeError),
    ])
    def test_errors(self, bmap, key, exc_type):
        with pytest.raises(exc_type):
            pop_value_bytestring(bmap, key)

    def test_option(self, bmap):
        assert pop_value_bytestring_option(bmap, "foo") == b"bar"
        assert pop_value_bytestring_option(bmap, "foo") is None
        with pytest.raises(BadTypeError):
            pop_value_bytestring_option(bmap, "quux")


class TestPopValueUtf8String:
    def test_pops_all(self, bmap):
        assert pop_value_utf8_string(bmap, "foo") == "bar"
        assert pop_value_utf8_string(bmap, "baz") == "qux"
        assert pop_value_integer(bmap, "quux") == 42
        assert pop_value_bytestring(bmap, "raw") == b"\xff\xfe"
        assert bmap == {b"list": BencodeList([])}

    def test_non_ascii_key_and_value(self):
        bmap = {"имя".encode("utf-8"): BencodeString("Алиса".encode("utf-8"))}
        assert pop_value_utf8_string(bmap, "имя") == "Алиса"

    def test_invalid_utf8(self, bmap):
        with pytest.raises(TextDecodeError) as excinfo:
            pop_value_utf8_string(bmap, "raw")
        assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)
        assert b"raw" not in bmap

    @pytest.mark.parametrize("key, exc_type", [
        ("absent", MissingKeyError),
        ("quux", BadTypeError),
    ])
    def test_errors(self, bmap, key, exc_type):
        with pytest.raises(exc_type):
            pop_value_utf8_string(bmap, key)

    def test_option(self, bmap):
        assert pop_value_utf8_string_option(bmap, "absent") is None
        assert pop_value_utf8_string_option(bmap, "foo") == "bar"
        with pytest.raises(TextDecodeError):
            pop_value_utf8_string_option(bmap, "raw")
        with pytest.raises(BadTypeError):
            pop_value_utf8_string_option(bmap, "quux")


class TestDecodeDict:
    def test_decode_then_extract(self):
        bmap = decode_dict(b"d3:agei25e4:name5:Alicee")
        assert pop_value_integer(bmap, "age") == 25
        assert pop_value_utf8_string(bmap, "name") == "Alice"
        assert pop_value_bytestring_option(bmap, "email") is None
        assert bmap == {}

    @pytest.mark.parametrize("data, cause_type", [
        (b"d3:age", UnexpectedEndOfBuffer),
        (b"x", UnexpectedCharacter),
    ])
    def test_wraps_decode_errors(self, data, cause_type):
        with pytest.raises(WrappedDecodeError) as excinfo:
            decode_dict(data)
        assert isinstance(excinfo.value.error, cause_type)
        assert excinfo.value.__cause__ is excinfo.value.error

    def test_requires_dictionary(self):
        with pytest.raises(BadTypeError) as excinfo:
            decode_dict(b"li1ee")
        assert str(excinfo.value) == "Expected a dictionary, got: BencodeList"

    def test_errors_share_base(self):
        for exc_type in (WrappedDecodeError, BadTypeError,
                         MissingKeyError, TextDecodeError):
            assert issubclass(exc_type, HelperDecodeError)

    def test_returns_payload_of_decoded_dict(self):
        assert decode_dict(b"d1:ali1eee") == {
            b"a": BencodeList([BencodeInteger(1)]),
        }
