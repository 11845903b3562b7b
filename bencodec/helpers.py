"""Typed extraction of fields from decoded dictionaries.

Every ``pop_value_*`` helper removes the entry it looks at, also when it then
fails on the entry's type or text encoding.
"""
import logging

from typing import Optional, Type

from bencodec.decoder import DecodeError, decode
from bencodec.value import BencodeDict, BencodeInteger, BencodeString, Value


__all__ = (
    "HelperDecodeError",
    "WrappedDecodeError",
    "BadTypeError",
    "MissingKeyError",
    "TextDecodeError",
    "decode_dict",
    "pop_value_integer",
    "pop_value_integer_option",
    "pop_value_bytestring",
    "pop_value_bytestring_option",
    "pop_value_utf8_string",
    "pop_value_utf8_string_option",
)

logger = logging.getLogger(__name__)


class HelperDecodeError(ValueError):
    pass


class WrappedDecodeError(HelperDecodeError):
    def __init__(self, error: DecodeError) -> None:
        super().__init__(f"Failed to decode bencoded data: {error}")
        self.error = error


class BadTypeError(HelperDecodeError):
    pass


class MissingKeyError(HelperDecodeError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Missing key '{key}'")
        self.key = key


class TextDecodeError(HelperDecodeError):
    pass


def decode_dict(data: bytes) -> dict[bytes, Value]:
    try:
        value = decode(data)
    except DecodeError as exc:
        logger.debug("Failed to decode bencoded dictionary: %s", exc)
        raise WrappedDecodeError(exc) from exc
    if not isinstance(value, BencodeDict):
        raise BadTypeError(
            f"Expected a dictionary, got: {type(value).__name__}")
    return value.value


def pop_value_integer(bmap: dict[bytes, Value], key: str) -> int:
    return _pop_typed(bmap, key, BencodeInteger, "integer").value


def pop_value_integer_option(
    bmap: dict[bytes, Value],
    key: str
) -> Optional[int]:
    try:
        return pop_value_integer(bmap, key)
    except MissingKeyError:
        return None


def pop_value_bytestring(bmap: dict[bytes, Value], key: str) -> bytes:
    return _pop_typed(bmap, key, BencodeString, "byte string").value


def pop_value_bytestring_option(
    bmap: dict[bytes, Value],
    key: str
) -> Optional[bytes]:
    try:
        return pop_value_bytestring(bmap, key)
    except MissingKeyError:
        return None


def pop_value_utf8_string(bmap: dict[bytes, Value], key: str) -> str:
    raw = pop_value_bytestring(bmap, key)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise TextDecodeError(
            f"Value for key '{key}' is not valid UTF-8: {exc}") from exc


def pop_value_utf8_string_option(
    bmap: dict[bytes, Value],
    key: str
) -> Optional[str]:
    try:
        return pop_value_utf8_string(bmap, key)
    except MissingKeyError:
        return None


def _pop_typed(
    bmap: dict[bytes, Value],
    key: str,
    value_cls: Type,
    type_name: str
) -> Value:
    try:
        value = bmap.pop(key.encode("utf-8"))
    except KeyError:
        raise MissingKeyError(key) from None
    if not isinstance(value, value_cls):
        raise BadTypeError(
            f"Expected {type_name} for key '{key}', "
            f"got: {type(value).__name__}")
    return value
