import logging

from dataclasses import dataclass, field
from typing import Any, BinaryIO, Optional, Type, Union, cast

from bencodec.source import ByteSource, BytesSource, StreamSource
from bencodec.value import (INT64_MAX,
                            INT64_MIN,
                            BencodeDict,
                            BencodeInteger,
                            BencodeList,
                            BencodeString,
                            Value)


__all__ = (
    "BencodeDecoder",
    "NativeDecoder",
    "DecodeError",
    "DecodeIOError",
    "UnexpectedEndOfBuffer",
    "UnexpectedCharacter",
    "IntegerOverflow",
    "read",
    "decode",
    "loads",
)

logger = logging.getLogger(__name__)

_INT = ord("i")
_LIST = ord("l")
_DICT = ord("d")
_END = ord("e")
_MINUS = ord("-")
_COLON = ord(":")
_ZERO = ord("0")
_DIGITS = frozenset(b"0123456789")


class DecodeError(ValueError):
    pass


class DecodeIOError(DecodeError):
    pass


class UnexpectedEndOfBuffer(DecodeError):
    pass


class UnexpectedCharacter(DecodeError):
    pass


class IntegerOverflow(UnexpectedCharacter):
    pass


@dataclass
class _ListFrame:
    items: list = field(default_factory=list)

    def add(self, value: Any) -> None:
        self.items.append(value)


@dataclass
class _DictFrame:
    entries: dict = field(default_factory=dict)
    key: Optional[bytes] = None

    def add(self, value: Any) -> None:
        # duplicate keys: the last one wins
        self.entries[self.key] = value
        self.key = None


class BencodeDecoder:
    """Decodes exactly one bencoded value from a byte source.

    Containers are tracked on an explicit stack of frames instead of the
    Python call stack, so nesting depth is limited by memory only.
    """

    def __init__(self, source: Union[ByteSource, BinaryIO]) -> None:
        if not isinstance(source, ByteSource):
            source = StreamSource(source)
        self._source = source

    def decode(self) -> Any:
        stack: list[Union[_ListFrame, _DictFrame]] = []
        while True:
            top = stack[-1] if stack else None
            byte = self._peek()
            if isinstance(top, _DictFrame) and top.key is None:
                if byte == _END:
                    self._next()
                    value = self._make_dict(stack.pop().entries)
                elif byte in _DIGITS:
                    top.key = self._decode_string()
                    continue
                else:
                    raise self._unexpected(
                        byte, "instead of a dictionary key", consumed=False)
            elif isinstance(top, _ListFrame) and byte == _END:
                self._next()
                value = self._make_list(stack.pop().items)
            elif byte == _LIST:
                self._next()
                stack.append(_ListFrame())
                continue
            elif byte == _DICT:
                self._next()
                stack.append(_DictFrame())
                continue
            elif byte == _INT:
                value = self._make_integer(self._decode_int())
            elif byte in _DIGITS:
                value = self._make_string(self._decode_string())
            else:
                raise self._unexpected(
                    byte, "instead of the first byte of a value",
                    consumed=False)

            if not stack:
                return value
            stack[-1].add(value)

    def _make_string(self, value: bytes) -> Any:
        return BencodeString(value)

    def _make_integer(self, value: int) -> Any:
        return BencodeInteger(value)

    def _make_list(self, items: list) -> Any:
        return BencodeList(items)

    def _make_dict(self, entries: dict) -> Any:
        return BencodeDict(entries)

    def _decode_int(self) -> int:
        self._next()
        sign = 1
        if self._peek() == _MINUS:
            self._next()
            sign = -1
        limit = -INT64_MIN if sign < 0 else INT64_MAX

        value = 0
        digits_count = 0
        while (byte := self._next()) != _END:
            if byte not in _DIGITS:
                raise self._unexpected(byte, "while reading an integer")
            value = value * 10 + byte - _ZERO
            if value > limit:
                raise IntegerOverflow(
                    f"Integer does not fit into 64 signed bits "
                    f"at position {self._source.position - 1}")
            digits_count += 1
        if not digits_count:
            raise self._unexpected(_END, "while reading an integer")
        return sign * value

    def _decode_string(self) -> bytes:
        length = 0
        while (byte := self._next()) != _COLON:
            if byte not in _DIGITS:
                raise self._unexpected(byte, "while reading a string length")
            length = length * 10 + byte - _ZERO
            if length > INT64_MAX:
                raise UnexpectedCharacter(
                    f"String length does not fit into 64 signed bits "
                    f"at position {self._source.position - 1}")
        return self._read(length)

    def _peek(self) -> int:
        try:
            byte = self._source.peek()
        except OSError as exc:
            raise DecodeIOError(f"Failed to read from source: {exc}") from exc
        if byte is None:
            raise self._end_of_buffer()
        return byte

    def _next(self) -> int:
        try:
            byte = self._source.next()
        except OSError as exc:
            raise DecodeIOError(f"Failed to read from source: {exc}") from exc
        if byte is None:
            raise self._end_of_buffer()
        return byte

    def _read(self, length: int) -> bytes:
        try:
            payload = self._source.read(length)
        except OSError as exc:
            raise DecodeIOError(f"Failed to read from source: {exc}") from exc
        if len(payload) < length:
            raise UnexpectedEndOfBuffer(
                f"Expected {length} bytes of string data, "
                f"got only {len(payload)}")
        return payload

    def _end_of_buffer(self) -> UnexpectedEndOfBuffer:
        return UnexpectedEndOfBuffer(
            f"Unexpected end of buffer at position {self._source.position}")

    def _unexpected(
        self,
        byte: int,
        context: str,
        consumed: bool = True
    ) -> UnexpectedCharacter:
        position = self._source.position - 1 if consumed \
            else self._source.position
        return UnexpectedCharacter(
            f"{bytes([byte])!r} {context} at position {position}")


class NativeDecoder(BencodeDecoder):
    """Builds plain ``bytes``/``int``/``list``/``dict`` objects."""

    def _make_string(self, value: bytes) -> Any:
        return value

    def _make_integer(self, value: int) -> Any:
        return value

    def _make_list(self, items: list) -> Any:
        return items

    def _make_dict(self, entries: dict) -> Any:
        return entries


def read(source: Union[ByteSource, BinaryIO]) -> Value:
    return cast(Value, BencodeDecoder(source).decode())


def decode(data: bytes) -> Value:
    return cast(Value, _decode_buffer(BencodeDecoder, data))


def loads(data: bytes) -> Any:
    return _decode_buffer(NativeDecoder, data)


def _decode_buffer(decoder_cls: Type[BencodeDecoder], data: bytes) -> Any:
    source = BytesSource(data)
    value = decoder_cls(source).decode()
    if source.remaining:
        logger.debug("Ignoring %d trailing bytes after position %d",
                     source.remaining, source.position)
    return value
