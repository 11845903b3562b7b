from abc import ABC, abstractmethod
from typing import BinaryIO, Optional, Union


class ByteSource(ABC):
    """Cursor over an input that yields one byte at a time.

    ``peek`` looks at the next byte without consuming it, ``next`` consumes
    it; both return ``None`` once the input is exhausted. ``position`` counts
    consumed bytes.
    """

    position: int = 0

    @abstractmethod
    def peek(self) -> Optional[int]: ...
    @abstractmethod
    def next(self) -> Optional[int]: ...

    def read(self, length: int) -> bytes:
        """Consume up to ``length`` bytes, fewer only at end of input."""
        chunk = bytearray()
        while len(chunk) < length:
            byte = self.next()
            if byte is None:
                break
            chunk.append(byte)
        return bytes(chunk)


class BytesSource(ByteSource):
    def __init__(self, data: Union[bytes, bytearray, memoryview]) -> None:
        self._data = bytes(data)
        self.position = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self.position

    def peek(self) -> Optional[int]:
        if self.position >= len(self._data):
            return None
        return self._data[self.position]

    def next(self) -> Optional[int]:
        byte = self.peek()
        if byte is not None:
            self.position += 1
        return byte

    def read(self, length: int) -> bytes:
        chunk = self._data[self.position: self.position + length]
        self.position += len(chunk)
        return chunk


class StreamSource(ByteSource):
    """Adapts a readable binary stream, buffering a single lookahead byte.

    Errors raised by the stream are not translated here, the decoder wraps
    them.
    """

    _READ_CHUNK_SIZE = 2 ** 16

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._lookahead: Optional[int] = None
        self.position = 0

    def peek(self) -> Optional[int]:
        if self._lookahead is None:
            raw = self._stream.read(1)
            if raw:
                self._lookahead = raw[0]
        return self._lookahead

    def next(self) -> Optional[int]:
        byte = self.peek()
        if byte is not None:
            self._lookahead = None
            self.position += 1
        return byte

    def read(self, length: int) -> bytes:
        chunk = bytearray()
        if length > 0 and self._lookahead is not None:
            chunk.append(self._lookahead)
            self._lookahead = None
        # chunked, the declared length may exceed what the stream holds
        while len(chunk) < length:
            raw = self._stream.read(
                min(length - len(chunk), self._READ_CHUNK_SIZE))
            if not raw:
                break
            chunk += raw
        self.position += len(chunk)
        return bytes(chunk)
