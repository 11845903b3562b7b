import io

from itertools import chain
from typing import Any, BinaryIO, Iterator, Optional

from bencodec.value import (INT64_MAX,
                            INT64_MIN,
                            BencodeDict,
                            BencodeInteger,
                            BencodeList,
                            BencodeString)


__all__ = (
    "BencodeEncoder",
    "BencodeEncodeError",
    "write",
    "encode",
    "dumps",
)

_EXHAUSTED = object()


class BencodeEncodeError(TypeError):
    pass


class BencodeEncoder:
    """Writes values to a sink, dictionary keys in ascending byte order.

    Besides the ``Bencode*`` value classes the encoder accepts plain
    ``bytes``, ``bytearray``, ``str`` (as UTF-8), ``int``, ``list``,
    ``tuple`` and ``dict`` objects. Output goes to the sink as it is
    produced, so a ``BencodeEncodeError`` can leave a partial value there;
    ``write`` buffers instead. Errors of ``sink.write`` propagate untouched.
    """

    def __init__(self, sink: BinaryIO) -> None:
        self._sink = sink

    def encode(self, data: Any) -> None:
        # iterators over the children of the containers being written and
        # the ids of those containers, the bottom entry holds the root only
        stack: list[tuple[Iterator[Any], Optional[int]]] = [
            (iter((data,)), None)]
        open_ids: set[int] = set()
        while stack:
            children, container_id = stack[-1]
            item = next(children, _EXHAUSTED)
            if item is _EXHAUSTED:
                stack.pop()
                open_ids.discard(container_id)
                if stack:
                    self._sink.write(b"e")
                continue

            container = self._container_payload(item)
            if container is None:
                self._encode_scalar(item)
                continue
            if id(container) in open_ids:
                raise BencodeEncodeError("Circular reference detected")
            open_ids.add(id(container))
            stack.append((self._open_container(container), id(container)))

    def _container_payload(self, data: Any) -> Any:
        if isinstance(data, (BencodeList, BencodeDict)):
            data = data.value
        if isinstance(data, (list, tuple, dict)):
            return data
        return None

    def _open_container(self, data: Any) -> Iterator[Any]:
        if isinstance(data, dict):
            entries = self._sorted_entries(data)
            self._sink.write(b"d")
            return chain.from_iterable(entries)
        self._sink.write(b"l")
        return iter(data)

    def _sorted_entries(self, data: dict) -> list[tuple[bytes, Any]]:
        entries = [(self._key_to_bytes(key), value)
                   for key, value in data.items()]
        entries.sort(key=lambda entry: entry[0])
        for (prev_key, _), (key, _) in zip(entries, entries[1:]):
            if prev_key == key:
                raise BencodeEncodeError(
                    f"Duplicate dictionary key {key!r}")
        return entries

    def _key_to_bytes(self, key: Any) -> bytes:
        if isinstance(key, bytes):
            return key
        if isinstance(key, str):
            return key.encode("utf-8")
        raise BencodeEncodeError(
            f"Dictionary key of type {type(key).__name__} "
            f"is not Bencode serializable")

    def _encode_scalar(self, data: Any) -> None:
        if isinstance(data, (BencodeString, BencodeInteger)):
            data = data.value

        if isinstance(data, str):
            data = data.encode("utf-8")
        if isinstance(data, (bytes, bytearray)):
            self._sink.write(str(len(data)).encode("utf-8") + b":")
            self._sink.write(data)
        elif isinstance(data, int) and not isinstance(data, bool):
            if not INT64_MIN <= data <= INT64_MAX:
                raise BencodeEncodeError(
                    f"Integer {data} does not fit into 64 signed bits")
            self._sink.write(b"i" + str(data).encode("utf-8") + b"e")
        else:
            raise BencodeEncodeError(
                f"Object of type {type(data).__name__} "
                f"is not Bencode serializable")


def write(data: Any, sink: BinaryIO) -> None:
    """Write the encoding of ``data`` to ``sink`` in one call.

    Nothing reaches the sink when ``data`` cannot be encoded.
    """
    sink.write(encode(data))


def encode(data: Any) -> bytes:
    buffer = io.BytesIO()
    BencodeEncoder(buffer).encode(data)
    return buffer.getvalue()


def dumps(data: Any) -> bytes:
    return encode(data)
