from dataclasses import dataclass
from typing import Union


INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class BencodeString:
    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray)):
            raise TypeError("BencodeString requires bytes")
        # frozen dataclass: normalize bytearray payloads through object
        object.__setattr__(self, "value", bytes(self.value))


@dataclass(frozen=True)
class BencodeInteger:
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError("BencodeInteger requires an integer")
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(
                f"Integer {self.value} does not fit into 64 signed bits")


@dataclass(frozen=True)
class BencodeList:
    value: list["Value"]

    # the payload is a mutable list
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if not isinstance(self.value, list):
            raise TypeError("BencodeList requires a list")


@dataclass(frozen=True)
class BencodeDict:
    value: dict[bytes, "Value"]

    # the payload is a mutable dict, helpers pop from it
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if not isinstance(self.value, dict):
            raise TypeError("BencodeDict requires a dict")
        for key in self.value:
            if not isinstance(key, bytes):
                raise TypeError("BencodeDict keys must be bytes")


Value = Union[BencodeString, BencodeInteger, BencodeList, BencodeDict]
