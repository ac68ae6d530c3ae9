"""
Data structures for representing Bencoded types.
"""
import dataclasses
from types import MappingProxyType

__all__ = [
    "BencodeType",
    "BencodeInt",
    "BencodeString",
    "BencodeList",
    "BencodeDict",
    "wrap",
    "unwrap",
]


class BencodeType:
    """Base class for all Bencode data types."""

    __slots__ = ()


@dataclasses.dataclass(frozen=True, repr=False)
class BencodeInt(BencodeType):
    """Represents a Bencoded integer."""
    value: int

    def __post_init__(self):
        # bool is an int subclass but has no bencode form
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise TypeError("BencodeInt requires an integer.")

    def __repr__(self):
        return f"BencodeInt({int_to_digits(self.value).decode()})"


@dataclasses.dataclass(frozen=True, repr=False)
class BencodeString(BencodeType):
    """Represents a Bencoded byte string."""
    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, (bytes, bytearray, memoryview)):
            raise TypeError("BencodeString requires bytes.")
        object.__setattr__(self, "value", bytes(self.value))

    def __repr__(self):
        return f"BencodeString({self.value!r})"


@dataclasses.dataclass(frozen=True, repr=False)
class BencodeList(BencodeType):
    """Represents a Bencoded list. Items are kept in a tuple."""
    value: tuple

    def __post_init__(self):
        if not isinstance(self.value, (list, tuple)):
            raise TypeError("BencodeList requires a list.")
        for item in self.value:
            if not isinstance(item, BencodeType):
                raise TypeError("BencodeList items must be Bencode values.")
        object.__setattr__(self, "value", tuple(self.value))

    def __repr__(self):
        return f"BencodeList({list(self.value)!r})"


@dataclasses.dataclass(frozen=True, repr=False)
class BencodeDict(BencodeType):
    """
    Represents a Bencoded dictionary.

    The payload is exposed as a read-only mapping whose keys iterate in
    ascending raw-byte order.
    """
    value: MappingProxyType

    def __post_init__(self):
        if not isinstance(self.value, (dict, MappingProxyType)):
            raise TypeError("BencodeDict requires a dict.")
        items = {}
        for k, v in self.value.items():
            # keys must be bytes (bencode requirement)
            if not isinstance(k, (bytes, bytearray)):
                raise TypeError("BencodeDict keys must be bytes.")
            if not isinstance(v, BencodeType):
                raise TypeError("BencodeDict values must be Bencode values.")
            items[bytes(k)] = v
        object.__setattr__(self, "value", MappingProxyType(dict(sorted(items.items()))))

    def __repr__(self):
        return f"BencodeDict({dict(self.value)!r})"


# ------------------------------------------------------------
#   Conversion from and to plain Python data
# ------------------------------------------------------------

def wrap(obj) -> BencodeType:
    """
    Converts plain Python data into Bencode values.

    Accepts int, bytes, str (UTF-8), list/tuple and dict with bytes or str
    keys. Values that already are Bencode values are returned unchanged.
    """
    if isinstance(obj, BencodeType):
        return obj

    if isinstance(obj, bool):
        raise TypeError(f"Cannot bencode object of type {type(obj)}")

    if isinstance(obj, int):
        return BencodeInt(obj)

    if isinstance(obj, (bytes, bytearray, memoryview)):
        return BencodeString(obj)

    if isinstance(obj, str):
        return BencodeString(obj.encode())

    if isinstance(obj, (list, tuple)):
        return BencodeList([wrap(x) for x in obj])

    if isinstance(obj, dict):
        items = {}
        for k, v in obj.items():
            key = _key_to_bytes(k)
            if key in items:
                raise ValueError(f"Duplicate dictionary key {key!r}")
            items[key] = wrap(v)
        return BencodeDict(items)

    raise TypeError(f"Cannot bencode object of type {type(obj)}")


def unwrap(value: BencodeType):
    """Converts a Bencode value into int, bytes, list and dict."""
    if isinstance(value, (BencodeInt, BencodeString)):
        return value.value

    if isinstance(value, BencodeList):
        return [unwrap(x) for x in value.value]

    if isinstance(value, BencodeDict):
        return {k: unwrap(v) for k, v in value.value.items()}

    raise TypeError(f"Not a Bencode value: {type(value)}")


# ------------------------------------------------------------
#   Decimal conversion for integers of any size
# ------------------------------------------------------------

# Below the smallest int/str conversion limit Python allows (640 digits).
_CHUNK_DIGITS = 256
_CHUNK_BASE = 10 ** _CHUNK_DIGITS


def digits_to_int(digits: bytes) -> int:
    """Converts a run of ASCII digits to an int, chunk by chunk."""
    num = 0
    for pos in range(0, len(digits), _CHUNK_DIGITS):
        chunk = digits[pos:pos + _CHUNK_DIGITS]
        num = num * 10 ** len(chunk) + int(chunk)
    return num


def int_to_digits(n: int) -> bytes:
    """Renders an int in decimal, chunk by chunk."""
    if -_CHUNK_BASE < n < _CHUNK_BASE:
        return b"%d" % n

    sign = b"-" if n < 0 else b""
    n = abs(n)
    parts = []
    while n >= _CHUNK_BASE:
        n, low = divmod(n, _CHUNK_BASE)
        parts.append(str(low).zfill(_CHUNK_DIGITS).encode())
    parts.append(b"%d" % n)
    return sign + b"".join(reversed(parts))


def _key_to_bytes(k) -> bytes:
    if isinstance(k, str):
        return k.encode()
    if isinstance(k, (bytes, bytearray)):
        return bytes(k)
    raise TypeError(f"Dictionary keys must be bytes or str, not {type(k)}")
