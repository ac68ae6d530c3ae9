"""
Bencode encoder.
"""
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, BencodeType, int_to_digits, wrap


def encode(obj) -> bytes:
    """
    Encodes a Bencode value into bytes.

    Plain Python data (int, bytes, str, list, tuple, dict) is accepted too and
    converted with `wrap` first.
    """
    if not isinstance(obj, BencodeType):
        obj = wrap(obj)

    if isinstance(obj, BencodeInt):
        return encode_int(obj.value)

    if isinstance(obj, BencodeString):
        return encode_bytes(obj.value)

    if isinstance(obj, BencodeList):
        return encode_list(obj.value)

    if isinstance(obj, BencodeDict):
        return encode_dict(obj.value)

    raise TypeError(f"Cannot bencode object of type {type(obj)}")


# ------------------------------------------------------------
#   Encoding primitives
# ------------------------------------------------------------

def encode_int(n: int) -> bytes:
    """Encodes an integer to bencoded bytes (e.g., i123e)."""
    return b"i" + int_to_digits(n) + b"e"


def encode_bytes(b: bytes) -> bytes:
    """Encodes bytes to bencoded bytes (e.g., 4:spam)."""
    return b"%d:" % len(b) + b


def encode_list(lst) -> bytes:
    """Encodes a sequence of values to bencoded bytes (e.g., l4:spame)."""
    return b"l" + b"".join(encode(x) for x in lst) + b"e"


def encode_dict(d) -> bytes:
    """Encodes a bytes-keyed mapping to bencoded bytes (e.g., d3:cow3:moo4:spam4:eggse)."""
    # sort explicitly; the mapping's own order is not trusted
    parts = [encode_bytes(key) + encode(d[key]) for key in sorted(d.keys())]
    return b"d" + b"".join(parts) + b"e"
