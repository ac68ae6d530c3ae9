"""
Bencode decoder.

Decoding never raises for malformed input: `decode` returns either a
`DecodeSuccess` or a `DecodeFailure` that names the grammar production that
could not be parsed and the unconsumed input at that point.
"""
import dataclasses
import enum
import logging
from typing import NoReturn, Optional, Union

from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, BencodeType, digits_to_int

logger = logging.getLogger(__name__)

# Nesting limit for lists and dicts. Each level costs two Python frames.
DEFAULT_MAX_DEPTH = 256

_DIGITS = b"0123456789"


class ErrorKind(enum.Enum):
    """Grammar production (or resource bound) active when decoding stopped."""
    NUMBER = "number"
    STRING = "string"
    LIST = "list"
    DICT = "dict"
    DEPTH = "depth"
    SIZE = "size"


class BencodeDecodeError(Exception):
    """Raised by `DecodeFailure.unwrap()`."""

    def __init__(self, kind: ErrorKind, residual: bytes, offset: int):
        super().__init__(f"Invalid bencode ({kind.value}) at offset {offset}: {residual[:16]!r}")
        self.kind = kind
        self.residual = residual
        self.offset = offset


@dataclasses.dataclass(frozen=True)
class DecodeSuccess:
    """A decoded value and the bytes that followed it."""
    value: BencodeType
    rest: bytes = b""

    ok = True

    def unwrap(self) -> BencodeType:
        return self.value


@dataclasses.dataclass(frozen=True)
class DecodeFailure:
    """Where and why decoding stopped."""
    kind: ErrorKind
    residual: bytes
    offset: int = 0

    ok = False

    def unwrap(self) -> NoReturn:
        raise BencodeDecodeError(self.kind, self.residual, self.offset)


DecodeResult = Union[DecodeSuccess, DecodeFailure]


class _Stop(Exception):
    # unwinds the recursive descent; never leaves this module
    def __init__(self, kind: ErrorKind, offset: int):
        super().__init__(kind, offset)
        self.kind = kind
        self.offset = offset


class BencodeDecoder:
    """
    Decodes one Bencoded value from the start of a byte string.
    """
    def __init__(self, data: bytes, max_depth: int = DEFAULT_MAX_DEPTH, max_size: Optional[int] = None):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Bencode data must be bytes, not {type(data)}")
        self.data = bytes(data)
        self.i = 0  # cursor index
        self.depth = 0
        self.max_depth = max_depth
        self.max_size = max_size

    def decode(self) -> DecodeResult:
        """Main decode entry point. Trailing bytes are returned, not checked."""
        if self.max_size is not None and len(self.data) > self.max_size:
            return self._failure(ErrorKind.SIZE, 0)

        try:
            value = self._parse_value()
        except _Stop as stop:
            return self._failure(stop.kind, stop.offset)
        except RecursionError:
            # max_depth set above what the interpreter stack can hold
            return self._failure(ErrorKind.DEPTH, self.i)

        return DecodeSuccess(value, self.data[self.i:])

    def _failure(self, kind: ErrorKind, offset: int) -> DecodeFailure:
        logger.debug("Bencode decoding failed: %s at offset %d of %d", kind.value, offset, len(self.data))
        return DecodeFailure(kind, self.data[offset:], offset)

    # --------------------------
    # Low-level utilities
    # --------------------------

    def _peek(self):
        """Returns the byte under the cursor, or b'' at end of input."""
        return self.data[self.i:self.i+1]

    def _consume(self, n=1):
        """Moves cursor forward by n bytes and returns the consumed chunk."""
        chunk = self.data[self.i:self.i+n]
        self.i += n
        return chunk

    def _digits(self) -> bytes:
        """Consumes a maximal run of ASCII digits."""
        start = self.i
        while self.i < len(self.data) and self.data[self.i] in _DIGITS:
            self.i += 1
        return self.data[start:self.i]

    def _enter(self):
        if self.depth >= self.max_depth:
            raise _Stop(ErrorKind.DEPTH, self.i)
        self.depth += 1

    # --------------------------
    # Parsing functions
    # --------------------------

    def _parse_value(self) -> BencodeType:
        ch = self._peek()

        if ch == b'i':
            return self._parse_int()

        if ch == b'l':
            return self._parse_list()

        if ch == b'd':
            return self._parse_dict()

        # anything else must be a length-prefixed string
        return self._parse_string()

    def _parse_int(self) -> BencodeInt:
        """Parses i<digits>e. Leading zeros and -0 are rejected."""
        self._consume(1)  # skip 'i'

        negative = self._peek() == b'-'
        if negative:
            self._consume(1)

        start = self.i
        digits = self._digits()
        if not digits:
            raise _Stop(ErrorKind.NUMBER, self.i)
        if digits[0] == ord('0') and (negative or len(digits) > 1):
            raise _Stop(ErrorKind.NUMBER, start)

        if self._peek() != b'e':
            raise _Stop(ErrorKind.NUMBER, self.i)
        self._consume(1)  # skip 'e'

        num = digits_to_int(digits)
        return BencodeInt(-num if negative else num)

    def _parse_string(self) -> BencodeString:
        """Parses <length>:<bytes>."""
        start = self.i
        digits = self._digits()
        if not digits or self._peek() != b':':
            raise _Stop(ErrorKind.STRING, self.i)
        if digits[0] == ord('0') and len(digits) > 1:
            raise _Stop(ErrorKind.STRING, start)
        self._consume(1)  # skip ':'

        remaining = len(self.data) - self.i
        # a length with more digits than the input size cannot fit
        if len(digits) > len(str(remaining)):
            raise _Stop(ErrorKind.STRING, self.i)
        length = digits_to_int(digits)
        if length > remaining:
            raise _Stop(ErrorKind.STRING, self.i)

        return BencodeString(self._consume(length))

    def _parse_list(self) -> BencodeList:
        """Parses l<value>*e."""
        self._enter()
        self._consume(1)  # skip 'l'
        items = []

        while True:
            ch = self._peek()
            if not ch:
                raise _Stop(ErrorKind.LIST, self.i)
            if ch == b'e':
                break
            items.append(self._parse_value())

        self._consume(1)  # skip 'e'
        self.depth -= 1
        return BencodeList(items)

    def _parse_dict(self) -> BencodeDict:
        """Parses d(<string><value>)*e. Duplicate keys: the last one wins."""
        self._enter()
        self._consume(1)  # skip 'd'
        obj = {}

        while True:
            ch = self._peek()
            if not ch:
                raise _Stop(ErrorKind.DICT, self.i)
            if ch == b'e':
                break
            # keys MUST be strings
            key = self._parse_string().value
            obj[key] = self._parse_value()

        self._consume(1)  # skip 'e'
        self.depth -= 1
        return BencodeDict(obj)


def decode(data: bytes, max_depth: int = DEFAULT_MAX_DEPTH, max_size: Optional[int] = None) -> DecodeResult:
    """
    Convenience function to decode Bencoded data.

    Returns DecodeSuccess(value, rest) or DecodeFailure(kind, residual, offset).
    """
    return BencodeDecoder(data, max_depth=max_depth, max_size=max_size).decode()
