"""
Bencode (BEP 3) codec: in-memory bytes to tagged values and back.
"""
from .decoder import (
    DEFAULT_MAX_DEPTH,
    BencodeDecodeError,
    DecodeFailure,
    DecodeResult,
    DecodeSuccess,
    ErrorKind,
    decode,
)
from .encoder import encode
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, BencodeType, unwrap, wrap

__all__ = [
    'decode', 'encode', 'wrap', 'unwrap',
    'BencodeType', 'BencodeInt', 'BencodeString', 'BencodeList', 'BencodeDict',
    'DecodeSuccess', 'DecodeFailure', 'DecodeResult', 'ErrorKind', 'BencodeDecodeError',
    'DEFAULT_MAX_DEPTH',
]
