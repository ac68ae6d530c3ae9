import logging

import pytest

from bencodec.decoder import (
    BencodeDecodeError,
    BencodeDecoder,
    DecodeFailure,
    DecodeSuccess,
    ErrorKind,
    decode,
)
from bencodec.structure import BencodeDict, BencodeInt, BencodeList, BencodeString


def test_decode_integer():
    assert decode(b"i5e") == DecodeSuccess(BencodeInt(5))
    assert decode(b"i0e") == DecodeSuccess(BencodeInt(0))
    assert decode(b"i-3e") == DecodeSuccess(BencodeInt(-3))
    assert decode(b"i-1e").value == BencodeInt(-1)


def test_decode_big_integer():
    result = decode(b"i123456789012345678901234567890e")
    assert result.value.value == 123456789012345678901234567890


@pytest.mark.parametrize("data, residual", [
    (b"i-0e", b"0e"),
    (b"i03e", b"03e"),
    (b"i-007e", b"007e"),
    (b"ie", b"e"),
    (b"i-e", b"e"),
    (b"i", b""),
    (b"i12", b""),
    (b"i1x2e", b"x2e"),
    (b"i+1e", b"+1e"),
])
def test_decode_bad_integer(data, residual):
    result = decode(data)
    assert not result.ok
    assert result.kind is ErrorKind.NUMBER
    assert result.residual == residual
    assert result.offset == len(data) - len(residual)


def test_decode_string():
    assert decode(b"4:spam") == DecodeSuccess(BencodeString(b"spam"))
    assert decode(b"0:") == DecodeSuccess(BencodeString(b""))
    assert decode(b"3:\x00\xff:").value.value == b"\x00\xff:"


def test_decode_negative_string_length():
    data = b"-1:abcd"
    assert decode(data) == DecodeFailure(ErrorKind.STRING, data, 0)


def test_decode_integer_with_many_digits():
    result = decode(b"i" + b"1" * 5000 + b"e")
    assert result.value == BencodeInt((10 ** 5000 - 1) // 9)

    result = decode(b"i-" + b"7" * 5000 + b"e")
    assert result.value == BencodeInt(-7 * (10 ** 5000 - 1) // 9)


def test_decode_string_length_with_many_digits():
    data = b"9" * 5000 + b":abc"
    result = decode(data)
    assert result == DecodeFailure(ErrorKind.STRING, b"abc", 5001)


def test_decode_string_length_past_end():
    result = decode(b"10:short")
    assert result.kind is ErrorKind.STRING
    assert result.residual == b"short"
    assert result.offset == 3


@pytest.mark.parametrize("data, residual", [
    (b"", b""),
    (b"x", b"x"),
    (b":abc", b":abc"),
    (b"4spam", b"spam"),
    (b"04:spam", b"04:spam"),
])
def test_decode_bad_string(data, residual):
    result = decode(data)
    assert result.kind is ErrorKind.STRING
    assert result.residual == residual


def test_decode_empty_containers():
    assert decode(b"le") == DecodeSuccess(BencodeList([]))
    assert decode(b"de") == DecodeSuccess(BencodeDict({}))


def test_decode_filled_list():
    result = decode(b"l4:spami3edelee")
    assert result.value == BencodeList([
        BencodeString(b"spam"),
        BencodeInt(3),
        BencodeDict({}),
        BencodeList([]),
    ])


def test_decode_filled_dict():
    result = decode(b"d6:numberi3e4:listle4:dictde6:string6:foobare")
    d = result.value.value
    assert d[b"number"] == BencodeInt(3)
    assert d[b"list"] == BencodeList([])
    assert d[b"dict"] == BencodeDict({})
    assert d[b"string"] == BencodeString(b"foobar")


def test_decode_dict_duplicate_key_last_wins():
    result = decode(b"d1:ai1e1:ai2ee")
    assert result.value == BencodeDict({b"a": BencodeInt(2)})


def test_decode_dict_unsorted_keys_accepted():
    result = decode(b"d1:bi1e1:ai2ee")
    assert list(result.value.value) == [b"a", b"b"]


def test_decode_dict_bad_key():
    result = decode(b"d4:samplekeyi50ee")
    assert result == DecodeFailure(ErrorKind.STRING, b"keyi50ee", 9)


def test_decode_dict_integer_key():
    result = decode(b"di1ei2ee")
    assert result.kind is ErrorKind.STRING
    assert result.residual == b"i1ei2ee"


@pytest.mark.parametrize("data, kind", [
    (b"l", ErrorKind.LIST),
    (b"li1e", ErrorKind.LIST),
    (b"d", ErrorKind.DICT),
    (b"d1:ai1e", ErrorKind.DICT),
])
def test_decode_truncated_container(data, kind):
    result = decode(data)
    assert result.kind is kind
    assert result.residual == b""
    assert result.offset == len(data)


def test_decode_inner_failure_propagates():
    result = decode(b"l4:spami1x")
    assert result.kind is ErrorKind.NUMBER
    assert result.residual == b"x"

    result = decode(b"d1:a4:ab")
    assert result.kind is ErrorKind.STRING
    assert result.residual == b"ab"


def test_decode_trailing_bytes_kept():
    result = decode(b"i1etrailing")
    assert result.value == BencodeInt(1)
    assert result.rest == b"trailing"


def test_decode_accepts_bytearray_and_memoryview():
    assert decode(bytearray(b"i7e")).value == BencodeInt(7)
    assert decode(memoryview(b"2:hi")).value == BencodeString(b"hi")


def test_decode_rejects_str():
    with pytest.raises(TypeError):
        decode("i42e")


def test_decode_depth_limit():
    nested = b"l" * 5 + b"e" * 5
    assert decode(nested, max_depth=5).ok

    result = decode(nested, max_depth=4)
    assert result.kind is ErrorKind.DEPTH
    assert result.offset == 4
    assert result.residual == b"leeeee"


def test_decode_depth_limit_above_interpreter_stack():
    nested = b"l" * 5000 + b"e" * 5000
    result = decode(nested, max_depth=100000)
    assert result.kind is ErrorKind.DEPTH
    assert result.residual == nested[result.offset:]


def test_decode_default_depth_limit():
    nested = b"l" * 10000 + b"e" * 10000
    result = decode(nested)
    assert result.kind is ErrorKind.DEPTH


def test_decode_size_limit():
    data = b"4:spam"
    assert decode(data, max_size=6).ok
    assert decode(data, max_size=5) == DecodeFailure(ErrorKind.SIZE, data, 0)


def test_unwrap():
    assert decode(b"i5e").unwrap() == BencodeInt(5)

    with pytest.raises(BencodeDecodeError) as excinfo:
        decode(b"li1e").unwrap()
    assert excinfo.value.kind is ErrorKind.LIST
    assert excinfo.value.offset == 4


def test_failure_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="bencodec.decoder"):
        decode(b"ix")
    assert "number" in caplog.text


def test_decoder_instance():
    decoder = BencodeDecoder(b"l1:ae1:b")
    result = decoder.decode()
    assert result.value == BencodeList([BencodeString(b"a")])
    assert result.rest == b"1:b"
