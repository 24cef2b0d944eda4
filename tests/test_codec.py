import pytest

import codec
import huffman as huff


@pytest.mark.parametrize("data", [
    b"",
    b"a",
    b"aaaa",
    b"A" * 10 * 1024,
    b"abracadabra",
    bytes(range(256)),
    bytes(range(256)) * 3 + b"\x00" * 100,
    b"01" * 50 + b"\x00",
])
def test_round_trip(data):
    assert codec.decode(*codec.encode(data)) == data


def test_round_trip_random(rng):
    for n in (1, 2, 3, 10 * 1024):
        data = bytes(rng.getrandbits(8) for _ in range(n))
        assert codec.decode(*codec.encode(data)) == data


def test_four_copies_of_one_byte():
    flat, packed, n = codec.encode(b"aaaa")
    assert flat == b"01a"
    assert packed == b"\x00"
    assert n == 4


def test_empty_input():
    encoded = codec.encode(b"")
    assert encoded == (b"", b"", 0)
    assert encoded.original_length == 0
    assert codec.decode(b"", b"", 0) == b""


def test_all_256_values_once():
    flat, packed, n = codec.encode(bytes(range(256)))
    assert n == 256
    assert len(packed) == 256 # eight bits per symbol
    assert codec.decode(flat, packed, n) == bytes(range(256))


def test_compresses_skewed_data():
    data = b"a" * 900 + b"b" * 90 + b"c" * 10
    flat, packed, n = codec.encode(data)
    assert len(packed) < len(data) // 4


def test_decode_reports_header_errors():
    flat, packed, n = codec.encode(b"hello world")
    with pytest.raises(huff.StructuralError):
        codec.decode(flat[:-1], packed, n)
    with pytest.raises(huff.TrailingDataError):
        codec.decode(flat + b"1x", packed, n)


def test_decode_reports_short_stream():
    flat, packed, n = codec.encode(b"hello world" * 20)
    with pytest.raises(huff.TruncatedStreamError):
        codec.decode(flat, packed[:-3], n)
