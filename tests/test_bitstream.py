import pytest

import huffman as huff
from bitstream import pack_bits_from_codes, unpack_and_decode


def tree_for(data):
    return huff.build_huffman_tree(huff.count_byte_frequencies(data))


def test_bits_fill_from_least_significant():
    codes = {0: "0", 1: "1"}
    assert pack_bits_from_codes(bytes([1, 0, 0, 0, 0, 0, 0, 0, 1]), codes) == b"\x01\x01"
    assert pack_bits_from_codes(bytes([0, 0, 0, 0, 0, 0, 0, 1]), codes) == b"\x80"


def test_code_bits_keep_their_order():
    # c=0, a=10, b=11 ; "abc" -> bits 1,0,1,1,0 at positions 0..4
    codes = huff.generate_huffman_codes(tree_for(b"abcc"))
    assert pack_bits_from_codes(b"abc", codes) == bytes([0b01101])


def test_single_symbol_stream():
    codes = huff.generate_huffman_codes(tree_for(b"aaaa"))
    assert pack_bits_from_codes(b"aaaa", codes) == b"\x00"
    assert pack_bits_from_codes(b"a" * 9, codes) == b"\x00\x00"


def test_empty_data_packs_to_nothing():
    assert pack_bits_from_codes(b"", {}) == b""


def test_missing_code():
    with pytest.raises(ValueError):
        pack_bits_from_codes(b"z", {ord("a"): "0"})


def test_decode_stops_at_declared_length():
    root = tree_for(b"ab") # a=0, b=1
    assert unpack_and_decode(b"\x02", root, 2) == b"ab"
    # padding bits set and extra bytes after the data are both ignored
    assert unpack_and_decode(b"\xfe\xff\xff", root, 2) == b"ab"
    assert unpack_and_decode(b"\x02", root, 1) == b"a"


def test_decode_zero_length():
    assert unpack_and_decode(b"", None, 0) == b""
    assert unpack_and_decode(b"\xff", tree_for(b"ab"), 0) == b""


def test_decode_single_symbol():
    root = tree_for(b"aaaa")
    assert unpack_and_decode(b"\xf0", root, 4) == b"aaaa"


def test_decode_truncated_stream():
    root = tree_for(b"ab")
    with pytest.raises(huff.TruncatedStreamError) as info:
        unpack_and_decode(b"\x00", root, 9)
    assert info.value.decoded == 8
    assert info.value.expected == 9


def test_decode_without_tree():
    with pytest.raises(huff.StructuralError):
        unpack_and_decode(b"\x00", None, 3)


def test_decode_walks_off_single_symbol_tree():
    with pytest.raises(huff.StructuralError):
        unpack_and_decode(b"\x01", tree_for(b"aaaa"), 1)


def test_decode_negative_length():
    with pytest.raises(ValueError):
        unpack_and_decode(b"", None, -1)


def test_pack_then_decode(rng):
    data = bytes(rng.choice(b"etaoin shrdlu\x00\xff") for _ in range(3000))
    root = tree_for(data)
    packed = pack_bits_from_codes(data, huff.generate_huffman_codes(root))
    assert unpack_and_decode(packed, root, len(data)) == data
