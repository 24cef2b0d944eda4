from typing import NamedTuple

import huffman as huff
from bitstream import pack_bits_from_codes, unpack_and_decode
from flat_tree import flatten_tree, unflatten_tree


class EncodedData(NamedTuple):
    flat_tree: bytes
    packed: bytes
    original_length: int


def encode(data: bytes) -> EncodedData:
    """Compress data into (flattened tree, packed bit stream, original length)."""
    frequency_table = huff.count_byte_frequencies(data)
    root = huff.build_huffman_tree(frequency_table)
    code_map = huff.generate_huffman_codes(root)
    return EncodedData(flatten_tree(root), pack_bits_from_codes(data, code_map), len(data))


def decode(flat_tree: bytes, packed: bytes, original_length: int) -> bytes:
    # unflatten errors propagate, the caller decides whether to abort
    root = unflatten_tree(flat_tree)
    return unpack_and_decode(packed, root, original_length)
