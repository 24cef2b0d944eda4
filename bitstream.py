from typing import Dict, Optional

from huffman import HuffmanNode, StructuralError, TruncatedStreamError


def pack_bits_from_codes(data: bytes, code_map: Dict[int, str]) -> bytes:
    """
    Converts Huffman codes into packed bytes.

    Bits fill each output byte from the least-significant position upward, so
    the first bit of a code lands in the lowest free bit. A partial last byte
    is written with its unused high bits set to 0.
    """
    out = bytearray()
    acc = 0
    acc_bits = 0

    for b in data:
        try:
            bits = code_map[b]
        except KeyError:
            raise ValueError(f"no code for byte {b:#04x}") from None
        for ch in bits:
            if ch == '1':
                acc |= 1 << acc_bits
            acc_bits += 1
            if acc_bits == 8:
                out.append(acc)
                acc = 0
                acc_bits = 0

    if acc_bits != 0:
        out.append(acc)

    return bytes(out)


def unpack_and_decode(packed: bytes, root: Optional[HuffmanNode], original_length: int) -> bytes:
    """
    Decode packed bits using the Huffman tree.

    Stops as soon as original_length bytes are produced, so padding and any
    later bytes are never looked at.
    """
    if original_length < 0:
        raise ValueError(f"original length must be non-negative, got {original_length}")
    if original_length == 0:
        return b""
    if root is None:
        raise StructuralError(f"no tree to decode {original_length} bytes with")

    decoded = bytearray()
    node = root

    for byte in packed:
        for i in range(8):
            bit = (byte >> i) & 1
            node = node.right if bit == 1 else node.left
            if node is None:
                raise StructuralError(f"bit path leaves the tree at output byte {len(decoded)}")

            # Leaf
            if node.is_leaf():
                decoded.append(node.symbol)
                if len(decoded) == original_length:
                    return bytes(decoded)
                node = root

    raise TruncatedStreamError(len(decoded), original_length)
