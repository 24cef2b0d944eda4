import heapq
from typing import Dict, List, Optional

ALPHABET_SIZE = 256


class HuffmanDecodeError(ValueError): # base for every failure while rebuilding or walking a tree
    pass

class StructuralError(HuffmanDecodeError): # flattened tree or bit path does not describe a usable tree
    pass

class TrailingDataError(HuffmanDecodeError): # complete tree built but flattened bytes remain
    def __init__(self, consumed, total):
        super().__init__(f"flattened tree complete after {consumed} of {total} bytes")
        self.consumed = consumed
        self.total = total

class TruncatedStreamError(HuffmanDecodeError): # packed stream ran out before the declared length
    def __init__(self, decoded, expected):
        super().__init__(f"packed stream exhausted after {decoded} of {expected} bytes")
        self.decoded = decoded
        self.expected = expected


class HuffmanNode: # Node for Huffman tree
    def __init__(self, symbol, frequency, order=0):
        self.symbol = symbol    # byte or None
        self.frequency = frequency
        self.order = order      # creation number, breaks frequency ties
        self.left = None
        self.right = None

    def is_leaf(self):
        return self.symbol is not None

    def __lt__(self, other):
        # min-heap on frequency, earlier-created node wins a tie
        return (self.frequency, self.order) < (other.frequency, other.order)


def count_byte_frequencies(data: bytes) -> List[int]:
    frequency_table = [0] * ALPHABET_SIZE
    for byte in data:
        frequency_table[byte] += 1
    return frequency_table


def build_huffman_tree(frequency_table) -> Optional[HuffmanNode]: # frequency_table: 256 counts indexed by byte value
    if len(frequency_table) != ALPHABET_SIZE:
        raise ValueError(f"frequency table must have {ALPHABET_SIZE} entries, got {len(frequency_table)}")

    priority_queue = []
    for byte, frequency in enumerate(frequency_table):
        if frequency < 0:
            raise ValueError(f"negative frequency {frequency} for byte {byte}")
        if frequency > 0:
            priority_queue.append(HuffmanNode(byte, frequency, order=len(priority_queue)))
    heapq.heapify(priority_queue)

    if not priority_queue:
        return None

    # One distinct byte: internal root with the leaf on the left only,
    # so the byte still gets a 1-bit code
    if len(priority_queue) == 1:
        leaf = priority_queue[0]
        root = HuffmanNode(None, leaf.frequency, order=1)
        root.left = leaf
        return root

    next_order = len(priority_queue)
    while len(priority_queue) > 1:
        left = heapq.heappop(priority_queue)
        right = heapq.heappop(priority_queue)
        merged_node = HuffmanNode(None, left.frequency + right.frequency, order=next_order) # internal node with combined frequency
        next_order += 1
        merged_node.left = left
        merged_node.right = right
        heapq.heappush(priority_queue, merged_node)

    return priority_queue[0] # root of the tree


def generate_huffman_codes(root) -> Dict[int, str]: # root: root of the Huffman tree
    codes = {}
    def generate_codes_helper(node, current_code): # path is passed by value, never shared between siblings
        if node is None:
            return

        # Leaf node -> assign code
        if node.is_leaf():
            codes[node.symbol] = current_code
            return

        generate_codes_helper(node.left, current_code + '0')
        generate_codes_helper(node.right, current_code + '1')

    generate_codes_helper(root, '')
    return codes # return the mapping of symbols to their corresponding Huffman codes


def tree_weight(root) -> int:
    return root.frequency if root is not None else 0


def leaf_count(root) -> int:
    if root is None:
        return 0
    if root.is_leaf():
        return 1
    return leaf_count(root.left) + leaf_count(root.right)


def trees_equal(a, b) -> bool:
    """Same shape and same symbol at every leaf; weights are ignored."""
    if a is None or b is None:
        return a is None and b is None
    if a.is_leaf() or b.is_leaf():
        return a.symbol == b.symbol
    return trees_equal(a.left, b.left) and trees_equal(a.right, b.right)


def encoded_bit_length(frequency_table, codes: Dict[int, str]) -> int:
    # total payload bits for data with these frequencies
    return sum(frequency_table[symbol] * len(code) for symbol, code in codes.items())
