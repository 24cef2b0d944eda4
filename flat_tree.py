"""
Preorder serialization of a Huffman tree.

  - an internal node is written as '0' followed by its left and right subtrees
  - a leaf is written as '1' followed by its raw symbol byte

Example:

        *
       / \
      *   c    =>  0 (0 (1a) (1b)) (1c)  =>  b"001a1b1c"
     / \
    a   b

The symbol byte after '1' is data, not a token, so it may be any value
including b'0' and b'1'. Readers follow the grammar, they never search for
delimiters.
"""

from typing import Optional

from huffman import HuffmanNode, StructuralError, TrailingDataError

TOKEN_INTERNAL = ord('0')
TOKEN_LEAF = ord('1')


def flatten_tree(root: Optional[HuffmanNode]) -> bytes:
    out = bytearray()

    def _flatten(node):
        if node is None: # only the absent right child of a single-symbol root
            return
        if node.is_leaf():
            out.append(TOKEN_LEAF)
            out.append(node.symbol)
        else:
            out.append(TOKEN_INTERNAL)
            _flatten(node.left)
            _flatten(node.right)

    _flatten(root)
    return bytes(out)


def _is_single_symbol_root(node) -> bool:
    return node.left is not None and node.left.is_leaf() and node.right is None


def unflatten_tree(flat: bytes) -> Optional[HuffmanNode]:
    """
    Rebuild the tree written by flatten_tree.

    Returns None for an empty string (the empty-input tree). Raises
    StructuralError when the string ends before the tree is complete or holds
    an unknown token, and TrailingDataError when bytes are left over after the
    tree is complete.
    """
    total = len(flat)
    if total == 0:
        return None
    if flat[0] != TOKEN_INTERNAL:
        raise StructuralError(f"tree root must be an internal node, got token {flat[0]:#04x}")

    root = HuffmanNode(None, 0)
    stack = [root] # internal nodes still waiting for a child
    pos = 1

    while stack and pos < total:
        token = flat[pos]
        pos += 1
        if token == TOKEN_INTERNAL:
            node = HuffmanNode(None, 0)
        elif token == TOKEN_LEAF:
            if pos >= total:
                raise StructuralError(f"leaf token at offset {pos - 1} has no symbol byte")
            node = HuffmanNode(flat[pos], 0)
            pos += 1
        else:
            raise StructuralError(f"unknown token {token:#04x} at offset {pos - 1}")

        parent = stack[-1]
        if parent.left is None:
            parent.left = node
        else:
            parent.right = node

        if not node.is_leaf():
            stack.append(node)

        # resume at the nearest ancestor that still lacks a right child
        while stack and stack[-1].right is not None:
            stack.pop()

    if stack:
        # The single-symbol tree is complete with its root still open
        if len(stack) == 1 and stack[0] is root and _is_single_symbol_root(root):
            return root
        raise StructuralError(f"flattened tree ended with {len(stack)} node(s) incomplete")

    if pos < total:
        raise TrailingDataError(pos, total)

    return root
