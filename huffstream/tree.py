# huffstream/tree.py
# Huffman tree: construction from counts, code derivation, and the pre-order
# bit serialization used as the compressed file header.

import heapq
import itertools
from typing import Dict, List, NamedTuple, Optional

from huffstream.bitio import BitInputStream, BitOutputStream, END_OF_STREAM
from huffstream.errors import MalformedTreeError, TruncatedTreeError

BITS_PER_WORD = 8
ALPH_SIZE = 1 << BITS_PER_WORD      # 0..255
PSEUDO_EOF = ALPH_SIZE              # end-of-stream symbol (not a byte)
SYMBOL_BITS = BITS_PER_WORD + 1     # enough for 0..256


class HuffNode:
    def __init__(self, value=0, weight=0, left=None, right=None):
        self.value = value
        self.weight = weight
        self.left = left
        self.right = right

    def is_leaf(self):
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf():
            return f"HuffNode(value={self.value}, weight={self.weight})"
        return f"HuffNode(weight={self.weight}, left={self.left!r}, right={self.right!r})"


class Code(NamedTuple):
    bits: int       # root-to-leaf path, left=0 right=1, first step is the MSB
    length: int

    def __str__(self):
        return format(self.bits, f"0{self.length}b")


# -------------------------------
# Tree builder
# -------------------------------

def make_tree(counts: List[int]) -> HuffNode:
    """Build the encoding tree for a frequency table.

    Ties on weight go to whichever node entered the queue first. Leaves are
    queued in symbol order, merged nodes after everything already queued, so
    the same counts always give the same tree.
    """
    order = itertools.count()
    pq = [(c, next(order), HuffNode(sym, c)) for sym, c in enumerate(counts) if c > 0]
    if not pq:
        raise ValueError("frequency table has no symbols")
    heapq.heapify(pq)

    while len(pq) > 1:
        w1, _, left = heapq.heappop(pq)
        w2, _, right = heapq.heappop(pq)
        heapq.heappush(pq, (w1 + w2, next(order), HuffNode(0, w1 + w2, left, right)))

    return pq[0][2]


# -------------------------------
# Code table
# -------------------------------

def make_encodings(root: HuffNode) -> Dict[int, Code]:
    encodings = {}
    if root.is_leaf():
        # a lone leaf still needs one bit per symbol
        encodings[root.value] = Code(0, 1)
        return encodings
    _collect_codes(root, 0, 0, encodings)
    return encodings


def _collect_codes(node: HuffNode, bits: int, length: int, encodings: Dict[int, Code]):
    if node.is_leaf():
        encodings[node.value] = Code(bits, length)
        return
    _collect_codes(node.left, bits << 1, length + 1, encodings)
    _collect_codes(node.right, (bits << 1) | 1, length + 1, encodings)


def leaves(root: HuffNode) -> List[HuffNode]:
    """Leaves in left-to-right order."""
    if root.is_leaf():
        return [root]
    return leaves(root.left) + leaves(root.right)


# -------------------------------
# Tree codec
# -------------------------------

def write_tree(root: HuffNode, out: BitOutputStream):
    if root.is_leaf():
        out.write_bits(1, 1)
        out.write_bits(SYMBOL_BITS, root.value)
        return
    out.write_bits(1, 0)
    write_tree(root.left, out)
    write_tree(root.right, out)


def read_tree(bits_in: BitInputStream, seen: Optional[List[int]] = None, depth: int = 0) -> HuffNode:
    """Rebuild a tree written by ``write_tree``. Weights come back as 0.

    Symbols are appended to ``seen`` as their leaves are read, if given.
    No node may sit deeper than PSEUDO_EOF, the longest path 257 leaves allow.
    """
    if depth > PSEUDO_EOF:
        raise MalformedTreeError(f"tree deeper than {PSEUDO_EOF} levels after {bits_in.bits_read} bits")
    bit = bits_in.read_bits(1)
    if bit == END_OF_STREAM:
        raise TruncatedTreeError(f"stream ended inside tree after {bits_in.bits_read} bits")
    if bit == 0:
        left = read_tree(bits_in, seen, depth + 1)
        right = read_tree(bits_in, seen, depth + 1)
        return HuffNode(0, 0, left, right)

    value = bits_in.read_bits(SYMBOL_BITS)
    if value == END_OF_STREAM:
        raise TruncatedTreeError(f"stream ended inside leaf symbol after {bits_in.bits_read} bits")
    if seen is not None:
        seen.append(value)
    return HuffNode(value, 0)
