# huffstream/processor.py
# Two-pass Huffman compressor and tree-walking decompressor.
# Layout: 32-bit HUFF_TREE | pre-order tree | codes of each byte | PSEUDO_EOF code

from typing import Dict, List

from huffstream.bitio import BitInputStream, BitOutputStream, END_OF_STREAM
from huffstream.errors import MalformedHeaderError, TruncatedBodyError
from huffstream.tree import (
    ALPH_SIZE,
    BITS_PER_WORD,
    PSEUDO_EOF,
    Code,
    HuffNode,
    leaves,
    make_encodings,
    make_tree,
    read_tree,
    write_tree,
)

BITS_PER_INT = 32
HUFF_NUMBER = 0xface8200
HUFF_TREE = HUFF_NUMBER | 1

DEBUG_LOW = 1
DEBUG_HIGH = 4


class HuffProcessor:
    def __init__(self, debug: int = 0):
        self.debug = debug

    # ---------- Compression ----------
    def compress(self, bits_in: BitInputStream, out: BitOutputStream):
        """Compress everything ``bits_in`` holds into ``out``, then close ``out``.

        ``bits_in`` is read twice, so it must support ``reset``.
        """
        try:
            counts = self.get_counts(bits_in)
            tree = make_tree(counts)
            encodings = make_encodings(tree)

            if self.debug >= DEBUG_HIGH:
                for sym, c in enumerate(counts):
                    if c > 0:
                        print(f"{sym}\t{c}\t{encodings[sym]}")

            out.write_bits(BITS_PER_INT, HUFF_TREE)
            write_tree(tree, out)
            bits_in.reset()
            self.write_compressed_bits(encodings, bits_in, out)
        finally:
            out.close()

        if self.debug >= DEBUG_LOW:
            print(f" compressed from {bits_in.bits_read} to {out.bits_written} bits, "
                  f"{len(encodings)} leaves")

    def get_counts(self, bits_in: BitInputStream) -> List[int]:
        counts = [0] * (ALPH_SIZE + 1)
        while True:
            word = bits_in.read_bits(BITS_PER_WORD)
            if word == END_OF_STREAM:
                break
            counts[word] += 1
        counts[PSEUDO_EOF] = 1
        return counts

    def write_compressed_bits(self, encodings: Dict[int, Code], bits_in: BitInputStream,
                              out: BitOutputStream):
        while True:
            word = bits_in.read_bits(BITS_PER_WORD)
            if word == END_OF_STREAM:
                break
            code = encodings[word]
            out.write_bits(code.length, code.bits)
        eof = encodings[PSEUDO_EOF]
        out.write_bits(eof.length, eof.bits)

    # ---------- Decompression ----------
    def decompress(self, bits_in: BitInputStream, out: BitOutputStream):
        """Restore the original bytes into ``out``, then close ``out``.

        Raises MalformedHeaderError, TruncatedTreeError or TruncatedBodyError;
        nothing is written before the header and tree have been read.
        """
        try:
            magic = bits_in.read_bits(BITS_PER_INT)
            if magic != HUFF_TREE:
                shown = "end of stream" if magic == END_OF_STREAM else f"0x{magic:08x}"
                raise MalformedHeaderError(f"illegal header starts with {shown}")

            seen = [] if self.debug >= DEBUG_HIGH else None
            tree = read_tree(bits_in, seen)
            if seen is not None:
                for sym in seen:
                    print(sym)

            self.read_compressed_bits(tree, bits_in, out)
        finally:
            out.close()

        if self.debug >= DEBUG_LOW:
            print(f" decompressed from {bits_in.bits_read} to {out.bits_written} bits, "
                  f"{len(leaves(tree))} leaves")

    def read_compressed_bits(self, root: HuffNode, bits_in: BitInputStream, out: BitOutputStream):
        current = root
        while True:
            bit = bits_in.read_bits(1)
            if bit == END_OF_STREAM:
                raise TruncatedBodyError(f"bad input, no PSEUDO_EOF after {bits_in.bits_read} bits")
            if not root.is_leaf():
                current = current.left if bit == 0 else current.right

            if current.is_leaf():
                if current.value == PSEUDO_EOF:
                    return
                out.write_bits(BITS_PER_WORD, current.value)
                current = root

    # ---------- In-memory helpers ----------
    def compress_bytes(self, data: bytes) -> bytes:
        out = BitOutputStream()
        self.compress(BitInputStream(data), out)
        return out.getvalue()

    def decompress_bytes(self, blob: bytes) -> bytes:
        out = BitOutputStream()
        self.decompress(BitInputStream(blob), out)
        return out.getvalue()
