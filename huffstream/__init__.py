from huffstream.bitio import BitInputStream, BitOutputStream, END_OF_STREAM
from huffstream.errors import (
    HuffException,
    MalformedHeaderError,
    MalformedTreeError,
    TruncatedBodyError,
    TruncatedTreeError,
)
from huffstream.processor import DEBUG_HIGH, DEBUG_LOW, HUFF_TREE, HuffProcessor
from huffstream.tree import PSEUDO_EOF, Code, HuffNode, make_encodings, make_tree, read_tree, write_tree
