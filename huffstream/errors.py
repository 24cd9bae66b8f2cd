# huffstream/errors.py
# Failures raised while reading a compressed stream.


class HuffException(Exception):
    """Base class for every decoding failure."""


class MalformedHeaderError(HuffException):
    """The stream does not start with the tree-header magic number."""


class TruncatedTreeError(HuffException):
    """The stream ended in the middle of the serialized tree."""


class TruncatedBodyError(HuffException):
    """The stream ended before the end-of-stream symbol was decoded."""


class MalformedTreeError(HuffException):
    """The serialized tree is deeper than any tree over 257 symbols can be."""
