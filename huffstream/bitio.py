# huffstream/bitio.py
# Bit-level input/output over binary streams. Bits are MSB-first within each byte.

import io
from typing import BinaryIO, Optional, Union

END_OF_STREAM = -1      # returned by read_bits when the source runs dry
CHUNK_SIZE = 4096


# -------------------------------
# Bit source
# -------------------------------

class BitInputStream:
    """Reads fixed-width bit groups from bytes or a readable binary file.

    The source must be seekable for ``reset`` to work; the compressor reads
    its input twice.
    """

    def __init__(self, source: Union[bytes, bytearray, memoryview, BinaryIO]):
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(bytes(source))
        self.stream = source
        self._clear()

    def _clear(self):
        self.buffer = 0         # pending bits, right-aligned
        self.buffered = 0       # how many bits of buffer are valid
        self.chunk = b''
        self.pos = 0
        self.bits_read = 0

    def _next_byte(self) -> int:
        if self.pos >= len(self.chunk):
            self.chunk = self.stream.read(CHUNK_SIZE)
            self.pos = 0
            if not self.chunk:
                return END_OF_STREAM
        b = self.chunk[self.pos]
        self.pos += 1
        return b

    def read_bits(self, n: int) -> int:
        if n < 0:
            raise ValueError(f"cannot read {n} bits")
        if n == 0:
            return 0
        while self.buffered < n:
            b = self._next_byte()
            if b == END_OF_STREAM:
                return END_OF_STREAM
            self.buffer = (self.buffer << 8) | b
            self.buffered += 8
        self.buffered -= n
        value = self.buffer >> self.buffered
        self.buffer &= (1 << self.buffered) - 1
        self.bits_read += n
        return value

    def reset(self):
        self.stream.seek(0)
        self._clear()


# -------------------------------
# Bit sink
# -------------------------------

class BitOutputStream:
    """Writes bit groups to a binary file, zero-padding the last byte on close.

    With no sink an in-memory buffer is used; read it back with ``getvalue``.
    Closing flushes but leaves the wrapped stream open.
    """

    def __init__(self, sink: Optional[BinaryIO] = None):
        self.stream = sink if sink is not None else io.BytesIO()
        self.buffer = 0
        self.buffered = 0
        self.out = bytearray()
        self.bits_written = 0
        self.closed = False

    def write_bits(self, n: int, value: int):
        if self.closed:
            raise ValueError("write to closed BitOutputStream")
        if n < 0:
            raise ValueError(f"cannot write {n} bits")
        self.buffer = (self.buffer << n) | (value & ((1 << n) - 1))
        self.buffered += n
        self.bits_written += n
        while self.buffered >= 8:
            self.buffered -= 8
            self.out.append((self.buffer >> self.buffered) & 0xFF)
        self.buffer &= (1 << self.buffered) - 1
        if len(self.out) >= CHUNK_SIZE:
            self._flush()

    def _flush(self):
        self.stream.write(bytes(self.out))
        self.out.clear()

    def close(self):
        if self.closed:
            return
        if self.buffered > 0:
            self.out.append((self.buffer << (8 - self.buffered)) & 0xFF)
            self.buffer = 0
            self.buffered = 0
        self._flush()
        self.stream.flush()
        self.closed = True

    def getvalue(self) -> bytes:
        return self.stream.getvalue()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
