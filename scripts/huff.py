import os
import sys
from huffstream.bitio import BitInputStream, BitOutputStream
from huffstream.errors import HuffException
from huffstream.processor import HuffProcessor

USAGE = "Usage: huff.py <compress|decompress> <input> <output> [debug-level]"


def run(mode, src, dst, debug=0):
    processor = HuffProcessor(debug)
    with open(src, "rb") as fin, open(dst, "wb") as fout:
        with BitOutputStream(fout) as out:
            if mode == "compress":
                processor.compress(BitInputStream(fin), out)
            else:
                processor.decompress(BitInputStream(fin), out)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) not in (3, 4) or argv[0] not in ("compress", "decompress"):
        print(USAGE)
        return 1
    mode, src, dst = argv[:3]
    try:
        debug = int(argv[3]) if len(argv) == 4 else 0
    except ValueError:
        print(USAGE)
        return 1

    try:
        run(mode, src, dst, debug)
    except HuffException as e:
        os.remove(dst)
        print(f" {mode} failed: {e}")
        return 1

    if mode == "compress":
        size_in, size_out = os.path.getsize(src), os.path.getsize(dst)
        if size_in:
            print(f"{100 * size_out / size_in:.2f}% compression ratio")
        print(size_out, "bytes compressed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
