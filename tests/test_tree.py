import itertools

import pytest

from huffstream.bitio import BitInputStream, BitOutputStream
from huffstream.errors import HuffException, MalformedTreeError, TruncatedTreeError
from huffstream.tree import (
    PSEUDO_EOF,
    Code,
    HuffNode,
    leaves,
    make_encodings,
    make_tree,
    read_tree,
    write_tree,
)


def counts_for(data):
    counts = [0] * (PSEUDO_EOF + 1)
    for b in data:
        counts[b] += 1
    counts[PSEUDO_EOF] = 1
    return counts


def shape(node):
    if node.is_leaf():
        return node.value
    return (shape(node.left), shape(node.right))


def test_tie_break_follows_queue_order():
    tree = make_tree(counts_for(b"abc"))
    assert shape(tree) == ((ord("a"), ord("b")), (ord("c"), PSEUDO_EOF))
    assert make_encodings(tree) == {
        ord("a"): Code(0b00, 2),
        ord("b"): Code(0b01, 2),
        ord("c"): Code(0b10, 2),
        PSEUDO_EOF: Code(0b11, 2),
    }


def test_merged_node_weight_is_sum():
    tree = make_tree(counts_for(b"aab"))
    assert tree.weight == 4
    assert shape(tree) == (ord("a"), (ord("b"), PSEUDO_EOF))
    assert tree.right.weight == 2


def test_make_tree_is_deterministic():
    counts = counts_for(b"the quick brown fox jumps over the lazy dog" * 3)
    assert shape(make_tree(counts)) == shape(make_tree(counts))


def test_single_repeated_byte_gives_two_leaves():
    tree = make_tree(counts_for(b"A" * 1000))
    assert sorted(leaf.value for leaf in leaves(tree)) == [0x41, PSEUDO_EOF]
    assert make_encodings(tree) == {PSEUDO_EOF: Code(0, 1), 0x41: Code(1, 1)}


def test_empty_input_tree_is_lone_sentinel():
    tree = make_tree(counts_for(b""))
    assert tree.is_leaf() and tree.value == PSEUDO_EOF
    assert make_encodings(tree) == {PSEUDO_EOF: Code(0, 1)}


def test_all_zero_counts_rejected():
    with pytest.raises(ValueError):
        make_tree([0] * (PSEUDO_EOF + 1))


@pytest.mark.parametrize("data", [b"", b"A" * 1000, b"abracadabra", bytes(range(256)) * 2])
def test_exactly_one_sentinel_leaf(data):
    values = [leaf.value for leaf in leaves(make_tree(counts_for(data)))]
    assert values.count(PSEUDO_EOF) == 1
    assert len(values) == len(set(values))


def test_codes_are_prefix_free():
    data = bytes(i % 37 for i in range(0, 4000, 3)) + b"mississippi"
    codes = [str(c) for c in make_encodings(make_tree(counts_for(data))).values()]
    assert all(len(c) >= 1 for c in codes)
    for a, b in itertools.permutations(codes, 2):
        assert not b.startswith(a)


def test_code_str_is_zero_padded():
    assert str(Code(0b01, 3)) == "001"


@pytest.mark.parametrize("data", [b"", b"A", b"abracadabra", bytes(range(256))])
def test_tree_serialization_round_trip(data):
    tree = make_tree(counts_for(data))
    out = BitOutputStream()
    write_tree(tree, out)
    out.close()

    seen = []
    restored = read_tree(BitInputStream(out.getvalue()), seen)
    assert shape(restored) == shape(tree)
    assert make_encodings(restored) == make_encodings(tree)
    assert seen == [leaf.value for leaf in leaves(tree)]
    assert restored.weight == 0


def test_leaf_costs_ten_bits_internal_one():
    tree = make_tree(counts_for(b"abc"))
    out = BitOutputStream()
    write_tree(tree, out)
    assert out.bits_written == 3 * 1 + 4 * 10


def test_truncated_tree_raises():
    with pytest.raises(TruncatedTreeError):
        read_tree(BitInputStream(b"\x00"))
    # leaf tag present but its symbol is cut short
    with pytest.raises(TruncatedTreeError):
        read_tree(BitInputStream(b"\x80"))


def test_hand_built_tree():
    root = HuffNode(0, 3, HuffNode(7, 1), HuffNode(0, 2, HuffNode(8, 1), HuffNode(PSEUDO_EOF, 1)))
    assert make_encodings(root) == {7: Code(0, 1), 8: Code(0b10, 2), PSEUDO_EOF: Code(0b11, 2)}
    assert "value=7" in repr(root)


def test_overdeep_tree_rejected():
    # 1600 internal-node tags in a row, far past any real tree
    with pytest.raises(MalformedTreeError):
        read_tree(BitInputStream(b"\x00" * 200))
    assert issubclass(MalformedTreeError, HuffException)


def test_deepest_real_tree_accepted():
    # a chain with a leaf at every level reaches depth PSEUDO_EOF
    node = HuffNode(PSEUDO_EOF)
    for sym in range(PSEUDO_EOF - 1, -1, -1):
        node = HuffNode(0, 0, HuffNode(sym), node)
    out = BitOutputStream()
    write_tree(node, out)
    out.close()
    restored = read_tree(BitInputStream(out.getvalue()))
    assert [leaf.value for leaf in leaves(restored)] == list(range(PSEUDO_EOF + 1))
