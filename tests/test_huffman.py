import random

import pytest
from bitarray import bitarray

import huffman as huff
from errors import DegenerateTree, EmptyAlphabet, EmptyCodeTable, UnknownCode
from freqtable import FrequencyTable


def random_table(seed: int) -> FrequencyTable:
    rng = random.Random(seed)
    symbols = rng.sample("abcdefghijklmnopqrstuvwxyz0123456789 .,", rng.randint(1, 30))
    return FrequencyTable.from_mapping({s: rng.randint(1, 50) for s in symbols})


def test_known_table_builds_known_codes():
    table = FrequencyTable.from_mapping({"a": 5, "b": 2, "c": 1, "d": 1})
    codes = huff.generate_code_table(huff.build_huffman_tree(table))
    assert codes.as_strings() == {"00": "b", "010": "c", "011": "d", "1": "a"}


def test_equal_frequencies_follow_symbol_order():
    table = FrequencyTable.from_mapping({"x": 1, "y": 1, "z": 1, "w": 1})
    codes = huff.generate_code_table(huff.build_huffman_tree(table))
    assert codes.as_strings() == {"00": "w", "01": "x", "10": "y", "11": "z"}


def test_tree_is_the_same_across_insertion_orders():
    counts = {"e": 4, "t": 4, "a": 3, "o": 3, " ": 7, "q": 1}
    reordered = dict(reversed(list(counts.items())))
    first = huff.build_huffman_tree(FrequencyTable.from_mapping(counts))
    second = huff.build_huffman_tree(FrequencyTable.from_mapping(reordered))
    assert first == second


@pytest.mark.parametrize("seed", range(20))
def test_tree_covers_every_symbol_once(seed):
    table = random_table(seed)
    tree = huff.build_huffman_tree(table)
    leaves = tree.leaves()
    assert len(leaves) == len(table)
    assert sorted(leaf.symbol for leaf in leaves) == sorted(table)
    assert sum(leaf.frequency for leaf in leaves) == tree.root_node.frequency
    assert len(tree.nodes) == 2 * len(table) - 1


@pytest.mark.parametrize("seed", range(20))
def test_code_table_is_a_prefix_code(seed):
    table = random_table(seed)
    codes = list(huff.generate_code_table(huff.build_huffman_tree(table)).as_strings())
    assert len(codes) == len(table)
    for a in codes:
        for b in codes:
            if a != b:
                assert not b.startswith(a)


def test_empty_table_raises():
    with pytest.raises(EmptyAlphabet):
        huff.build_huffman_tree(FrequencyTable())


def test_single_symbol_gets_one_bit_code():
    table = FrequencyTable.from_mapping({"a": 5})
    tree = huff.build_huffman_tree(table)
    assert tree.root_node.is_leaf
    codes = huff.generate_code_table(tree)
    assert codes.as_strings() == {"0": "a"}
    assert huff.huffman_decode(bitarray("000"), codes) == ["a", "a", "a"]


def test_single_symbol_rejects_one_bits():
    codes = huff.generate_code_table(huff.build_huffman_tree(FrequencyTable.from_mapping({"a": 5})))
    with pytest.raises(UnknownCode) as excinfo:
        huff.huffman_decode(bitarray("001"), codes)
    assert excinfo.value.bit_offset == 2


def test_decode_known_bits():
    table = FrequencyTable.from_mapping({"a": 5, "b": 2, "c": 1, "d": 1})
    codes = huff.generate_code_table(huff.build_huffman_tree(table))
    assert huff.huffman_decode(bitarray("1" "00" "011" "010" "1"), codes) == ["a", "b", "d", "c", "a"]


def test_decode_ending_mid_code_raises():
    table = FrequencyTable.from_mapping({"a": 5, "b": 2, "c": 1, "d": 1})
    codes = huff.generate_code_table(huff.build_huffman_tree(table))
    with pytest.raises(UnknownCode) as excinfo:
        huff.huffman_decode(bitarray("1" "00" "01"), codes)
    assert excinfo.value.bit_offset == 3
    assert excinfo.value.candidate == "01"


def test_decode_with_empty_table_raises():
    with pytest.raises(EmptyCodeTable):
        huff.huffman_decode(bitarray("0"), huff.CodeTable({}))


def test_decode_empty_stream_gives_nothing():
    codes = huff.generate_code_table(huff.build_huffman_tree(FrequencyTable.from_mapping({"a": 1, "b": 1})))
    assert huff.huffman_decode(bitarray(), codes) == []


def test_internal_node_missing_child_is_degenerate():
    tree = huff.HuffmanTree(
        nodes=(huff.HuffmanNode(1, symbol="a"), huff.HuffmanNode(1, left=0)),
        root=1,
    )
    with pytest.raises(DegenerateTree) as excinfo:
        huff.generate_code_table(tree)
    assert excinfo.value.node == 1


def test_shared_child_is_degenerate():
    tree = huff.HuffmanTree(
        nodes=(huff.HuffmanNode(1, symbol="a"), huff.HuffmanNode(2, left=0, right=0)),
        root=1,
    )
    with pytest.raises(DegenerateTree):
        huff.generate_code_table(tree)


def test_leaf_with_children_is_degenerate():
    tree = huff.HuffmanTree(
        nodes=(huff.HuffmanNode(1, symbol="a"), huff.HuffmanNode(1, symbol="b", left=0, right=0)),
        root=1,
    )
    with pytest.raises(DegenerateTree):
        huff.generate_code_table(tree)


def test_code_table_is_read_only():
    codes = huff.generate_code_table(huff.build_huffman_tree(FrequencyTable.from_mapping({"a": 1, "b": 2})))
    with pytest.raises(TypeError):
        codes.codes[(0, 1)] = "z"


def test_encode_unknown_symbol_raises():
    codes = huff.generate_code_table(huff.build_huffman_tree(FrequencyTable.from_mapping({"a": 1, "b": 2})))
    with pytest.raises(ValueError):
        huff.huffman_encode("abc", codes)


def test_unsorted_entries_build_the_sorted_tree():
    unsorted = FrequencyTable((("b", 1), ("a", 1), ("c", 1)))
    assert huff.build_huffman_tree(unsorted) == huff.build_huffman_tree(
        FrequencyTable.from_mapping({"a": 1, "b": 1, "c": 1})
    )
