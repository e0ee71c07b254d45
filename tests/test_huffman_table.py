import itertools

import pytest

from huffman_table import (
    NUM_SYMBOLS,
    CodeTable,
    Codeword,
    NodePool,
    assign_codes,
    build_code_table,
    build_tree,
    validate_frequencies,
)


def test_all_ones_table():
    table = build_code_table([1, 1, 1, 1, 1])
    assert table.lengths == [3, 3, 2, 2, 2]
    assert [cw.padded_bitstring for cw in table] == ["0110", "0111", "0000", "0001", "0010"]
    assert [cw.bitstring for cw in table] == ["110", "111", "00", "01", "10"]


def test_dominant_symbol_gets_single_bit():
    table = build_code_table([31, 1, 1, 1, 1])
    assert table.lengths == [1, 3, 3, 3, 3]
    assert table.codes == [0b0001, 0b0000, 0b0001, 0b0010, 0b0011]
    # same padded field, different true codewords
    assert table[0].padded == table[2].padded
    assert table[0].bitstring == "1"
    assert table[2].bitstring == "001"


def test_all_zero_cascades_by_symbol_id():
    table = build_code_table([0, 0, 0, 0, 0])
    assert table.lengths == [4, 4, 3, 2, 1]
    assert [cw.bitstring for cw in table] == ["0000", "0001", "001", "01", "1"]


def test_as_dict_uses_symbol_names():
    assert build_code_table([31, 1, 1, 1, 1]).as_dict() == {
        "a": (1, "1"),
        "b": (3, "000"),
        "c": (3, "001"),
        "d": (3, "010"),
        "e": (3, "011"),
    }


def test_same_input_same_table():
    freqs = [7, 3, 3, 12, 0]
    assert build_code_table(freqs) == build_code_table(list(freqs))


def test_input_is_not_mutated():
    freqs = [4, 0, 9, 9, 1]
    build_code_table(freqs)
    assert freqs == [4, 0, 9, 9, 1]


def test_leaves_initialized_from_frequencies():
    pool = NodePool.init_leaves([5, 0, 31, 2, 2])
    assert [n.weight for n in pool.nodes] == [5, 0, 31, 2, 2]
    assert [n.tie_key for n in pool.nodes] == [0, 1, 2, 3, 4]
    assert all(n.is_leaf for n in pool.nodes)
    assert pool.active == [0, 1, 2, 3, 4]


def test_select_two_breaks_weight_ties_by_tie_key():
    pool = NodePool.init_leaves([2, 1, 2, 1, 2])
    assert pool.select_two() == (1, 3)


def test_merge_sets_weight_tie_key_and_children():
    pool = NodePool.init_leaves([3, 9, 9, 9, 1])
    first, second = pool.select_two()
    assert (first, second) == (4, 0)
    index = pool.merge(first, second)
    merged = pool.nodes[index]
    assert merged.weight == 4
    assert merged.tie_key == 0
    assert (merged.left, merged.right) == (4, 0)
    assert sorted(pool.active) == [1, 2, 3, index]


def test_merged_node_wins_tie_against_later_leaf():
    # a+b merge into weight 2 with tie_key 0, which beats leaf c of weight 2
    pool = NodePool.init_leaves([1, 1, 2, 5, 5])
    pool.merge(*pool.select_two())
    first, second = pool.select_two()
    assert pool.nodes[first].tie_key == 0
    assert second == 2


def test_tree_shape_invariants():
    pool = NodePool.init_leaves([6, 2, 2, 9, 1])
    root = build_tree(pool)
    assert len(pool.nodes) == 2 * NUM_SYMBOLS - 1
    assert pool.active == [root]

    children = []
    for node in pool.nodes:
        if node.is_leaf:
            assert node.left is None and node.right is None
        else:
            assert node.left is not None and node.right is not None
            assert pool.nodes[node.left] < pool.nodes[node.right]
            assert node.weight == pool.nodes[node.left].weight + pool.nodes[node.right].weight
            assert node.tie_key == min(pool.nodes[node.left].tie_key, pool.nodes[node.right].tie_key)
            children.extend([node.left, node.right])
    # every node except the root has exactly one parent
    assert sorted(children) == [i for i in range(len(pool.nodes)) if i != root]
    assert pool.nodes[root].weight == 20


def test_equal_frequencies_lower_id_goes_left_at_first_merge():
    pool = NodePool.init_leaves([4, 8, 8, 4, 9])
    build_tree(pool)
    first_merge = pool.nodes[NUM_SYMBOLS]
    assert (first_merge.left, first_merge.right) == (0, 3)


def test_assign_codes_on_hand_built_tree():
    pool = NodePool.init_leaves([1, 1, 1, 1, 1])
    root = build_tree(pool)
    table = assign_codes(pool, root)
    assert isinstance(table, CodeTable)
    assert table[4] == Codeword(length=2, bits=0b10)


def test_lengths_bounded_over_small_grid():
    for freqs in itertools.product([0, 1, 2, 5, 31], repeat=NUM_SYMBOLS):
        lengths = build_code_table(freqs).lengths
        assert len(lengths) == NUM_SYMBOLS
        assert all(1 <= l <= 4 for l in lengths), freqs


def test_weighted_length():
    table = build_code_table([1, 1, 1, 1, 1])
    assert table.weighted_length([1, 1, 1, 1, 1]) == 12


def test_partial_table_rejected():
    with pytest.raises(ValueError):
        CodeTable((Codeword(1, 0), Codeword(1, 1)))


@pytest.mark.parametrize("freqs", [
    [1, 2, 3, 4],
    [1, 2, 3, 4, 5, 6],
    [1, 2, 3, 4, 32],
    [-1, 2, 3, 4, 5],
    [1, 2.0, 3, 4, 5],
    [1, True, 3, 4, 5],
    ["1", 2, 3, 4, 5],
])
def test_invalid_frequencies_rejected(freqs):
    with pytest.raises(ValueError):
        build_code_table(freqs)


def test_validate_accepts_bounds():
    assert validate_frequencies((0, 31, 0, 31, 0)) == [0, 31, 0, 31, 0]


class _Count:
    # minimal int-like, the way numpy scalar integers behave
    def __init__(self, n):
        self.n = n

    def __index__(self):
        return self.n


def test_int_like_frequencies_accepted():
    freqs = [_Count(31), _Count(1), 1, 1, 1]
    assert validate_frequencies(freqs) == [31, 1, 1, 1, 1]
    assert build_code_table(freqs) == build_code_table([31, 1, 1, 1, 1])


def test_int_like_frequency_still_range_checked():
    with pytest.raises(ValueError):
        validate_frequencies([_Count(32), 1, 1, 1, 1])
