from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

SYMBOLS = "abcde"
NUM_SYMBOLS = len(SYMBOLS)
MAX_FREQUENCY = 31 # frequencies fit in 5 bits
CODE_WIDTH = 4 # width of a padded codeword field


def validate_frequencies(frequencies: Iterable[int]) -> List[int]:
    """
    Checks the frequency vector at the boundary
    Returns a fresh list of 5 ints ordered a..e, raises ValueError otherwise
    """
    raw = list(frequencies)
    if len(raw) != NUM_SYMBOLS:
        raise ValueError(f"expected {NUM_SYMBOLS} frequencies, got {len(raw)}")
    values = []
    for symbol_id, item in enumerate(raw):
        name = SYMBOLS[symbol_id]
        if isinstance(item, bool):
            raise ValueError(f"frequency of '{name}' must be an int, got {item!r}")
        try:
            value = operator.index(item) # accepts numpy integers and other int-likes
        except TypeError:
            raise ValueError(f"frequency of '{name}' must be an int, got {item!r}") from None
        if not 0 <= value <= MAX_FREQUENCY:
            raise ValueError(f"frequency of '{name}' out of range [0, {MAX_FREQUENCY}]: {value}")
        values.append(value)
    return values


class Node: # entry in the node arena
    def __init__(self, weight, tie_key, symbol=None, left=None, right=None):
        self.weight = weight # sum of leaf frequencies below this node
        self.tie_key = tie_key # smallest symbol id below this node
        self.symbol = symbol # symbol id or None
        self.left = left # arena index of the higher priority child
        self.right = right

    @property
    def is_leaf(self) -> bool:
        return self.symbol is not None

    @property
    def priority(self) -> Tuple[int, int]:
        return (self.weight, self.tie_key)

    def __lt__(self, other):
        return self.priority < other.priority

    def __repr__(self):
        if self.is_leaf:
            return f"Leaf({SYMBOLS[self.symbol]}, w={self.weight})"
        return f"Node(w={self.weight}, key={self.tie_key}, left={self.left}, right={self.right})"


class NodePool:
    """
    Arena of nodes for one invocation plus the set of nodes still eligible for merging
    Nodes are only ever appended, so an index stays valid for the life of the pool
    """

    def __init__(self):
        self.nodes: List[Node] = []
        self.active: List[int] = []

    @classmethod
    def init_leaves(cls, frequencies: Iterable[int]) -> "NodePool":
        pool = cls()
        for symbol_id, frequency in enumerate(validate_frequencies(frequencies)):
            pool.nodes.append(Node(frequency, symbol_id, symbol=symbol_id))
            pool.active.append(symbol_id)
        return pool

    def select_two(self) -> Tuple[int, int]:
        # linear scan for the two smallest (weight, tie_key) pairs
        first: Optional[int] = None
        second: Optional[int] = None
        for index in self.active:
            node = self.nodes[index]
            if first is None or node < self.nodes[first]:
                first, second = index, first
            elif second is None or node < self.nodes[second]:
                second = index
        assert first is not None and second is not None, "fewer than two active nodes"
        return first, second

    def merge(self, first: int, second: int) -> int:
        left, right = self.nodes[first], self.nodes[second]
        assert left < right, "left child must have the higher priority"
        self.active.remove(first)
        self.active.remove(second)
        merged = Node(
            left.weight + right.weight,
            min(left.tie_key, right.tie_key),
            left=first,
            right=second,
        )
        self.nodes.append(merged)
        index = len(self.nodes) - 1
        self.active.append(index)
        return index


def build_tree(pool: NodePool) -> int:
    # n leaves always need exactly n-1 merges
    for _ in range(NUM_SYMBOLS - 1):
        first, second = pool.select_two()
        pool.merge(first, second)

    assert len(pool.active) == 1, f"expected a single root, found {len(pool.active)} active nodes"
    assert len(pool.nodes) == 2 * NUM_SYMBOLS - 1
    return pool.active[0] # root of the tree


@dataclass(frozen=True)
class Codeword:
    length: int # depth of the leaf
    bits: int # root-to-leaf path, root decision in the most significant position

    @property
    def padded(self) -> int:
        # zero-left-padded to CODE_WIDTH, so the path already sits at the low end
        return self.bits

    @property
    def bitstring(self) -> str:
        return format(self.bits, f"0{self.length}b")

    @property
    def padded_bitstring(self) -> str:
        return format(self.padded, f"0{CODE_WIDTH}b")


@dataclass(frozen=True)
class CodeTable:
    codewords: Tuple[Codeword, ...] # indexed by symbol id

    def __post_init__(self):
        if len(self.codewords) != NUM_SYMBOLS:
            raise ValueError(f"code table needs {NUM_SYMBOLS} codewords, got {len(self.codewords)}")

    def __getitem__(self, symbol_id: int) -> Codeword:
        return self.codewords[symbol_id]

    def __iter__(self) -> Iterator[Codeword]:
        return iter(self.codewords)

    def __len__(self) -> int:
        return len(self.codewords)

    @property
    def lengths(self) -> List[int]:
        return [cw.length for cw in self.codewords]

    @property
    def codes(self) -> List[int]:
        return [cw.padded for cw in self.codewords]

    def weighted_length(self, frequencies: Iterable[int]) -> int:
        return sum(f * cw.length for f, cw in zip(frequencies, self.codewords))

    def as_dict(self) -> Dict[str, Tuple[int, str]]:
        return {SYMBOLS[i]: (cw.length, cw.bitstring) for i, cw in enumerate(self.codewords)}


def assign_codes(pool: NodePool, root: int) -> CodeTable:
    found: Dict[int, Codeword] = {}

    def assign_helper(index, bits, depth): # left appends 0, right appends 1
        node = pool.nodes[index]
        if node.is_leaf:
            assert 1 <= depth <= CODE_WIDTH, f"leaf depth {depth} does not fit a {CODE_WIDTH}-bit field"
            found[node.symbol] = Codeword(depth, bits)
            return
        assign_helper(node.left, bits << 1, depth + 1)
        assign_helper(node.right, (bits << 1) | 1, depth + 1)

    assign_helper(root, 0, 0)
    assert sorted(found) == list(range(NUM_SYMBOLS)), "every symbol must reach exactly one leaf"
    return CodeTable(tuple(found[i] for i in range(NUM_SYMBOLS)))


def build_code_table(frequencies: Iterable[int]) -> CodeTable:
    """Computes the (length, bits) table for a vector of 5 frequencies ordered a..e"""
    pool = NodePool.init_leaves(frequencies)
    root = build_tree(pool)
    return assign_codes(pool, root)
