"""
Independent reference build for checking the encoder

Uses a heap of (weight, tie_key, node) entries instead of the arena scan in
huffman_table, so both the code lengths and the exact code bits can be compared
"""

import heapq
from fractions import Fraction
from typing import Dict, Iterable, List


class RefNode:
    def __init__(self, weight, tie_key, symbol=None, left=None, right=None):
        self.weight = weight
        self.tie_key = tie_key
        self.symbol = symbol
        self.left = left
        self.right = right


def build_reference_tree(frequencies: Iterable[int]) -> RefNode:
    # tie keys are distinct among live entries, so the heap never compares nodes
    heap = [(f, symbol, RefNode(f, symbol, symbol=symbol)) for symbol, f in enumerate(frequencies)]
    if not heap:
        raise ValueError("cannot build a Huffman tree over an empty alphabet")
    heapq.heapify(heap)

    while len(heap) > 1:
        w_hi, k_hi, hi = heapq.heappop(heap)
        w_lo, k_lo, lo = heapq.heappop(heap)
        key = min(k_hi, k_lo)
        heapq.heappush(heap, (w_hi + w_lo, key, RefNode(w_hi + w_lo, key, left=hi, right=lo)))

    return heap[0][2]


def reference_codes(root: RefNode) -> Dict[int, str]:
    codes: Dict[int, str] = {}
    stack = [(root, "")]
    while stack:
        node, path = stack.pop()
        if node.symbol is not None:
            codes[node.symbol] = path
            continue
        stack.append((node.right, path + "1"))
        stack.append((node.left, path + "0"))
    return codes


def reference_bitstrings(frequencies: Iterable[int]) -> List[str]:
    """True-length codewords ordered by symbol id"""
    codes = reference_codes(build_reference_tree(frequencies))
    return [codes[symbol] for symbol in sorted(codes)]


def reference_code_lengths(frequencies: Iterable[int]) -> List[int]:
    return [len(code) for code in reference_bitstrings(frequencies)]


def optimal_cost(frequencies: Iterable[int]) -> int:
    """
    Minimum of sum(frequency * length) over all prefix codes
    Every Huffman tree reaches it, so it does not depend on the tie rule
    """
    freqs = list(frequencies)
    return sum(f * l for f, l in zip(freqs, reference_code_lengths(freqs)))


def kraft_sum(lengths: Iterable[int]) -> Fraction:
    return sum((Fraction(1, 2 ** l) for l in lengths), Fraction(0))


def is_prefix_free(bitstrings: Iterable[str]) -> bool:
    # after sorting, a prefix always lands right before one of its extensions
    ordered = sorted(bitstrings)
    for shorter, longer in zip(ordered, ordered[1:]):
        if longer.startswith(shorter):
            return False
    return True
