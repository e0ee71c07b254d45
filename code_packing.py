"""
Fixed-width packing of the encoder inputs and outputs

Every word is a run of equal-width fields, symbol 'a' in the most significant field
  - frequencies: 5 x 5 bits = 25-bit word
  - codes:       5 x 4 bits = 20-bit word (zero-left-padded codewords)
  - lengths:     5 x 3 bits = 15-bit word

The padded codes alone cannot be decoded, two codewords of different lengths can
share a 4-bit field. encode() therefore always returns the lengths with the codes,
encode_word() keeps the old codes-only interface for existing test benches.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from huffman_table import CODE_WIDTH, NUM_SYMBOLS, CodeTable, build_code_table

FREQ_WIDTH = 5
LENGTH_WIDTH = 3 # lengths are 1..4


def pack_fields(values: Iterable[int], width: int) -> int:
    word = 0
    for value in values:
        if not 0 <= value < (1 << width):
            raise ValueError(f"value {value} does not fit in {width} bits")
        word = (word << width) | value
    return word


def unpack_fields(word: int, width: int, count: int) -> List[int]:
    if not 0 <= word < (1 << (width * count)):
        raise ValueError(f"word {word:#x} does not fit in {width * count} bits")
    mask = (1 << width) - 1
    return [(word >> (width * (count - 1 - i))) & mask for i in range(count)]


def pack_frequencies(frequencies: Iterable[int]) -> int:
    return pack_fields(frequencies, FREQ_WIDTH)


def unpack_frequencies(word: int) -> List[int]:
    return unpack_fields(word, FREQ_WIDTH, NUM_SYMBOLS)


def pack_codes(table: CodeTable) -> int:
    return pack_fields(table.codes, CODE_WIDTH)


def pack_lengths(table: CodeTable) -> int:
    return pack_fields(table.lengths, LENGTH_WIDTH)


@dataclass(frozen=True)
class PackedCodes:
    codes: int # 20-bit code word
    lengths: int # 15-bit length word

    @property
    def code_fields(self) -> List[int]:
        return unpack_fields(self.codes, CODE_WIDTH, NUM_SYMBOLS)

    @property
    def length_fields(self) -> List[int]:
        return unpack_fields(self.lengths, LENGTH_WIDTH, NUM_SYMBOLS)


def encode(frequencies: Iterable[int]) -> PackedCodes:
    table = build_code_table(frequencies)
    return PackedCodes(codes=pack_codes(table), lengths=pack_lengths(table))


def encode_word(frequency_word: int) -> int:
    # codes-only word, lengths are dropped
    return encode(unpack_frequencies(frequency_word)).codes


def format_word(word: int, width: int, count: int = NUM_SYMBOLS) -> str:
    """Binary digits of a packed word grouped per field, e.g. '0110 0111 0000 0001 0010'"""
    return " ".join(format(field, f"0{width}b") for field in unpack_fields(word, width, count))
