from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Mapping, Tuple

from errors import MalformedFrequencyLine


@dataclass(frozen=True)
class FrequencyTable:
    """
    Immutable symbol -> count mapping, kept sorted by symbol.

    The sorted order is the order tree construction starts from, so two
    tables with the same counts always build the same tree.
    """
    entries: Tuple[Tuple[str, int], ...] = ()
    _index: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        index: Dict[str, int] = {}
        for symbol, count in self.entries:
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise ValueError(f"frequency of {symbol!r} must be a non-negative int, got {count!r}")
            if symbol in index:
                raise ValueError(f"symbol {symbol!r} appears more than once")
            index[symbol] = count
        object.__setattr__(self, "entries", tuple(sorted(index.items())))
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_mapping(cls, counts: Mapping[str, int]) -> "FrequencyTable":
        return cls(tuple(counts.items()))

    @classmethod
    def from_text(cls, text: Iterable[str]) -> "FrequencyTable":
        return cls.from_mapping(Counter(text))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return (symbol for symbol, _ in self.entries)

    def __contains__(self, symbol) -> bool:
        return symbol in self._index

    def __getitem__(self, symbol: str) -> int:
        return self._index[symbol]

    def items(self) -> Tuple[Tuple[str, int], ...]:
        return self.entries

    def total(self) -> int: # number of symbols the table describes
        return sum(count for _, count in self.entries)


def parse_frequency_lines(lines: Iterable[str]) -> FrequencyTable:
    """
    Parse serialized frequency data: a header line, then one "symbol count"
    line per symbol. A space symbol collides with the delimiter, so its line
    reads "  count" and splits into three tokens.
    """
    counts: Dict[str, int] = {}
    for line_number, raw in enumerate(lines, start=1):
        if line_number == 1:
            continue # header
        line = raw.rstrip("\r\n")
        parts = line.split(" ")
        # leading empties mark the space symbol, trailing ones are dropped
        while parts and parts[-1] == "":
            parts.pop()

        if len(parts) == 2:
            symbol = parts[0]
        elif len(parts) == 3:
            symbol = " "
        else:
            raise MalformedFrequencyLine(line_number, line, f"expected 2 or 3 tokens, got {len(parts)}")

        try:
            count = int(parts[-1])
        except ValueError:
            raise MalformedFrequencyLine(line_number, line, "frequency is not an integer") from None
        if count < 0:
            raise MalformedFrequencyLine(line_number, line, "frequency is negative")

        counts[symbol] = count # a repeated symbol keeps its last count

    return FrequencyTable.from_mapping(counts)
