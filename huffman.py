from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from bitarray import bitarray

from bitstream import pack_bits, read_bitstream
from errors import DegenerateTree, EmptyAlphabet, EmptyCodeTable, UnknownCode
from freqtable import FrequencyTable

Code = Tuple[int, int] # (value, length): bits of the code as an integer, MSB first


@dataclass(frozen=True)
class HuffmanNode: # Node for Huffman tree
    frequency: int
    symbol: Optional[str] = None # leaves only
    left: Optional[int] = None   # arena handle, internal nodes only
    right: Optional[int] = None

    @property
    def is_leaf(self) -> bool:
        return self.symbol is not None


@dataclass(frozen=True)
class HuffmanTree:
    nodes: Tuple[HuffmanNode, ...]
    root: int

    @property
    def root_node(self) -> HuffmanNode:
        return self.nodes[self.root]

    def leaves(self) -> List[HuffmanNode]:
        return [node for node in self.nodes if node.is_leaf]


def _two_smallest(order: List[int], nodes: List[HuffmanNode]) -> Tuple[int, int]:
    # strict comparisons: on equal frequency the earlier position wins
    first, second = order[0], order[1]
    if nodes[second].frequency < nodes[first].frequency:
        first, second = second, first

    for handle in order[2:]:
        frequency = nodes[handle].frequency
        if frequency < nodes[first].frequency:
            second = first
            first = handle
        elif frequency < nodes[second].frequency:
            second = handle

    return first, second


def build_huffman_tree(frequency_table: FrequencyTable) -> HuffmanTree:
    """
    Merge the two least frequent nodes until one root remains.

    The working list starts in symbol order and is stable-sorted by
    descending frequency before every merge, then scanned for the two
    smallest nodes. The smaller one becomes the left (0) child. Encoder
    and decoder must agree on this order to build the same tree.
    """
    if len(frequency_table) == 0:
        raise EmptyAlphabet()

    nodes = [HuffmanNode(frequency, symbol=symbol) for symbol, frequency in frequency_table.items()]
    working = list(range(len(nodes)))

    while len(working) > 1:
        working.sort(key=lambda handle: -nodes[handle].frequency)
        left, right = _two_smallest(working, nodes)

        nodes.append(HuffmanNode(nodes[left].frequency + nodes[right].frequency, left=left, right=right))
        working.remove(left)
        working.remove(right)
        working.append(len(nodes) - 1)

    return HuffmanTree(tuple(nodes), working[0])


@dataclass(frozen=True)
class CodeTable:
    codes: Mapping[Code, str]

    def __post_init__(self):
        object.__setattr__(self, "codes", MappingProxyType(dict(self.codes)))

    def __len__(self) -> int:
        return len(self.codes)

    def lookup(self, value: int, length: int) -> Optional[str]:
        return self.codes.get((value, length))

    @property
    def max_length(self) -> int:
        return max((length for _, length in self.codes), default=0)

    def as_strings(self) -> Dict[str, str]:
        """Bit-string view, e.g. {'010': 'c'}."""
        return {format(value, f"0{length}b"): symbol for (value, length), symbol in self.codes.items()}

    def encoding_map(self) -> Dict[str, Code]:
        return {symbol: code for code, symbol in self.codes.items()}


def generate_code_table(tree: HuffmanTree) -> CodeTable:
    """
    Walk the tree depth first and map every root-to-leaf path to its symbol.
    A tree that is a single leaf gets the one-bit code 0.
    """
    codes: Dict[Code, str] = {}
    seen = set()
    stack = [(tree.root, 0, 0)]

    while stack:
        handle, value, length = stack.pop()
        if not 0 <= handle < len(tree.nodes):
            raise DegenerateTree(handle, "handle out of range")
        if handle in seen:
            raise DegenerateTree(handle, "node reached twice")
        seen.add(handle)
        node = tree.nodes[handle]

        if node.is_leaf:
            if node.left is not None or node.right is not None:
                raise DegenerateTree(handle, "leaf has children")
            codes[(value, length) if length else (0, 1)] = node.symbol
            continue

        if node.left is None or node.right is None:
            raise DegenerateTree(handle, "internal node is missing a child")
        # right pushed first so the left branch is walked first
        stack.append((node.right, (value << 1) | 1, length + 1))
        stack.append((node.left, value << 1, length + 1))

    return CodeTable(codes)


def huffman_decode(bits: bitarray, code_table: CodeTable) -> List[str]:
    """
    Greedy prefix-code decoding: accumulate bits until they match a code,
    emit its symbol, start over. Leftover bits raise UnknownCode.
    """
    if len(code_table) == 0:
        raise EmptyCodeTable()

    longest = code_table.max_length
    decoded: List[str] = []
    value = 0
    length = 0
    start = 0

    for offset, bit in enumerate(bits):
        if length == 0:
            start = offset
        value = (value << 1) | bit
        length += 1

        symbol = code_table.lookup(value, length)
        if symbol is not None:
            decoded.append(symbol)
            value = 0
            length = 0
        elif length >= longest: # no longer code exists, this can never match
            raise UnknownCode(start, format(value, f"0{length}b"))

    if length:
        raise UnknownCode(start, format(value, f"0{length}b"))

    return decoded


def huffman_encode(symbols: Iterable[str], code_table: CodeTable) -> bitarray:
    encoding = code_table.encoding_map()
    out = bitarray(endian="big")
    for symbol in symbols:
        code = encoding.get(symbol)
        if code is None:
            raise ValueError(f"symbol {symbol!r} has no code")
        value, length = code
        out.extend(format(value, f"0{length}b"))
    return out


def compress(symbols: Iterable[str], frequency_table: FrequencyTable) -> bytes:
    code_table = generate_code_table(build_huffman_tree(frequency_table))
    return pack_bits(huffman_encode(symbols, code_table))


def decompress(data: bytes, frequency_table: FrequencyTable) -> List[str]:
    # the table must be complete before any bit is decoded
    code_table = generate_code_table(build_huffman_tree(frequency_table))
    return huffman_decode(read_bitstream(data), code_table)
