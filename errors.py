class HuffmanError(ValueError): # base for every decode failure
    pass


class EmptyAlphabet(HuffmanError):
    def __init__(self):
        super().__init__("cannot build a Huffman tree from an empty frequency table")


class DegenerateTree(HuffmanError):
    def __init__(self, node: int, reason: str):
        self.node = node # arena handle of the offending node
        super().__init__(f"malformed Huffman tree at node {node}: {reason}")


class TruncatedStream(HuffmanError):
    def __init__(self, available_bits: int, needed_bits: int):
        self.available_bits = available_bits
        self.needed_bits = needed_bits
        super().__init__(
            f"truncated stream: {needed_bits} bits needed, {available_bits} available "
            f"(byte offset {available_bits // 8})"
        )


class UnknownCode(HuffmanError):
    def __init__(self, bit_offset: int, candidate: str):
        self.bit_offset = bit_offset # where the unmatched candidate starts
        self.candidate = candidate
        super().__init__(
            f"no code matches '{candidate}' starting at bit {bit_offset} "
            f"(byte {bit_offset // 8} of the payload)"
        )


class EmptyCodeTable(HuffmanError):
    def __init__(self):
        super().__init__("cannot decode with an empty code table")


class MalformedFrequencyLine(HuffmanError):
    def __init__(self, line_number: int, line: str, reason: str):
        self.line_number = line_number # 1-based, header is line 1
        self.line = line
        super().__init__(f"line {line_number}: {reason}: {line!r}")
