from __future__ import annotations

from bitarray import bitarray
from bitarray.util import ba2int, int2ba

from errors import TruncatedStream

HEADER_BITS = 8 # unsigned padding count, MSB first


def bytes_to_bits(data: bytes) -> bitarray:
    """bytes -> bits, 8 per byte, most significant bit first."""
    bits = bitarray(endian="big")
    bits.frombytes(data)
    return bits


def remove_padding(bits: bitarray) -> bitarray:
    """
    Strip the padding header and the trailing padding it declares.

    The first 8 bits give how many bits at the end of the rest of the
    stream were only added to reach a byte boundary.
    """
    if len(bits) < HEADER_BITS:
        raise TruncatedStream(len(bits), HEADER_BITS)

    pad_bits = ba2int(bits[:HEADER_BITS])
    payload = bits[HEADER_BITS:]
    if pad_bits > len(payload):
        raise TruncatedStream(len(bits), HEADER_BITS + pad_bits)

    return payload[:len(payload) - pad_bits]


def read_bitstream(data: bytes) -> bitarray:
    return remove_padding(bytes_to_bits(data))


def pack_bits(bits: bitarray) -> bytes:
    """
    Inverse of read_bitstream: header + bits + zero padding.
    No padding is added when the bits already end on a byte boundary.
    """
    pad_bits = (8 - len(bits) % 8) % 8
    out = int2ba(pad_bits, length=HEADER_BITS, endian="big")
    out.extend(bits)
    out.extend("0" * pad_bits)
    return out.tobytes()
