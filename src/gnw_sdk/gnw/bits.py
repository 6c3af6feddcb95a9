"""
Bit Packing
===========

Minimal fixed-width bit writer and reader used for the 10-bit fields of
the header geometry and the mask entries.

Bits are stored least significant bit first: stream bit i lives in bit
(i % 8) of byte (i // 8). A value is written starting with its own least
significant bit, so consecutive fields occupy ascending bit positions.

Example:
    >>> pack_fields([(80, 10), (64, 10)], 3).hex()
    '500001'
    >>> unpack_fields(bytes.fromhex("500001"), [10, 10])
    [80, 64]
"""

from typing import Iterable, Sequence


class BitWriter:
    """
    Writes fixed-width fields into a zero-filled buffer.

    Args:
        size_bytes: Size of the buffer; unused trailing bits stay zero
    """

    def __init__(self, size_bytes: int):
        self._buffer = bytearray(size_bytes)
        self._position = 0

    @property
    def position(self) -> int:
        """Current bit cursor."""
        return self._position

    def write(self, value: int, width: int) -> "BitWriter":
        """
        Write the low `width` bits of `value` at the cursor.

        Raises:
            ValueError: If the value is negative, wider than `width` bits,
                or the buffer has no room left
        """
        if value < 0 or value >> width:
            raise ValueError(f"Value {value} does not fit in {width} bits")
        if self._position + width > len(self._buffer) * 8:
            raise ValueError(
                f"Writing {width} bits at bit {self._position} overflows "
                f"{len(self._buffer)}-byte buffer"
            )

        for i in range(width):
            if (value >> i) & 1:
                bit = self._position + i
                self._buffer[bit // 8] |= 1 << (bit % 8)
        self._position += width
        return self

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)


class BitReader:
    """Reads fixed-width fields written by BitWriter."""

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._position = 0

    def read(self, width: int) -> int:
        """
        Read the next `width` bits as an unsigned integer.

        Raises:
            ValueError: If fewer than `width` bits remain
        """
        if self._position + width > len(self._data) * 8:
            raise ValueError(
                f"Reading {width} bits at bit {self._position} overruns "
                f"{len(self._data)}-byte buffer"
            )

        value = 0
        for i in range(width):
            bit = self._position + i
            if (self._data[bit // 8] >> (bit % 8)) & 1:
                value |= 1 << i
        self._position += width
        return value


def pack_fields(fields: Iterable[tuple[int, int]], size_bytes: int) -> bytes:
    """
    Pack (value, width) pairs into a buffer of `size_bytes` bytes.

    Args:
        fields: Pairs of value and bit width, lowest bits first
        size_bytes: Total output size

    Returns:
        The packed bytes
    """
    writer = BitWriter(size_bytes)
    for value, width in fields:
        writer.write(value, width)
    return writer.to_bytes()


def unpack_fields(data: bytes, widths: Sequence[int]) -> list[int]:
    """Unpack consecutive fields of the given bit widths."""
    reader = BitReader(data)
    return [reader.read(width) for width in widths]
