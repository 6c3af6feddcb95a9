"""
Mask Run-Length Encoding
========================

Compresses the per-pixel mask-id grid into the mask block of a .gnw
image. The firmware uses these runs to light up individual LCD segments.

Entry Format
------------
Each run is one 5-byte entry holding four 10-bit fields, packed least
significant bit first in this order:

    Bits 0-9:    mask id
    Bits 10-19:  start x
    Bits 20-29:  y
    Bits 30-39:  length

Block Format
------------
The block has a fixed capacity of 5 * 52 * height bytes and is zero
initialized. Entries are appended in scan order (row by row, left to
right) with no per-row index; the firmware scans the whole stream.
Unused capacity stays zero, so the first entry with length 0 marks the
end of the data.

Runs never cross a row boundary. Pixels without an id end the current
run and produce no entry of their own.

If the runs do not fit, encoding fails with MaskCapacityError. The
capacity assumes long horizontal runs typical of segment art; a
checkerboard-like mask is expected to fail rather than lose entries.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
import logging

from gnw_sdk.errors import GeometryError, MaskCapacityError, MaskIdError
from gnw_sdk.gnw.bits import pack_fields, unpack_fields
from gnw_sdk.gnw.layout import (
    AVERAGE_MASK_ENTRIES_PER_ROW,
    BYTES_PER_MASK_ENTRY,
    FIELD_BITS,
    FIELD_MAX,
    mask_capacity,
)

logger = logging.getLogger(__name__)

_ENTRY_WIDTHS = [FIELD_BITS] * 4


# =============================================================================
# Mask Entry
# =============================================================================

@dataclass(frozen=True)
class MaskEntry:
    """
    One horizontal run of pixels sharing a mask id.

    Attributes:
        id: Mask id (0-1023)
        start_x: Column of the first pixel
        y: Row
        length: Number of pixels in the run
    """
    id: int
    start_x: int
    y: int
    length: int

    def to_bytes(self) -> bytes:
        """Pack the entry into 5 bytes."""
        return pack_fields(
            [
                (self.id, FIELD_BITS),
                (self.start_x, FIELD_BITS),
                (self.y, FIELD_BITS),
                (self.length, FIELD_BITS),
            ],
            BYTES_PER_MASK_ENTRY,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "MaskEntry":
        """Unpack an entry from 5 bytes."""
        if len(data) < BYTES_PER_MASK_ENTRY:
            raise ValueError(
                f"Mask entry too short: need {BYTES_PER_MASK_ENTRY} bytes, got {len(data)}"
            )
        mask_id, start_x, y, length = unpack_fields(data[:BYTES_PER_MASK_ENTRY], _ENTRY_WIDTHS)
        return cls(id=mask_id, start_x=start_x, y=y, length=length)


# =============================================================================
# Encoder
# =============================================================================

class MaskEncoder:
    """
    Builds a fixed-capacity mask block.

    Args:
        width: Raster width in pixels (at most 1023)
        height: Raster height in pixels (at most 1023)
        entries_per_row: Average runs per row the block is sized for

    Example:
        >>> encoder = MaskEncoder(width=4, height=1)
        >>> encoder.encode([None, 3, 3, None])
        >>> encoder.entries
        [MaskEntry(id=3, start_x=1, y=0, length=2)]
    """

    def __init__(
        self,
        width: int,
        height: int,
        entries_per_row: int = AVERAGE_MASK_ENTRIES_PER_ROW,
    ):
        for name, value in (("Raster width", width), ("Raster height", height)):
            if not 0 <= value <= FIELD_MAX:
                raise GeometryError(name, value)

        self.width = width
        self.height = height
        self.capacity = mask_capacity(height, entries_per_row)
        self.entries: list[MaskEntry] = []
        self._buffer = bytearray(self.capacity)
        self._byte_index = 0

    @property
    def used_bytes(self) -> int:
        return self._byte_index

    def append(self, entry: MaskEntry) -> None:
        """
        Append one entry to the block.

        Raises:
            MaskCapacityError: If the entry does not fit
        """
        end = self._byte_index + BYTES_PER_MASK_ENTRY
        if end > self.capacity:
            raise MaskCapacityError(required=end, capacity=self.capacity)

        self._buffer[self._byte_index:end] = entry.to_bytes()
        self._byte_index = end
        self.entries.append(entry)

    def encode(self, mask_ids: Sequence[Optional[int]]) -> None:
        """
        Run-length encode a row-major mask-id grid.

        Args:
            mask_ids: width * height optional ids

        Raises:
            ValueError: If the grid size does not match the raster
            MaskIdError: If an id does not fit in 10 bits
            MaskCapacityError: If the runs exceed the block capacity
        """
        expected = self.width * self.height
        if len(mask_ids) != expected:
            raise ValueError(
                f"Mask grid has {len(mask_ids)} pixels, expected {expected} "
                f"({self.width}x{self.height})"
            )

        for y in range(self.height):
            row = y * self.width
            current_id: Optional[int] = None
            start_x = 0
            length = 0

            for x in range(self.width):
                mask_id = mask_ids[row + x]

                if mask_id is None:
                    if current_id is not None:
                        self.append(MaskEntry(current_id, start_x, y, length))
                        current_id = None
                    continue

                if not 0 <= mask_id <= FIELD_MAX:
                    raise MaskIdError(mask_id, x, y)

                if mask_id == current_id:
                    length += 1
                    continue

                if current_id is not None:
                    self.append(MaskEntry(current_id, start_x, y, length))
                current_id = mask_id
                start_x = x
                length = 1

            # Runs end at the row boundary
            if current_id is not None:
                self.append(MaskEntry(current_id, start_x, y, length))

        logger.debug(
            f"Encoded {len(self.entries)} mask entries "
            f"({self._byte_index}/{self.capacity} bytes)"
        )

    def to_bytes(self) -> bytes:
        """The whole block, zero padded to capacity."""
        return bytes(self._buffer)


def build_mask_block(
    mask_ids: Sequence[Optional[int]],
    width: int,
    height: int,
    entries_per_row: int = AVERAGE_MASK_ENTRIES_PER_ROW,
) -> bytes:
    """
    Encode a mask-id grid into a complete mask block.

    Returns:
        mask_capacity(height, entries_per_row) bytes

    Raises:
        MaskCapacityError: If the runs exceed the block capacity
        MaskIdError: If an id does not fit in 10 bits
    """
    encoder = MaskEncoder(width, height, entries_per_row)
    encoder.encode(mask_ids)
    return encoder.to_bytes()


# =============================================================================
# Decoding
# =============================================================================

def decode_mask_entries(block: bytes) -> list[MaskEntry]:
    """
    Read every entry from a mask block.

    Scanning stops at the first zero-length entry (the zero padding) or
    the end of the block.
    """
    entries = []
    for offset in range(0, len(block) - BYTES_PER_MASK_ENTRY + 1, BYTES_PER_MASK_ENTRY):
        entry = MaskEntry.from_bytes(block[offset:offset + BYTES_PER_MASK_ENTRY])
        if entry.length == 0:
            break
        entries.append(entry)
    return entries


def rasterize_mask_entries(
    entries: Sequence[MaskEntry],
    width: int,
    height: int,
) -> list[Optional[int]]:
    """
    Paint entries back onto a width * height grid.

    Returns:
        Row-major optional ids, None where no run covers a pixel

    Raises:
        ValueError: If an entry lies outside the grid
    """
    grid: list[Optional[int]] = [None] * (width * height)
    for entry in entries:
        if entry.y >= height or entry.start_x + entry.length > width:
            raise ValueError(f"{entry} lies outside {width}x{height} raster")
        row = entry.y * width
        for x in range(entry.start_x, entry.start_x + entry.length):
            grid[row + x] = entry.id
    return grid
