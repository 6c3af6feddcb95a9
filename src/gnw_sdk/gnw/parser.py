"""
GNW Image Parser
================

Splits an existing .gnw image back into its blocks for inspection and
verification.

The header stores the declared screen geometry, not the raster size, so
the parser must be told the raster dimensions the image was built with
(720x720 for images rendered by the standard pipeline).

Usage
-----
    >>> parser = GnwParser.from_file("Ball.gnw")
    >>> parser.header.width, parser.header.height
    (80, 64)
    >>> len(parser.mask_entries)
    1342
"""

from pathlib import Path
from typing import Any, Optional, Union
import logging

from gnw_sdk.errors import GnwFormatError
from gnw_sdk.gnw.header import GnwHeader
from gnw_sdk.gnw.layout import (
    AVERAGE_MASK_ENTRIES_PER_ROW,
    BYTES_PER_MASK_ENTRY,
    DEFAULT_RASTER_SIZE,
    FORMAT_VERSION,
    HEADER_SIZE,
    mask_capacity,
    pixel_block_size,
)
from gnw_sdk.gnw.mask import MaskEntry, decode_mask_entries, rasterize_mask_entries
from gnw_sdk.gnw.pixels import unpack_pixels
from gnw_sdk.platform.models import CPUType

logger = logging.getLogger(__name__)

SCREEN_TYPE_NAMES = {0: "single", 1: "dual vertical", 2: "dual horizontal"}


class GnwParser:
    """
    Parses a .gnw image.

    Args:
        data: The complete image bytes
        width: Raster width the image was built with
        height: Raster height the image was built with
        entries_per_row: Mask block sizing the image was built with

    Raises:
        GnwFormatError: If the image is truncated or has an unknown version
    """

    def __init__(
        self,
        data: bytes,
        width: int = DEFAULT_RASTER_SIZE,
        height: int = DEFAULT_RASTER_SIZE,
        entries_per_row: int = AVERAGE_MASK_ENTRIES_PER_ROW,
    ):
        self.data = bytes(data)
        self.width = width
        self.height = height
        self.entries_per_row = entries_per_row

        self.header: Optional[GnwHeader] = None
        self.pixel_block = b""
        self.mask_block = b""
        self.mask_entries: list[MaskEntry] = []
        self.rom = b""

        self._parse()

    @classmethod
    def from_file(cls, filepath: Union[str, Path], **kwargs) -> "GnwParser":
        """
        Create a GnwParser from a file on disk.

        Raises:
            FileNotFoundError: If the file doesn't exist
            GnwFormatError: If the file cannot be parsed
        """
        return cls(Path(filepath).read_bytes(), **kwargs)

    def _parse(self) -> None:
        pixel_size = pixel_block_size(self.width, self.height)
        mask_size = mask_capacity(self.height, self.entries_per_row)
        minimum = HEADER_SIZE + pixel_size + mask_size

        if len(self.data) < minimum:
            raise GnwFormatError(
                f"Image too small: {len(self.data)} bytes, a "
                f"{self.width}x{self.height} image needs at least {minimum}"
            )

        self.header = GnwHeader.from_bytes(self.data)
        if self.header.version != FORMAT_VERSION:
            raise GnwFormatError(f"Unsupported format version {self.header.version}")

        offset = HEADER_SIZE
        self.pixel_block = self.data[offset:offset + pixel_size]
        offset += pixel_size
        self.mask_block = self.data[offset:offset + mask_size]
        offset += mask_size
        self.rom = self.data[offset:]

        self.mask_entries = decode_mask_entries(self.mask_block)
        logger.debug(
            f"Parsed image: {len(self.mask_entries)} mask entries, "
            f"{len(self.rom)} ROM bytes"
        )

    def get_mask_ids(self) -> list[Optional[int]]:
        """Re-rasterize the mask entries onto the raster grid."""
        return rasterize_mask_entries(self.mask_entries, self.width, self.height)

    def get_pixels(self) -> tuple[bytes, bytes]:
        """(background_rgb, mask_rgb) of the pixel block."""
        return unpack_pixels(self.pixel_block)

    def get_info(self) -> dict[str, Any]:
        """Summary of the image for display."""
        header = self.header
        try:
            cpu = CPUType(header.mpu).manifest_name
        except ValueError:
            cpu = f"unknown ({header.mpu})"

        used = len(self.mask_entries) * BYTES_PER_MASK_ENTRY
        return {
            "version": header.version,
            "cpu": cpu,
            "screen_type": SCREEN_TYPE_NAMES.get(header.screen_type, str(header.screen_type)),
            "screen_width": header.width,
            "screen_height": header.height,
            "ground_last_index": header.get_ground_last_index(),
            "revision": header.get_revision(),
            "raster": f"{self.width}x{self.height}",
            "mask_entries": len(self.mask_entries),
            "mask_bytes_used": used,
            "mask_capacity": len(self.mask_block),
            "rom_size": len(self.rom),
            "total_size": len(self.data),
        }
