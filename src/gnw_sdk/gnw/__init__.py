"""
GNW Image Encoding
==================

This module builds .gnw firmware images: a fixed 0x100-byte header
describing the device, the interleaved background/mask pixel block, the
run-length encoded mask block, and the program ROM.

This module provides:
- **ImageBuilder**: Assemble and write the image for one device
- **GnwParser**: Split an existing image back into its blocks
- **build_header**: Serialize the device header
- **pack_pixels**: Interleave background and mask pixels
- **MaskEncoder**: Run-length encode the mask-id grid
- **resolve_rom**: Load the ROM by name or by SHA-1

Quick Start
-----------
    >>> from gnw_sdk.gnw import ImageBuilder
    >>> from gnw_sdk.rendered import load_rendered
    >>> rendered = load_rendered("renders/gnw_ball")
    >>> ImageBuilder(platform, rendered, "assets/gnw_ball").build_to_file("out")
    PosixPath('out/Ball.gnw')
"""

from gnw_sdk.gnw.layout import (
    FORMAT_VERSION,
    HEADER_SIZE,
    BYTES_PER_MASK_ENTRY,
    AVERAGE_MASK_ENTRIES_PER_ROW,
    DEFAULT_RASTER_SIZE,
    IMAGE_EXTENSION,
    mask_capacity,
    pixel_block_size,
)
from gnw_sdk.gnw.bits import BitReader, BitWriter, pack_fields, unpack_fields
from gnw_sdk.gnw.header import (
    GnwHeader,
    build_header,
    build_input_mapping,
    decode_action,
    decode_geometry,
    encode_action,
    encode_geometry,
    encode_revision,
    screen_geometry,
)
from gnw_sdk.gnw.pixels import pack_pixels, unpack_pixels
from gnw_sdk.gnw.mask import (
    MaskEntry,
    MaskEncoder,
    build_mask_block,
    decode_mask_entries,
    rasterize_mask_entries,
)
from gnw_sdk.gnw.rom import find_rom_by_hash, resolve_rom, sha1_file
from gnw_sdk.gnw.builder import ImageBuilder, encode, output_filename
from gnw_sdk.gnw.parser import GnwParser

__all__ = [
    # Layout
    "FORMAT_VERSION",
    "HEADER_SIZE",
    "BYTES_PER_MASK_ENTRY",
    "AVERAGE_MASK_ENTRIES_PER_ROW",
    "DEFAULT_RASTER_SIZE",
    "IMAGE_EXTENSION",
    "mask_capacity",
    "pixel_block_size",
    # Bit packing
    "BitReader",
    "BitWriter",
    "pack_fields",
    "unpack_fields",
    # Header
    "GnwHeader",
    "build_header",
    "build_input_mapping",
    "decode_action",
    "decode_geometry",
    "encode_action",
    "encode_geometry",
    "encode_revision",
    "screen_geometry",
    # Pixels
    "pack_pixels",
    "unpack_pixels",
    # Mask
    "MaskEntry",
    "MaskEncoder",
    "build_mask_block",
    "decode_mask_entries",
    "rasterize_mask_entries",
    # ROM
    "find_rom_by_hash",
    "resolve_rom",
    "sha1_file",
    # Builder and parser
    "ImageBuilder",
    "encode",
    "output_filename",
    "GnwParser",
]
