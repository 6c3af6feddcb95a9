"""
GNW Image Layout
================

Byte layout of a .gnw firmware image. The firmware loader addresses every
field by absolute offset, so reserved regions are part of the format and
are reproduced byte for byte even though they carry no information.

Image Structure
---------------
    Offset      Size                Description
    ------      ----                -----------
    0x00        1                   Format version (1)
    0x01        1                   MPU code (0..8)
    0x02        1                   Screen type (0 single, 1 dual vertical,
                                    2 dual horizontal)
    0x03        3                   Geometry: 10-bit width, 10-bit height,
                                    4 pad bits (LSB-first)
    0x06        2                   Reserved (zero)
    0x08        32                  S0..S7 input mapping, 4 action bytes each
    0x28        1                   B port action byte
    0x29        1                   BA port action byte
    0x2A        1                   ACL port action byte
    0x2B        1                   Ground row index (0 = unset, else 1-based)
    0x2C        4                   Reserved (zero)
    0x30        0xC9                Reserved (zero)
    0xF9        7                   Build revision stamp (ASCII or zero)
    0x100       6 * W * H           Interleaved background/mask RGB pixels
    ...         5 * 52 * H          Mask run-length entries (zero padded)
    ...         remainder           Raw ROM bytes

W and H are the dimensions of the rendered raster, not the declared
screen geometry stored in the header.

Bit Order
---------
Packed fields are written least significant bit first: bit i of a packed
region is bit (i % 8) of byte (i // 8), and fields follow each other from
low bits to high bits in declaration order.
"""

# =============================================================================
# Header
# =============================================================================

FORMAT_VERSION = 1

HEADER_SIZE = 0x100

OFFSET_VERSION = 0x00
OFFSET_MPU = 0x01
OFFSET_SCREEN_TYPE = 0x02
OFFSET_GEOMETRY = 0x03
GEOMETRY_SIZE = 3
OFFSET_RESERVED_AFTER_GEOMETRY = 0x06
RESERVED_AFTER_GEOMETRY_SIZE = 2
OFFSET_S_PORTS = 0x08
S_PORT_COUNT = 8
SLOTS_PER_S_PORT = 4
OFFSET_B_PORT = 0x28
OFFSET_BA_PORT = 0x29
OFFSET_ACL_PORT = 0x2A
OFFSET_GROUND_INDEX = 0x2B
OFFSET_INPUT_SPACER = 0x2C
INPUT_SPACER_SIZE = 4
OFFSET_RESERVED_BLOCK = 0x30
RESERVED_BLOCK_SIZE = 0xC9
OFFSET_REVISION = 0xF9
REVISION_SIZE = 7

# S-ports, then B, BA, ACL and the ground index
INPUT_MAPPING_SIZE = S_PORT_COUNT * SLOTS_PER_S_PORT + 4

# =============================================================================
# Field Encoding
# =============================================================================

FIELD_BITS = 10
FIELD_MAX = (1 << FIELD_BITS) - 1

# Action byte: low 7 bits are the action code, bit 7 marks active-low
NO_ACTION = 0x7F
ACTION_CODE_MASK = 0x7F
ACTIVE_LOW_BIT = 0x80

# =============================================================================
# Pixel and Mask Blocks
# =============================================================================

RGBA_CHANNELS = 4
RGB_CHANNELS = 3
# Background and mask byte for each of R, G, B
BYTES_PER_PIXEL = RGB_CHANNELS * 2

BYTES_PER_MASK_ENTRY = 5
AVERAGE_MASK_ENTRIES_PER_ROW = 52

DEFAULT_RASTER_SIZE = 720

IMAGE_EXTENSION = ".gnw"


def pixel_block_size(width: int, height: int) -> int:
    """Size in bytes of the interleaved pixel block."""
    return BYTES_PER_PIXEL * width * height


def mask_capacity(height: int, entries_per_row: int = AVERAGE_MASK_ENTRIES_PER_ROW) -> int:
    """Size in bytes of the mask block for a raster of the given height."""
    return BYTES_PER_MASK_ENTRY * entries_per_row * height
