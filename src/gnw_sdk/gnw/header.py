"""
GNW Header Builder
==================

Serializes a PlatformSpecification into the fixed 0x100-byte preamble of
a .gnw image: format version, MPU code, screen geometry, input mapping
and the build revision stamp. See gnw_sdk.gnw.layout for offsets.

Input Mapping
-------------
Every input slot is one action byte:

    Bit 7:    1 = active-low
    Bits 0-6: action code (Action enum value), 0x7F = unused

Defaults for unmapped inputs:
- Empty S-port slot, or a whole missing S-port: 0x7F per slot
- B, BA: unused, active-low (0xFF). Both lines have pull-up resistors
  and read high when nothing drives them.
- ACL: unused (0x7F)
"""

from dataclasses import dataclass, field
from typing import Optional
import logging
import math

from gnw_sdk.errors import GeometryError, GnwFormatError, PortIndexError
from gnw_sdk.gnw.bits import pack_fields, unpack_fields
from gnw_sdk.gnw.layout import (
    ACTION_CODE_MASK,
    ACTIVE_LOW_BIT,
    FIELD_BITS,
    FIELD_MAX,
    FORMAT_VERSION,
    GEOMETRY_SIZE,
    HEADER_SIZE,
    INPUT_SPACER_SIZE,
    NO_ACTION,
    OFFSET_ACL_PORT,
    OFFSET_B_PORT,
    OFFSET_BA_PORT,
    OFFSET_GEOMETRY,
    OFFSET_GROUND_INDEX,
    OFFSET_MPU,
    OFFSET_REVISION,
    OFFSET_S_PORTS,
    OFFSET_SCREEN_TYPE,
    OFFSET_VERSION,
    RESERVED_AFTER_GEOMETRY_SIZE,
    RESERVED_BLOCK_SIZE,
    REVISION_SIZE,
    S_PORT_COUNT,
    SLOTS_PER_S_PORT,
)
from gnw_sdk.platform.models import (
    Action,
    ACLPort,
    BAPort,
    BPort,
    DualHorizontalScreen,
    DualVerticalScreen,
    NamedAction,
    PlatformSpecification,
    PortMap,
    Screen,
    SingleScreen,
    SPort,
)

logger = logging.getLogger(__name__)

SCREEN_SINGLE = 0
SCREEN_DUAL_VERTICAL = 1
SCREEN_DUAL_HORIZONTAL = 2

# B and BA read high when undriven
PULL_UP_DEFAULT = NamedAction(Action.UNUSED, active_low=True)
UNUSED_DEFAULT = NamedAction(Action.UNUSED, active_low=False)


# =============================================================================
# Field Encoders
# =============================================================================

def encode_action(action: Optional[NamedAction]) -> int:
    """
    Encode one input binding as an action byte.

    Args:
        action: The binding, or None for an empty slot

    Returns:
        Action code in bits 0-6, bit 7 set if active-low; 0x7F for None

    Example:
        >>> encode_action(NamedAction(Action.BUTTON1, active_low=True))
        132
    """
    if action is None:
        return NO_ACTION

    value = int(action.action) & ACTION_CODE_MASK
    if action.active_low:
        value |= ACTIVE_LOW_BIT
    return value


def decode_action(value: int) -> Optional[NamedAction]:
    """Inverse of encode_action; an unused, active-high byte decodes to None."""
    if value == NO_ACTION:
        return None
    try:
        action = Action(value & ACTION_CODE_MASK)
    except ValueError:
        raise GnwFormatError(f"Unknown action code 0x{value & ACTION_CODE_MASK:02X}") from None
    return NamedAction(
        action,
        active_low=bool(value & ACTIVE_LOW_BIT),
    )


def _round_dimension(value: float) -> int:
    # Half away from zero, not Python's banker's rounding
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def encode_geometry(width: float, height: float) -> bytes:
    """
    Pack width and height into the 3-byte geometry field.

    Both values are rounded to the nearest integer and stored as 10-bit
    fields (width in bits 0-9, height in bits 10-19, bits 20-23 zero).

    Raises:
        GeometryError: If a dimension is not finite or its rounded value
            is outside 0..1023
    """
    for name, value in (("width", width), ("height", height)):
        if not math.isfinite(value):
            raise GeometryError(name, value)

    w = _round_dimension(width)
    h = _round_dimension(height)
    for name, value in (("width", w), ("height", h)):
        if not 0 <= value <= FIELD_MAX:
            raise GeometryError(name, value)
    return pack_fields([(w, FIELD_BITS), (h, FIELD_BITS)], GEOMETRY_SIZE)


def decode_geometry(data: bytes) -> tuple[int, int]:
    """Unpack (width, height) from the 3-byte geometry field."""
    width, height = unpack_fields(data[:GEOMETRY_SIZE], [FIELD_BITS, FIELD_BITS])
    return width, height


def screen_geometry(screen: Screen) -> tuple[int, float, float]:
    """
    Determine the screen type byte and the dimensions to encode.

    Dual screens whose halves differ are encoded with the first-declared
    half (top or left); the mismatch is logged, not raised.

    Returns:
        (screen_type, width, height)
    """
    if isinstance(screen, SingleScreen):
        return SCREEN_SINGLE, screen.size.width, screen.size.height

    if isinstance(screen, DualVerticalScreen):
        if screen.top != screen.bottom:
            logger.warning(
                "Top and bottom screen sizes don't match "
                f"({screen.top.width}x{screen.top.height} vs "
                f"{screen.bottom.width}x{screen.bottom.height})"
            )
        return SCREEN_DUAL_VERTICAL, screen.top.width, screen.top.height

    if isinstance(screen, DualHorizontalScreen):
        if screen.left != screen.right:
            logger.warning(
                "Left and right screen sizes don't match "
                f"({screen.left.width}x{screen.left.height} vs "
                f"{screen.right.width}x{screen.right.height})"
            )
        return SCREEN_DUAL_HORIZONTAL, screen.left.width, screen.left.height

    raise TypeError(f"Unknown screen type: {type(screen).__name__}")


def build_input_mapping(port_map: PortMap) -> bytes:
    """
    Encode the input mapping block (36 bytes).

    Layout: S0..S7 (4 bytes each), B, BA, ACL, ground index.

    Raises:
        PortIndexError: If an S-port index is outside 0..7
    """
    s_ports: list[Optional[SPort]] = [None] * S_PORT_COUNT
    b_action = ba_action = acl_action = None

    for port in port_map.ports:
        if isinstance(port, SPort):
            if not 0 <= port.index < S_PORT_COUNT:
                raise PortIndexError(port.index)
            s_ports[port.index] = port
        elif isinstance(port, ACLPort):
            acl_action = port.action
        elif isinstance(port, BPort):
            b_action = port.action
        elif isinstance(port, BAPort):
            ba_action = port.action
        else:
            raise TypeError(f"Unknown port type: {type(port).__name__}")

    result = bytearray()
    for port in s_ports:
        if port is None:
            result.extend([NO_ACTION] * SLOTS_PER_S_PORT)
        else:
            result.extend(encode_action(slot) for slot in port.slots)

    result.append(encode_action(b_action or PULL_UP_DEFAULT))
    result.append(encode_action(ba_action or PULL_UP_DEFAULT))
    result.append(encode_action(acl_action or UNUSED_DEFAULT))

    # Stored 1-based so that 0 can mean "unset"
    ground = port_map.ground_last_index
    if ground is not None and not 0 <= ground < S_PORT_COUNT:
        raise PortIndexError(ground)
    result.append(0 if ground is None else ground + 1)

    return bytes(result)


def encode_revision(revision: Optional[str]) -> bytes:
    """
    Encode the build revision stamp.

    Returns:
        The first 7 ASCII characters of the revision, zero padded, or
        7 zero bytes if no revision is known
    """
    if not revision:
        logger.warning("Unknown build revision, stamping zeros")
        return bytes(REVISION_SIZE)

    stamp = revision.encode("ascii", errors="replace")[:REVISION_SIZE]
    return stamp.ljust(REVISION_SIZE, b"\x00")


# =============================================================================
# Header Builder
# =============================================================================

def build_header(platform: PlatformSpecification, revision: Optional[str] = None) -> bytes:
    """
    Build the 0x100-byte image preamble.

    Args:
        platform: Device description
        revision: Build revision to stamp (see encode_revision)

    Returns:
        Exactly HEADER_SIZE bytes

    Raises:
        PortIndexError: If an S-port index is outside 0..7
        GeometryError: If the screen does not fit the 10-bit fields
    """
    screen_type, width, height = screen_geometry(platform.device.screen)

    header = bytearray()
    header.append(FORMAT_VERSION)
    header.append(int(platform.device.cpu))
    header.append(screen_type)
    header.extend(encode_geometry(width, height))
    header.extend(bytes(RESERVED_AFTER_GEOMETRY_SIZE))
    header.extend(build_input_mapping(platform.port_map))
    header.extend(bytes(INPUT_SPACER_SIZE))
    header.extend(bytes(RESERVED_BLOCK_SIZE))
    header.extend(encode_revision(revision))

    assert len(header) == HEADER_SIZE, f"header is {len(header)} bytes"

    logger.debug(
        f"Built header: MPU {platform.device.cpu.manifest_name}, "
        f"screen type {screen_type}, {_round_dimension(width)}x{_round_dimension(height)}"
    )
    return bytes(header)


# =============================================================================
# Header Decoding
# =============================================================================

@dataclass
class GnwHeader:
    """
    Decoded image preamble.

    Action bytes are kept raw; use decode_action() to interpret them.
    """
    version: int = FORMAT_VERSION
    mpu: int = 0
    screen_type: int = SCREEN_SINGLE
    width: int = 0
    height: int = 0
    s_ports: list[list[int]] = field(default_factory=list)
    b_port: int = NO_ACTION | ACTIVE_LOW_BIT
    ba_port: int = NO_ACTION | ACTIVE_LOW_BIT
    acl_port: int = NO_ACTION
    ground_index: int = 0
    revision: bytes = bytes(REVISION_SIZE)

    @classmethod
    def from_bytes(cls, data: bytes) -> "GnwHeader":
        """
        Decode a header from the start of an image.

        Raises:
            GnwFormatError: If the data is shorter than HEADER_SIZE
        """
        if len(data) < HEADER_SIZE:
            raise GnwFormatError(
                f"Header too short: need {HEADER_SIZE} bytes, got {len(data)}"
            )

        width, height = decode_geometry(data[OFFSET_GEOMETRY:OFFSET_GEOMETRY + GEOMETRY_SIZE])
        s_ports = [
            list(data[offset:offset + SLOTS_PER_S_PORT])
            for offset in range(
                OFFSET_S_PORTS,
                OFFSET_S_PORTS + S_PORT_COUNT * SLOTS_PER_S_PORT,
                SLOTS_PER_S_PORT,
            )
        ]

        return cls(
            version=data[OFFSET_VERSION],
            mpu=data[OFFSET_MPU],
            screen_type=data[OFFSET_SCREEN_TYPE],
            width=width,
            height=height,
            s_ports=s_ports,
            b_port=data[OFFSET_B_PORT],
            ba_port=data[OFFSET_BA_PORT],
            acl_port=data[OFFSET_ACL_PORT],
            ground_index=data[OFFSET_GROUND_INDEX],
            revision=bytes(data[OFFSET_REVISION:OFFSET_REVISION + REVISION_SIZE]),
        )

    def get_revision(self) -> Optional[str]:
        """The revision stamp as text, or None if it is all zeros."""
        stamp = self.revision.rstrip(b"\x00")
        return stamp.decode("ascii", errors="replace") if stamp else None

    def get_ground_last_index(self) -> Optional[int]:
        return self.ground_index - 1 if self.ground_index else None
