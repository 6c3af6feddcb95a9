"""
Platform Description
====================

Immutable data structures describing one Game & Watch style device: its
CPU, screen geometry, input wiring and ROM. These are produced by the
manifest loader and consumed read-only by the encoder.

Input Ports
-----------
The supported MPUs read their buttons through:
- **S0..S7**: eight scan lines, each multiplexing four inputs
- **ACL**: the all-clear line
- **B** and **BA**: single input lines with pull-up resistors

A port is one of SPort, ACLPort, BPort or BAPort. Any of them may carry
no action, which the encoder fills in with a default.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Union


# =============================================================================
# Enumeration Types
# =============================================================================

class CPUType(IntEnum):
    """
    MPU variants. The value is the MPU code stored at header offset 1.
    """
    SM510 = 0
    SM511 = 1
    SM512 = 2
    SM530 = 3
    SM5A = 4
    SM510_TIGER = 5
    SM511_TIGER_1BIT = 6
    SM511_TIGER_2BIT = 7
    KB1013VK12 = 8

    @classmethod
    def from_name(cls, name: str) -> "CPUType":
        """
        Look up a CPU by its manifest name (e.g. "SM5a", "SM510Tiger").

        Raises:
            ValueError: If the name is unknown
        """
        key = name.strip().lower()
        for member, manifest_name in _CPU_NAMES.items():
            if manifest_name.lower() == key or member.name.lower() == key:
                return member
        raise ValueError(f"Unknown CPU type '{name}'")

    @property
    def manifest_name(self) -> str:
        return _CPU_NAMES[self]


_CPU_NAMES = {
    CPUType.SM510: "SM510",
    CPUType.SM511: "SM511",
    CPUType.SM512: "SM512",
    CPUType.SM530: "SM530",
    CPUType.SM5A: "SM5a",
    CPUType.SM510_TIGER: "SM510Tiger",
    CPUType.SM511_TIGER_1BIT: "SM511Tiger1Bit",
    CPUType.SM511_TIGER_2BIT: "SM511Tiger2Bit",
    CPUType.KB1013VK12: "KB1013VK12",
}

# CPUs the emulation core currently runs
SUPPORTED_CPUS = (CPUType.SM510, CPUType.SM510_TIGER, CPUType.SM5A)


class Action(IntEnum):
    """
    Logical input actions. The value is the 7-bit action code.
    """
    JOY_UP = 0
    JOY_DOWN = 1
    JOY_LEFT = 2
    JOY_RIGHT = 3
    BUTTON1 = 4
    BUTTON2 = 5
    BUTTON3 = 6
    BUTTON4 = 7
    BUTTON5 = 8
    BUTTON6 = 9
    BUTTON7 = 10
    BUTTON8 = 11
    SELECT = 12
    START1 = 13
    START2 = 14
    SERVICE1 = 15
    SERVICE2 = 16
    LEFT_JOY_UP = 17
    LEFT_JOY_DOWN = 18
    LEFT_JOY_LEFT = 19
    LEFT_JOY_RIGHT = 20
    RIGHT_JOY_UP = 21
    RIGHT_JOY_DOWN = 22
    RIGHT_JOY_LEFT = 23
    RIGHT_JOY_RIGHT = 24
    VOLUME_DOWN = 25
    POWER_ON = 26
    POWER_OFF = 27
    KEYPAD = 28
    CUSTOM = 29
    UNUSED = 0x7F

    @classmethod
    def from_name(cls, name: str) -> "Action":
        """
        Look up an action by manifest name ("JoyUp", "LeftJoyRight",
        "Button3") or enum name ("JOY_UP").

        Raises:
            ValueError: If the name is unknown
        """
        key = name.replace("_", "").replace("-", "").lower()
        for member in cls:
            if member.name.replace("_", "").lower() == key:
                return member
        raise ValueError(f"Unknown action '{name}'")


# =============================================================================
# Actions and Ports
# =============================================================================

@dataclass(frozen=True)
class NamedAction:
    """
    One input binding.

    Attributes:
        action: The logical action
        active_low: True if the input is asserted when the line is low
        name: Label from the manifest (informational, not encoded)
    """
    action: Action
    active_low: bool = False
    name: Optional[str] = None


@dataclass(frozen=True)
class SPort:
    """Scan line S<index> with four input slots."""
    index: int
    slots: tuple[Optional[NamedAction], ...] = (None, None, None, None)

    def __post_init__(self) -> None:
        if len(self.slots) != 4:
            raise ValueError(f"S{self.index} must have 4 slots, got {len(self.slots)}")


@dataclass(frozen=True)
class ACLPort:
    action: Optional[NamedAction] = None


@dataclass(frozen=True)
class BPort:
    action: Optional[NamedAction] = None


@dataclass(frozen=True)
class BAPort:
    action: Optional[NamedAction] = None


Port = Union[SPort, ACLPort, BPort, BAPort]


@dataclass(frozen=True)
class PortMap:
    """
    Input wiring of a device.

    Attributes:
        ports: Port bindings; later entries for the same port win
        ground_last_index: Index of the last S-port that is grounded,
            or None if the device grounds none
    """
    ports: tuple[Port, ...] = ()
    ground_last_index: Optional[int] = None


# =============================================================================
# Screen Geometry
# =============================================================================

@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class SingleScreen:
    size: Size


@dataclass(frozen=True)
class DualVerticalScreen:
    top: Size
    bottom: Size


@dataclass(frozen=True)
class DualHorizontalScreen:
    left: Size
    right: Size


Screen = Union[SingleScreen, DualVerticalScreen, DualHorizontalScreen]


# =============================================================================
# Device Description
# =============================================================================

@dataclass(frozen=True)
class Device:
    cpu: CPUType
    screen: Screen


@dataclass(frozen=True)
class RomReference:
    """
    Where to find the program ROM.

    Attributes:
        filename: Expected file name inside the asset directory
        sha1_hex: Lowercase hex SHA-1 of the ROM
        owner: MAME set that ships the ROM (informational)
    """
    filename: str
    sha1_hex: str
    owner: Optional[str] = None


@dataclass(frozen=True)
class Metadata:
    name: str
    company: str = ""


@dataclass(frozen=True)
class PlatformSpecification:
    """Everything the encoder needs to know about one device."""
    device: Device
    rom: RomReference
    metadata: Metadata
    port_map: PortMap = field(default_factory=PortMap)
