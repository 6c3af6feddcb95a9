"""
Platform Descriptions
=====================

Device descriptions (CPU, screen, input wiring, ROM) and the manifest
loader that produces them.

    >>> from gnw_sdk.platform import load_manifest
    >>> platforms = load_manifest("manifest.json")
    >>> platforms["gnw_ball"].device.cpu
    <CPUType.SM5A: 4>
"""

from gnw_sdk.platform.models import (
    CPUType,
    SUPPORTED_CPUS,
    Action,
    NamedAction,
    SPort,
    ACLPort,
    BPort,
    BAPort,
    Port,
    PortMap,
    Size,
    SingleScreen,
    DualVerticalScreen,
    DualHorizontalScreen,
    Screen,
    Device,
    RomReference,
    Metadata,
    PlatformSpecification,
)
from gnw_sdk.platform.manifest import (
    platform_from_dict,
    parse_manifest,
    load_manifest,
)

__all__ = [
    "CPUType",
    "SUPPORTED_CPUS",
    "Action",
    "NamedAction",
    "SPort",
    "ACLPort",
    "BPort",
    "BAPort",
    "Port",
    "PortMap",
    "Size",
    "SingleScreen",
    "DualVerticalScreen",
    "DualHorizontalScreen",
    "Screen",
    "Device",
    "RomReference",
    "Metadata",
    "PlatformSpecification",
    "platform_from_dict",
    "parse_manifest",
    "load_manifest",
]
