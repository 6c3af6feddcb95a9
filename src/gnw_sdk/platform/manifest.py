"""
Manifest Loading
================

Decodes manifest.json entries into PlatformSpecification objects.

The manifest is a JSON object keyed by device id (the MAME short name).
Enum-like variants are externally tagged: a single-key object whose key
names the variant.

Example entry:

    "gnw_ball": {
        "device": {
            "cpu": "SM5a",
            "screen": {"Single": {"width": 80.0, "height": 64.0}}
        },
        "port_map": {
            "ports": [
                {"S": {"index": 0, "bitmap": [
                    {"action": "JoyLeft", "active_low": false}, null, null, null
                ]}},
                {"B": {"bit": {"action": "Button1", "active_low": true}}}
            ],
            "ground_last_index": null
        },
        "rom": {"rom": "gnw_ball.bin", "rom_hash": "...", "rom_owner": "gnw_ball"},
        "metadata": {"name": "Game & Watch: Ball", "company": "Nintendo"}
    }

Only structure is checked here. Value ranges that the image format cannot
represent (port indices, geometry) are rejected by the header builder.
"""

from pathlib import Path
from typing import Any, Optional, Union
import json
import logging

from gnw_sdk.errors import ManifestError
from gnw_sdk.platform.models import (
    Action,
    ACLPort,
    BAPort,
    BPort,
    CPUType,
    Device,
    DualHorizontalScreen,
    DualVerticalScreen,
    Metadata,
    NamedAction,
    PlatformSpecification,
    Port,
    PortMap,
    RomReference,
    Screen,
    SingleScreen,
    Size,
    SPort,
)

logger = logging.getLogger(__name__)


def _require(data: dict, key: str, context: str) -> Any:
    if not isinstance(data, dict):
        raise ManifestError(f"{context}: expected an object, got {type(data).__name__}")
    if key not in data:
        raise ManifestError(f"{context}: missing key '{key}'")
    return data[key]


def _variant(data: Any, context: str) -> tuple[str, Any]:
    """Split an externally tagged variant into (tag, body)."""
    if not isinstance(data, dict) or len(data) != 1:
        raise ManifestError(f"{context}: expected a single-key variant object")
    ((tag, body),) = data.items()
    return tag, body


def _size(data: Any, context: str) -> Size:
    try:
        return Size(
            width=float(_require(data, "width", context)),
            height=float(_require(data, "height", context)),
        )
    except (TypeError, ValueError) as e:
        raise ManifestError(f"{context}: invalid size: {e}") from e


def _screen(data: Any) -> Screen:
    tag, body = _variant(data, "screen")
    if tag == "Single":
        return SingleScreen(_size(body, "screen.Single"))
    if tag == "DualVertical":
        return DualVerticalScreen(
            top=_size(_require(body, "top", "screen.DualVertical"), "screen.DualVertical.top"),
            bottom=_size(_require(body, "bottom", "screen.DualVertical"), "screen.DualVertical.bottom"),
        )
    if tag == "DualHorizontal":
        return DualHorizontalScreen(
            left=_size(_require(body, "left", "screen.DualHorizontal"), "screen.DualHorizontal.left"),
            right=_size(_require(body, "right", "screen.DualHorizontal"), "screen.DualHorizontal.right"),
        )
    raise ManifestError(f"screen: unknown variant '{tag}'")


def _named_action(data: Any, context: str) -> Optional[NamedAction]:
    if data is None:
        return None
    try:
        action = Action.from_name(str(_require(data, "action", context)))
    except ValueError as e:
        raise ManifestError(f"{context}: {e}") from e
    return NamedAction(
        action=action,
        active_low=bool(data.get("active_low", False)),
        name=data.get("name"),
    )


def _port(data: Any, position: int) -> Port:
    context = f"port_map.ports[{position}]"
    tag, body = _variant(data, context)

    if tag == "S":
        index = _require(body, "index", context)
        bitmap = _require(body, "bitmap", context)
        if not isinstance(index, int) or isinstance(index, bool):
            raise ManifestError(f"{context}: index must be an integer")
        if not isinstance(bitmap, list) or len(bitmap) != 4:
            raise ManifestError(f"{context}: bitmap must be a list of 4 entries")
        return SPort(
            index=index,
            slots=tuple(
                _named_action(slot, f"{context}.bitmap[{i}]")
                for i, slot in enumerate(bitmap)
            ),
        )

    port_types = {"ACL": ACLPort, "B": BPort, "BA": BAPort}
    if tag in port_types:
        bit = body.get("bit") if isinstance(body, dict) else None
        return port_types[tag](_named_action(bit, f"{context}.bit"))

    raise ManifestError(f"{context}: unknown port '{tag}'")


def platform_from_dict(data: dict) -> PlatformSpecification:
    """
    Build a PlatformSpecification from one decoded manifest entry.

    Args:
        data: The JSON object for a single device

    Returns:
        The platform description

    Raises:
        ManifestError: If a required key is missing or a variant is unknown
    """
    device = _require(data, "device", "entry")
    try:
        cpu = CPUType.from_name(str(_require(device, "cpu", "device")))
    except ValueError as e:
        raise ManifestError(f"device: {e}") from e

    port_map_data = data.get("port_map") or {}
    if not isinstance(port_map_data, dict):
        raise ManifestError(
            f"port_map: expected an object, got {type(port_map_data).__name__}"
        )
    ports_data = port_map_data.get("ports") or []
    if not isinstance(ports_data, list):
        raise ManifestError(f"port_map: ports must be a list, got {type(ports_data).__name__}")
    ground = port_map_data.get("ground_last_index")
    if ground is not None and (not isinstance(ground, int) or isinstance(ground, bool)):
        raise ManifestError("port_map: ground_last_index must be an integer or null")

    rom = _require(data, "rom", "entry")
    metadata = _require(data, "metadata", "entry")

    return PlatformSpecification(
        device=Device(cpu=cpu, screen=_screen(_require(device, "screen", "device"))),
        port_map=PortMap(
            ports=tuple(_port(p, i) for i, p in enumerate(ports_data)),
            ground_last_index=ground,
        ),
        rom=RomReference(
            filename=str(_require(rom, "rom", "rom")),
            sha1_hex=str(_require(rom, "rom_hash", "rom")),
            owner=rom.get("rom_owner"),
        ),
        metadata=Metadata(
            name=str(_require(metadata, "name", "metadata")),
            company=str(metadata.get("company", "")),
        ),
    )


def parse_manifest(data: dict) -> dict[str, PlatformSpecification]:
    """
    Decode a whole manifest object.

    Returns:
        Platforms keyed by device id, in sorted key order
    """
    if not isinstance(data, dict):
        raise ManifestError("manifest: expected an object keyed by device id")

    platforms = {}
    for device_id in sorted(data):
        try:
            platforms[device_id] = platform_from_dict(data[device_id])
        except ManifestError as e:
            raise ManifestError(f"{device_id}: {e}") from e

    logger.debug(f"Loaded {len(platforms)} devices from manifest")
    return platforms


def load_manifest(filepath: Union[str, Path]) -> dict[str, PlatformSpecification]:
    """
    Read and decode a manifest.json file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ManifestError: If the file is not valid JSON or is malformed
    """
    filepath = Path(filepath)
    try:
        data = json.loads(filepath.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ManifestError(f"Could not parse manifest {filepath}: {e}") from e
    return parse_manifest(data)
