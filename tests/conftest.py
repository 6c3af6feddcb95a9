"""
Shared fixtures for the GNW SDK tests.

Provides small platform descriptions, synthetic render buffers and an
asset directory holding a fake ROM.
"""

import hashlib
from pathlib import Path
from typing import Optional

import pytest
from PIL import Image

from gnw_sdk.platform import (
    CPUType,
    Device,
    Metadata,
    PlatformSpecification,
    PortMap,
    RomReference,
    SingleScreen,
    Size,
)
from gnw_sdk.rendered import RenderedImage, mask_ids_to_image


ROM_DATA = bytes(range(256)) * 4
ROM_SHA1 = hashlib.sha1(ROM_DATA).hexdigest()


def make_platform(
    name: str = "Game & Watch: Ball",
    cpu: CPUType = CPUType.SM510,
    screen=None,
    port_map: Optional[PortMap] = None,
    rom_filename: str = "gnw_ball.bin",
    rom_sha1: str = ROM_SHA1,
    company: str = "Nintendo",
) -> PlatformSpecification:
    """Build a platform description with sensible defaults."""
    return PlatformSpecification(
        device=Device(cpu=cpu, screen=screen or SingleScreen(Size(80, 64))),
        port_map=port_map or PortMap(),
        rom=RomReference(filename=rom_filename, sha1_hex=rom_sha1),
        metadata=Metadata(name=name, company=company),
    )


def make_rendered(width: int, height: int, mask_ids=None) -> RenderedImage:
    """
    Build a synthetic render.

    Background pixel i is (i, i+1, i+2, 0xFF) mod 256; mask pixel i is
    (0x80|i, 0x40, 0x20, 0x00) mod 256. Without mask_ids, every row holds
    one run of id (y % 4) over its left half.
    """
    pixels = width * height
    background = bytearray()
    mask = bytearray()
    for i in range(pixels):
        background.extend([i % 256, (i + 1) % 256, (i + 2) % 256, 0xFF])
        mask.extend([(0x80 | i) % 256, 0x40, 0x20, 0x00])

    if mask_ids is None:
        mask_ids = [
            (y % 4) if x < width // 2 else None
            for y in range(height)
            for x in range(width)
        ]

    return RenderedImage(
        width=width,
        height=height,
        background=bytes(background),
        mask=bytes(mask),
        mask_ids=list(mask_ids),
    )


def write_render(directory: Path, rendered: RenderedImage) -> None:
    """Save a RenderedImage as the three PNG files of the render stage."""
    directory.mkdir(parents=True, exist_ok=True)
    size = (rendered.width, rendered.height)
    Image.frombytes("RGBA", size, rendered.background).save(directory / "background.png")
    Image.frombytes("RGBA", size, rendered.mask).save(directory / "mask.png")
    mask_ids_to_image(rendered.mask_ids, *size).save(directory / "mask_ids.png")


@pytest.fixture
def ball_platform() -> PlatformSpecification:
    """SM510, single 80x64 screen, no input mapping."""
    return make_platform()


@pytest.fixture
def small_render() -> RenderedImage:
    """A 16x8 synthetic render."""
    return make_rendered(16, 8)


@pytest.fixture
def asset_dir(tmp_path: Path) -> Path:
    """Asset directory holding the ROM under its expected name."""
    directory = tmp_path / "assets"
    directory.mkdir()
    (directory / "gnw_ball.bin").write_bytes(ROM_DATA)
    return directory


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "out"
    directory.mkdir()
    return directory
