"""
GNW Image Builder
=================

Assembles a complete .gnw firmware image for one device and writes it to
the output directory.

Build Order
-----------
1. Header (0x100 bytes) from the platform description
2. Pixel block from the rendered background and mask
3. Mask block from the rendered mask-id grid
4. ROM bytes, resolved by file name or SHA-1

Any failure aborts the device; nothing is written unless every stage
succeeds.

Usage
-----
    >>> from gnw_sdk.gnw import ImageBuilder
    >>> builder = ImageBuilder(platform, rendered, asset_dir,
    ...                        EncoderConfig(build_revision="4f2a9c1"))
    >>> path = builder.build_to_file("out/")
    >>> path.name
    'Ball.gnw'
"""

from pathlib import Path
from typing import Optional, Sequence, Union
import logging

from gnw_sdk.config import EncoderConfig
from gnw_sdk.errors import ImageWriteError
from gnw_sdk.gnw.header import build_header
from gnw_sdk.gnw.layout import IMAGE_EXTENSION
from gnw_sdk.gnw.mask import build_mask_block
from gnw_sdk.gnw.pixels import pack_pixels
from gnw_sdk.gnw.rom import resolve_rom
from gnw_sdk.platform.models import PlatformSpecification
from gnw_sdk.rendered import RenderedImage

logger = logging.getLogger(__name__)

GAME_AND_WATCH_PREFIX = "Game & Watch:"


def output_filename(display_name: str) -> str:
    """
    Derive the image file name from a device's display name.

    The "Game & Watch:" prefix is dropped (case-insensitively), colons
    become " -", and surrounding whitespace is trimmed.

    Example:
        >>> output_filename("Game & Watch: Ball")
        'Ball.gnw'
        >>> output_filename("Konami: Double Dribble")
        'Konami - Double Dribble.gnw'
    """
    name = display_name
    if name.lower().startswith(GAME_AND_WATCH_PREFIX.lower()):
        name = name[len(GAME_AND_WATCH_PREFIX):]
    name = name.replace(":", " -").strip()
    return f"{name}{IMAGE_EXTENSION}"


class ImageBuilder:
    """
    Builds the .gnw image for one device.

    Args:
        platform: Device description
        rendered: Render output for the device
        asset_dir: Directory holding the device's ROM
        config: Encoder settings (revision stamp, mask sizing)
    """

    def __init__(
        self,
        platform: PlatformSpecification,
        rendered: RenderedImage,
        asset_dir: Union[str, Path],
        config: Optional[EncoderConfig] = None,
    ):
        self.platform = platform
        self.rendered = rendered
        self.asset_dir = Path(asset_dir)
        self.config = config or EncoderConfig()

    def get_output_filename(self) -> str:
        return output_filename(self.platform.metadata.name)

    def build(self) -> bytes:
        """
        Build the complete image.

        Returns:
            Header, pixel block, mask block and ROM, concatenated

        Raises:
            PortIndexError: If an S-port index is outside 0..7
            GeometryError: If a dimension does not fit in 10 bits
            MaskIdError: If a mask id does not fit in 10 bits
            MaskCapacityError: If the mask runs exceed the mask block
            RomNotFoundError: If the ROM cannot be resolved
        """
        rendered = self.rendered
        rom = self.platform.rom

        image = bytearray(build_header(self.platform, self.config.build_revision))
        image.extend(pack_pixels(rendered.background, rendered.mask))
        image.extend(
            build_mask_block(
                rendered.mask_ids,
                rendered.width,
                rendered.height,
                self.config.entries_per_row,
            )
        )
        image.extend(resolve_rom(rom.filename, rom.sha1_hex, self.asset_dir))

        logger.debug(f"Built image for {self.platform.metadata.name}: {len(image)} bytes")
        return bytes(image)

    def build_to_file(self, output_dir: Union[str, Path]) -> Path:
        """
        Build the image and write it into `output_dir`.

        An existing file with the same name is overwritten.

        Returns:
            Path of the written image

        Raises:
            ImageWriteError: If the file cannot be written
        """
        data = self.build()
        output_path = Path(output_dir) / self.get_output_filename()
        try:
            output_path.write_bytes(data)
        except OSError as e:
            raise ImageWriteError(f"Could not write {output_path}: {e}") from e

        logger.info(f"Wrote {output_path} ({len(data)} bytes)")
        return output_path


# =============================================================================
# Convenience Functions
# =============================================================================

def encode(
    background: bytes,
    mask: bytes,
    mask_ids: Sequence[Optional[int]],
    platform: PlatformSpecification,
    asset_dir: Union[str, Path],
    output_dir: Union[str, Path],
    width: int,
    height: int,
    config: Optional[EncoderConfig] = None,
) -> Path:
    """
    Encode one device from raw render buffers and write its image.

    Returns:
        Path of the written image

    Example:
        >>> path = encode(bg, mask, ids, platform, "assets/gnw_ball", "out",
        ...               width=720, height=720)
    """
    rendered = RenderedImage(
        width=width,
        height=height,
        background=background,
        mask=mask,
        mask_ids=mask_ids,
    )
    return ImageBuilder(platform, rendered, asset_dir, config).build_to_file(output_dir)
