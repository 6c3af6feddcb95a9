"""
Rendered Device Images
======================

The render stage (layout parsing, rasterization and compositing) runs
outside this package and leaves three PNG files per device:

- **background.png**: Opaque background, RGBA
- **mask.png**: Segment overlay, RGBA
- **mask_ids.png**: 16-bit grayscale, one value per pixel: 0 for no
  segment, n for mask id n - 1

RenderedImage carries those buffers in memory; load_rendered() reads them
from a directory with Pillow.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Union
import logging
import struct

from PIL import Image

from gnw_sdk.errors import RenderedDataError

logger = logging.getLogger(__name__)

BACKGROUND_FILENAME = "background.png"
MASK_FILENAME = "mask.png"
MASK_IDS_FILENAME = "mask_ids.png"

RGBA_CHANNELS = 4


@dataclass
class RenderedImage:
    """
    Output of the render stage for one device.

    Attributes:
        width: Raster width in pixels
        height: Raster height in pixels
        background: RGBA bytes, width * height * 4
        mask: RGBA bytes, width * height * 4
        mask_ids: Row-major optional mask ids, width * height
    """
    width: int
    height: int
    background: bytes = field(repr=False)
    mask: bytes = field(repr=False)
    mask_ids: Sequence[Optional[int]] = field(repr=False)

    def __post_init__(self) -> None:
        """Check that every buffer matches the raster size."""
        pixels = self.width * self.height
        rgba = pixels * RGBA_CHANNELS
        if len(self.background) != rgba:
            raise RenderedDataError(
                f"Background has {len(self.background)} bytes, expected {rgba}"
            )
        if len(self.mask) != rgba:
            raise RenderedDataError(f"Mask has {len(self.mask)} bytes, expected {rgba}")
        if len(self.mask_ids) != pixels:
            raise RenderedDataError(
                f"Mask id grid has {len(self.mask_ids)} entries, expected {pixels}"
            )


def _open_image(filepath: Path) -> Image.Image:
    try:
        image = Image.open(filepath)
        image.load()
    except FileNotFoundError:
        raise
    except OSError as e:
        raise RenderedDataError(f"Could not read {filepath}: {e}") from e
    return image


def mask_ids_from_image(image: Image.Image) -> list[Optional[int]]:
    """
    Decode a grayscale mask-id image (0 = no id, n = id n - 1).

    16-bit images are the normal case; 8-bit and 32-bit grayscale are
    accepted as well.
    """
    count = image.width * image.height
    if image.mode == "I;16":
        values = struct.unpack(f"<{count}H", image.tobytes())
    elif image.mode == "L":
        values = image.tobytes()
    else:
        values = struct.unpack(f"={count}i", image.convert("I").tobytes())
    return [value - 1 if value else None for value in values]


def mask_ids_to_image(mask_ids: Sequence[Optional[int]], width: int, height: int) -> Image.Image:
    """Encode a mask-id grid as a 16-bit grayscale image."""
    values = [0 if mask_id is None else mask_id + 1 for mask_id in mask_ids]
    return Image.frombytes("I;16", (width, height), struct.pack(f"<{len(values)}H", *values))


def load_rendered(directory: Union[str, Path]) -> RenderedImage:
    """
    Load the render output for one device.

    Args:
        directory: Directory holding background.png, mask.png, mask_ids.png

    Returns:
        The rendered buffers

    Raises:
        FileNotFoundError: If one of the files is missing
        RenderedDataError: If a file is unreadable or the sizes disagree
    """
    directory = Path(directory)

    background = _open_image(directory / BACKGROUND_FILENAME).convert("RGBA")
    mask = _open_image(directory / MASK_FILENAME).convert("RGBA")
    ids_image = _open_image(directory / MASK_IDS_FILENAME)

    sizes = {background.size, mask.size, ids_image.size}
    if len(sizes) != 1:
        raise RenderedDataError(
            f"Rendered images in {directory} differ in size: "
            f"background {background.size}, mask {mask.size}, ids {ids_image.size}"
        )

    width, height = background.size
    logger.debug(f"Loaded {width}x{height} render from {directory}")

    return RenderedImage(
        width=width,
        height=height,
        background=background.tobytes(),
        mask=mask.tobytes(),
        mask_ids=mask_ids_from_image(ids_image),
    )
