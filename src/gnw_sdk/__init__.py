"""
GNW SDK - Firmware Image Builder for Game & Watch Emulation
===========================================================

This package turns rendered LCD artwork and a device manifest into the
flat .gnw firmware images loaded by a handheld Game & Watch emulation
core (SM510, SM511, SM5a and related Sharp/Elektronika MPUs).

Main Components
---------------
- **platform**: Device descriptions and the manifest loader
- **gnw**: The .gnw image format (header, pixels, mask runs, ROM)
- **rendered**: Render-stage output (background, mask, mask ids)
- **cli**: The gnwenc command-line tool

Quick Start
-----------
Build one image from Python:
    >>> from gnw_sdk import EncoderConfig, ImageBuilder, load_manifest, load_rendered
    >>> platform = load_manifest("manifest.json")["gnw_ball"]
    >>> rendered = load_rendered("renders/gnw_ball")
    >>> builder = ImageBuilder(platform, rendered, "assets/gnw_ball",
    ...                        EncoderConfig(build_revision="4f2a9c1"))
    >>> builder.build_to_file("out")
    PosixPath('out/Ball.gnw')

Or use the command-line tool:
    $ gnwenc build manifest.json --renders renders/ --assets assets/ -o out/
    $ gnwenc info out/Ball.gnw

Version History
---------------
1.0.0 - Initial release with image builder, parser and gnwenc
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from gnw_sdk.errors import (
    GnwError,
    ConfigurationError,
    PortIndexError,
    GeometryError,
    MaskError,
    MaskCapacityError,
    MaskIdError,
    RomError,
    RomNotFoundError,
    ImageWriteError,
    GnwFormatError,
    ManifestError,
    RenderedDataError,
)
from gnw_sdk.config import EncoderConfig
from gnw_sdk.platform import (
    CPUType,
    Action,
    NamedAction,
    PlatformSpecification,
    load_manifest,
    platform_from_dict,
)
from gnw_sdk.rendered import RenderedImage, load_rendered
from gnw_sdk.gnw import (
    GnwParser,
    ImageBuilder,
    MaskEncoder,
    build_header,
    encode,
    output_filename,
    resolve_rom,
)

__all__ = [
    "__version__",
    # Errors
    "GnwError",
    "ConfigurationError",
    "PortIndexError",
    "GeometryError",
    "MaskError",
    "MaskCapacityError",
    "MaskIdError",
    "RomError",
    "RomNotFoundError",
    "ImageWriteError",
    "GnwFormatError",
    "ManifestError",
    "RenderedDataError",
    # Configuration
    "EncoderConfig",
    # Platform
    "CPUType",
    "Action",
    "NamedAction",
    "PlatformSpecification",
    "load_manifest",
    "platform_from_dict",
    # Rendered data
    "RenderedImage",
    "load_rendered",
    # Image format
    "GnwParser",
    "ImageBuilder",
    "MaskEncoder",
    "build_header",
    "encode",
    "output_filename",
    "resolve_rom",
]
