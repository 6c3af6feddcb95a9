"""
GNW SDK Error Hierarchy
=======================

This module defines the exception hierarchy for the entire GNW SDK.
All exceptions inherit from GnwError, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
GnwError (base)
├── ConfigurationError (platform values the header cannot encode)
│   ├── PortIndexError - S-port index outside 0..7
│   └── GeometryError - width/height outside the 10-bit range
├── MaskError (mask run-length encoding)
│   ├── MaskCapacityError - more runs than the mask block can hold
│   └── MaskIdError - mask id outside the 10-bit range
├── RomError (ROM resolution)
│   └── RomNotFoundError - no file matched by path or by SHA-1
├── ImageWriteError - the output image could not be written
├── GnwFormatError - an existing .gnw image is truncated or malformed
├── ManifestError - a manifest entry is structurally malformed
└── RenderedDataError - render output is missing or inconsistent

Design Philosophy
-----------------
Every error is fatal to the single device being encoded, never to a
batch. Callers catch GnwError per device, report it, and move on to
the next one. Consistency problems that do not prevent encoding (such
as mismatched dual-screen halves) are logged as warnings instead.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class GnwError(Exception):
    """
    Base exception for all GNW SDK errors.

    All exceptions in the SDK inherit from this class, allowing callers
    to catch all SDK-related errors with a single except clause:

        try:
            ImageBuilder(platform, rendered, asset_dir).build_to_file(out)
        except GnwError as e:
            print(f"Failing device: {e}")
    """
    pass


# =============================================================================
# Configuration Exceptions
# =============================================================================

class ConfigurationError(GnwError):
    """Base exception for platform values that cannot be encoded."""
    pass


class PortIndexError(ConfigurationError):
    """
    S-port index out of range.

    The header holds exactly eight S-ports (S0..S7). A manifest that
    maps an input to any other index cannot be represented.
    """

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Port index {index} is out of bounds (valid: 0..7)")


class GeometryError(ConfigurationError):
    """
    Width or height does not fit in a 10-bit field.

    Screen geometry and mask run coordinates are stored as 10-bit
    values, so every dimension must lie in 0..1023.
    """

    def __init__(self, name: str, value: int, maximum: int = 1023):
        self.name = name
        self.value = value
        self.maximum = maximum
        super().__init__(f"{name} {value} does not fit in 10 bits (max {maximum})")


# =============================================================================
# Mask Exceptions
# =============================================================================

class MaskError(GnwError):
    """Base exception for mask run-length encoding errors."""
    pass


class MaskCapacityError(MaskError):
    """
    The mask block cannot hold another run.

    The mask block has a fixed capacity of 52 entries per row on average.
    High-frequency masks (checkerboards and the like) exceed it. Entries
    are never dropped or truncated; encoding fails instead.

    Attributes:
        required: Bytes needed including the rejected entry
        capacity: Total bytes available in the mask block
        overflow: How many bytes over capacity the entry would land
    """

    def __init__(self, required: int, capacity: int):
        self.required = required
        self.capacity = capacity
        self.overflow = required - capacity
        super().__init__(
            f"More mask entry bytes ({required}) than allowed ({capacity}), "
            f"overflow of {self.overflow} bytes"
        )


class MaskIdError(MaskError):
    """A mask id does not fit in 10 bits."""

    def __init__(self, mask_id: int, x: Optional[int] = None, y: Optional[int] = None):
        self.mask_id = mask_id
        self.x = x
        self.y = y
        where = f" at ({x}, {y})" if x is not None and y is not None else ""
        super().__init__(f"Mask id {mask_id}{where} is out of range (valid: 0..1023)")


# =============================================================================
# ROM Exceptions
# =============================================================================

class RomError(GnwError):
    """Base exception for ROM resolution errors."""
    pass


class RomNotFoundError(RomError):
    """
    The ROM could not be resolved.

    Raised when the expected file is missing and no file in the asset
    directory has the expected SHA-1 digest, or when the asset directory
    itself cannot be opened.

    Attributes:
        path: The path that was tried first
        reason: Why the hash fallback did not produce a ROM
    """

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}\nCould not open ROM {str(path)!r}")


# =============================================================================
# Output and Input Exceptions
# =============================================================================

class ImageWriteError(GnwError):
    """The assembled image could not be written to disk."""
    pass


class GnwFormatError(GnwError):
    """
    Invalid .gnw image.

    Raised when reading an image that:
    - Is shorter than the header, pixel and mask blocks require
    - Carries an unknown format version
    """
    pass


class ManifestError(GnwError):
    """A manifest entry is missing a key or has an unknown variant."""
    pass


class RenderedDataError(GnwError):
    """Render output is missing or its buffers disagree in size."""
    pass
