"""
Pixel Packing
=============

Interleaves the rendered background and mask overlay into the pixel block
of a .gnw image. Alpha is dropped; for each pixel the block holds

    bg.R, mask.R, bg.G, mask.G, bg.B, mask.B

so the background byte is always the low byte of each channel pair.
"""

from gnw_sdk.gnw.layout import BYTES_PER_PIXEL, RGB_CHANNELS, RGBA_CHANNELS


def pack_pixels(background: bytes, mask: bytes) -> bytes:
    """
    Interleave two RGBA buffers into 6 bytes per pixel.

    Both buffers must have the same length, a multiple of 4. The caller
    guarantees this (see gnw_sdk.rendered.RenderedImage).

    Args:
        background: Background RGBA bytes
        mask: Mask overlay RGBA bytes

    Returns:
        The interleaved pixel block

    Example:
        >>> pack_pixels(b"\\x01\\x02\\x03\\xff", b"\\x0a\\x0b\\x0c\\x00").hex()
        '010a020b030c'
    """
    result = bytearray(len(background) // RGBA_CHANNELS * BYTES_PER_PIXEL)
    for c in range(RGB_CHANNELS):
        result[2 * c::BYTES_PER_PIXEL] = background[c::RGBA_CHANNELS]
        result[2 * c + 1::BYTES_PER_PIXEL] = mask[c::RGBA_CHANNELS]
    return bytes(result)


def unpack_pixels(block: bytes) -> tuple[bytes, bytes]:
    """
    Split a pixel block back into background and mask RGB buffers.

    Returns:
        (background_rgb, mask_rgb), 3 bytes per pixel each
    """
    pixel_count = len(block) // BYTES_PER_PIXEL
    background = bytearray(pixel_count * RGB_CHANNELS)
    mask = bytearray(pixel_count * RGB_CHANNELS)
    for c in range(RGB_CHANNELS):
        background[c::RGB_CHANNELS] = block[2 * c::BYTES_PER_PIXEL]
        mask[c::RGB_CHANNELS] = block[2 * c + 1::BYTES_PER_PIXEL]
    return bytes(background), bytes(mask)
