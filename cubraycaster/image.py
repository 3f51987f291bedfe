"""In-memory 32-bit pixel images and colour conversion for shallow visuals."""

from __future__ import annotations

import struct

BITS_PER_PIXEL = 32
_PIXEL = struct.Struct("<I")


class Image:
    """A little-endian buffer holding one unsigned 32-bit value per pixel.

    ``data`` is the raw byte buffer, ``line_length`` the number of bytes in
    one row, ``bpp`` the bits per pixel and ``endian`` the byte order
    (0 for little endian).
    """

    bpp = BITS_PER_PIXEL
    endian = 0

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"image size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.line_length = width * (self.bpp // 8)
        self.data = bytearray(self.line_length * height)

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"pixel ({x}, {y}) outside {self.width}x{self.height} image"
            )
        return y * self.line_length + x * (self.bpp // 8)

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Store ``color`` (truncated to 32 bits) at column ``x``, row ``y``."""
        _PIXEL.pack_into(self.data, self._offset(x, y), color & 0xFFFFFFFF)

    def get_pixel(self, x: int, y: int) -> int:
        """Return the 32-bit value stored at column ``x``, row ``y``."""
        return _PIXEL.unpack_from(self.data, self._offset(x, y))[0]

    def to_bytes(self) -> bytes:
        """Return a copy of the raw pixel buffer."""
        return bytes(self.data)


def mask_shifts(mask: int) -> tuple[int, int]:
    """Return ``(shift, bits)``: the position and width of a channel mask."""
    if mask <= 0:
        raise ValueError(f"channel mask must be positive, got {mask:#x}")
    shift = 0
    while not mask & 1:
        mask >>= 1
        shift += 1
    bits = 0
    while mask & 1:
        mask >>= 1
        bits += 1
    return shift, bits


def convert_color(
    color: int, depth: int, red_mask: int, green_mask: int, blue_mask: int
) -> int:
    """Convert a 0xRRGGBB colour to a pixel value for a visual of ``depth``.

    Visuals of 24 bits or more take the colour unchanged; shallower ones
    pack each channel into the bits its mask selects.
    """
    if depth >= 24:
        return color
    red = (color >> 8) & 0xFF00
    green = color & 0xFF00
    blue = (color << 8) & 0xFF00
    pixel = 0
    for value, mask in ((red, red_mask), (green, green_mask), (blue, blue_mask)):
        shift, bits = mask_shifts(mask)
        pixel += (value >> (16 - bits)) << shift
    return pixel