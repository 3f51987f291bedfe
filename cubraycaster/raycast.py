"""Grid raycasting and rendering of textured wall slices."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from .image import Image
from .mapgrid import MapGrid
from .player import WALKABLE, Player

TEXTURE_COUNT = 4
_NO_DELTA = 1e30


class _RGB(Protocol):
    r: int
    g: int
    b: int


@dataclass(frozen=True)
class Texture:
    """A wall texture: its size and its 0xRRGGBB pixels, row by row."""

    width: int
    height: int
    pixels: tuple[int, ...]

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"texture size must be positive, got {self.width}x{self.height}")
        if len(self.pixels) != self.width * self.height:
            raise ValueError(
                f"texture of {self.width}x{self.height} needs "
                f"{self.width * self.height} pixels, got {len(self.pixels)}"
            )

    @classmethod
    def from_image(cls, image: Image) -> Texture:
        """Copy the RGB part of every pixel of ``image``."""
        pixels = tuple(
            image.get_pixel(x, y) & 0xFFFFFF
            for y in range(image.height)
            for x in range(image.width)
        )
        return cls(image.width, image.height, pixels)

    def pixel(self, x: int, y: int) -> int:
        """Return the colour at column ``x``, row ``y``."""
        return self.pixels[y * self.width + x]


@dataclass(frozen=True)
class RayHit:
    """Where a ray stopped.

    ``row`` and ``col`` name the blocking cell, ``side`` is 0 when the ray
    crossed a row boundary last and 1 for a column boundary, ``distance`` is
    the distance perpendicular to the camera plane and ``wall_x`` the
    fractional position of the hit along the wall face.
    """

    row: int
    col: int
    side: int
    distance: float
    wall_x: float


def _delta(component: float) -> float:
    return _NO_DELTA if component == 0 else abs(1 / component)


def _is_open(grid: MapGrid, row: int, col: int) -> bool:
    try:
        return grid.cell(col, row) in WALKABLE
    except IndexError:
        return False


def cast_ray(grid: MapGrid, player: Player, ray_x: float, ray_y: float) -> RayHit:
    """Step a ray through the grid until it leaves the walkable cells.

    ``ray_x`` is the row component of the ray and ``ray_y`` its column
    component. Cells outside the grid block the ray like walls.
    """
    row, col = int(player.row), int(player.col)
    delta_row, delta_col = _delta(ray_x), _delta(ray_y)
    step_row = -1 if ray_x < 0 else 1
    step_col = -1 if ray_y < 0 else 1
    if ray_x < 0:
        side_row = (player.row - row) * delta_row
    else:
        side_row = (row + 1.0 - player.row) * delta_row
    if ray_y < 0:
        side_col = (player.col - col) * delta_col
    else:
        side_col = (col + 1.0 - player.col) * delta_col
    while True:
        if side_row < side_col:
            side_row += delta_row
            row += step_row
            side = 0
        else:
            side_col += delta_col
            col += step_col
            side = 1
        if not _is_open(grid, row, col):
            break
    if side == 0:
        distance = side_row - delta_row
        wall = player.col + distance * ray_y
    else:
        distance = side_col - delta_col
        wall = player.row + distance * ray_x
    return RayHit(row, col, side, distance, wall - math.floor(wall))


def wall_span(perp_distance: float, screen_height: int) -> tuple[int, int, int]:
    """Return ``(line_height, draw_start, draw_end)`` for a wall slice.

    The slice is centred on the screen and clamped to its rows.
    """
    if perp_distance <= 0:
        raise ValueError(f"wall distance must be positive, got {perp_distance}")
    line_height = int(screen_height / perp_distance)
    draw_start = max(-(line_height // 2) + screen_height // 2, 0)
    draw_end = min(line_height // 2 + screen_height // 2, screen_height - 1)
    return line_height, draw_start, draw_end


def texture_index(side: int, ray_x: float, ray_y: float) -> int:
    """Choose which of the four wall textures a hit shows."""
    if side == 0:
        return 0 if ray_x > 0 else 1
    return 2 if ray_y > 0 else 3


def texture_column(
    wall_x: float, side: int, ray_x: float, ray_y: float, texture_width: int
) -> int:
    """Return the texture column for a hit at ``wall_x`` along the wall face."""
    column = int(wall_x * texture_width)
    if (side == 0 and ray_x > 0) or (side == 1 and ray_y < 0):
        column = texture_width - column - 1
    return column


def _put_bytes(image: Image, x: int, y: int, low: int, middle: int, high: int) -> None:
    offset = y * image.line_length + x * (image.bpp // 8)
    image.data[offset:offset + 3] = bytes((low & 0xFF, middle & 0xFF, high & 0xFF))


def _draw_wall(
    image: Image,
    x: int,
    span: tuple[int, int, int],
    texture: Texture,
    column: int,
) -> None:
    line_height, start, end = span
    step = texture.height / line_height
    position = 0.0
    for y in range(start, end):
        tex_y = int(position) % texture.height
        position += step
        pixel = texture.pixel(column, tex_y)
        _put_bytes(image, x, y, pixel & 0xFF, (pixel >> 8) & 0xFF, (pixel >> 16) & 0xFF)


def render_frame(
    image: Image,
    grid: MapGrid,
    player: Player,
    textures: Sequence[Texture],
    floor: _RGB,
    ceiling: _RGB,
) -> None:
    """Cast one ray per image column and draw the walls, floor and ceiling.

    ``textures`` holds the four wall textures in :func:`texture_index`
    order. Rows above each wall slice are filled with ``floor`` and rows
    from its end down with ``ceiling``; both colours are written with the
    red channel in the lowest byte of the pixel.
    """
    if len(textures) != TEXTURE_COUNT:
        raise ValueError(f"expected {TEXTURE_COUNT} textures, got {len(textures)}")
    for x in range(image.width):
        camera = 2 * x / image.width - 1
        ray_x = player.dir_row + player.plane_row * camera
        ray_y = player.dir_col + player.plane_col * camera
        hit = cast_ray(grid, player, ray_x, ray_y)
        span = wall_span(hit.distance, image.height)
        texture = textures[texture_index(hit.side, ray_x, ray_y)]
        column = texture_column(hit.wall_x, hit.side, ray_x, ray_y, texture.width)
        _draw_wall(image, x, span, texture, column)
        _, start, end = span
        for y in range(start):
            _put_bytes(image, x, y, floor.r, floor.g, floor.b)
        for y in range(end, image.height):
            _put_bytes(image, x, y, ceiling.r, ceiling.g, ceiling.b)