"""Drawing the overhead minimap and the player's arrow."""

from __future__ import annotations

import math

from .image import Image
from .mapgrid import MapGrid
from .player import Player

FLOOR_COLOR = 0xFF0000
WALL_COLOR = 0x00FF00
OTHER_COLOR = 0xFFFFFF
ARROW_COLOR = 0x0000FF

_FLOOR_CELLS = frozenset("0NSWE")
_MAP_CELLS = frozenset("10NSWE")

Point = tuple[int, int]


def tile_color(cell: str) -> int:
    """Return the minimap colour of a map cell."""
    if cell in _FLOOR_CELLS:
        return FLOOR_COLOR
    if cell == "1":
        return WALL_COLOR
    return OTHER_COLOR


def is_on_map(cell: str) -> bool:
    """Tell whether a cell is drawn on the minimap."""
    return len(cell) == 1 and cell in _MAP_CELLS


def _plot(image: Image, x: int, y: int, color: int) -> None:
    if 0 <= x < image.width and 0 <= y < image.height:
        image.put_pixel(x, y, color)


def draw_minimap(image: Image, grid: MapGrid, tile: int) -> None:
    """Draw each map cell as a ``tile``-sized square, offset by one tile."""
    for row in range(grid.height):
        for col in range(grid.width):
            cell = grid.cell(col, row)
            if not is_on_map(cell):
                continue
            color = tile_color(cell)
            left, top = tile * (col + 1), tile * (row + 1)
            for y in range(top, top + tile):
                for x in range(left, left + tile):
                    _plot(image, x, y, color)


def draw_line(image: Image, a: Point, b: Point, color: int) -> None:
    """Draw a straight line from ``a`` to ``b``, both ends included."""
    (x, y), (x_end, y_end) = a, b
    dx, dy = abs(x_end - x), abs(y_end - y)
    step_x = 1 if x < x_end else -1
    step_y = 1 if y < y_end else -1
    err = dx - dy
    while True:
        _plot(image, x, y, color)
        if x == x_end and y == y_end:
            break
        doubled = 2 * err
        if doubled > -dy:
            err -= dy
            x += step_x
        if doubled < dx:
            err += dx
            y += step_y


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return -quotient if (numerator < 0) != (denominator < 0) else quotient


def interpolate_x(p1: Point, p2: Point, y: int) -> int:
    """Return the x of the line through ``p1`` and ``p2`` at row ``y``.

    The division truncates toward zero; a horizontal line gives ``p1``'s x.
    """
    if p1[1] == p2[1]:
        return p1[0]
    return p1[0] + _trunc_div((y - p1[1]) * (p2[0] - p1[0]), p2[1] - p1[1])


def _sort_by_y(head: Point, left: Point, right: Point) -> tuple[Point, Point, Point]:
    if head[1] > left[1]:
        head, left = left, head
    if head[1] > right[1]:
        head, right = right, head
    if left[1] > right[1]:
        left, right = right, left
    return head, left, right


def _fill_sorted(image: Image, head: Point, left: Point, right: Point, color: int) -> None:
    def span(y: int) -> None:
        start = interpolate_x(head, right, y)
        if y >= left[1]:
            end = interpolate_x(left, right, y)
        else:
            end = interpolate_x(head, left, y)
        draw_line(image, (start, y), (end, y), color)

    for y in range(head[1], left[1] + 1):
        span(y)
    for y in range(left[1], right[1] + 1):
        span(y)


def fill_triangle(image: Image, head: Point, left: Point, right: Point, color: int) -> None:
    """Fill the triangle with the given corners, scanning row by row."""
    _fill_sorted(image, *_sort_by_y(head, left, right), color)


def _round(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def arrow_points(player: Player, tile: int) -> tuple[Point, Point, Point]:
    """Return the head, left and right corners of the player's arrow."""
    half = tile // 2
    centre_x = player.col * tile + tile
    centre_y = player.row * tile + tile

    def corner(angle: float) -> Point:
        return (
            _round(centre_x + math.cos(angle) * half),
            _round(centre_y + math.sin(angle) * half),
        )

    return (
        corner(player.angle),
        corner(player.angle + math.pi / 2),
        corner(player.angle - math.pi / 2),
    )


def draw_player(image: Image, player: Player, tile: int) -> None:
    """Draw the player as a filled, outlined arrow on the minimap."""
    head, left, right = _sort_by_y(*arrow_points(player, tile))
    _fill_sorted(image, head, left, right, ARROW_COLOR)
    draw_line(image, head, left, ARROW_COLOR)
    draw_line(image, left, right, ARROW_COLOR)
    draw_line(image, head, right, ARROW_COLOR)