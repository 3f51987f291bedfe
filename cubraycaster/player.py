"""The player: position, view direction, camera plane and movement."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .mapgrid import EMPTY, WALL, MapGrid, find_player

MOVE_SPEED = 0.05
ROT_SPEED = 0.05
BUFFER_DIST = 0.2
FOV = 66.0

WALKABLE = frozenset("0NSEW")
HEADINGS = {
    "E": 0.0,
    "S": math.pi / 2,
    "W": math.pi,
    "N": 3 * math.pi / 2,
}


def _cell(grid: MapGrid, x: int, y: int) -> str:
    try:
        return grid.cell(x, y)
    except IndexError:
        return EMPTY


def valid_position(grid: MapGrid, x: float, y: float, buffer: float) -> bool:
    """Tell whether column ``x``, row ``y`` is walkable and not too close to a wall."""
    col, row = int(x), int(y)
    if _cell(grid, col, row) not in WALKABLE:
        return False
    near = (
        (abs(x - math.floor(x)) < buffer, (col - 1, row)),
        (abs(x - math.ceil(x)) < buffer, (col + 1, row)),
        (abs(y - math.floor(y)) < buffer, (col, row - 1)),
        (abs(y - math.ceil(y)) < buffer, (col, row + 1)),
    )
    return not any(close and _cell(grid, *cell) == WALL for close, cell in near)


@dataclass
class Player:
    """Where the player stands and looks.

    ``row`` and ``col`` are map coordinates; the direction and camera-plane
    vectors are given as (row, column) components. ``angle`` is measured so
    that the column component is its cosine and the row component its sine.
    """

    row: float
    col: float
    angle: float
    dir_row: float
    dir_col: float
    plane_row: float
    plane_col: float
    speed: float = MOVE_SPEED
    rot_speed: float = ROT_SPEED
    buffer: float = BUFFER_DIST

    def rotate(self, speed: float, direction: int) -> None:
        """Turn the view by ``speed * direction`` radians."""
        turn = speed * direction
        cos_t, sin_t = math.cos(turn), math.sin(turn)
        self.dir_row, self.dir_col = (
            self.dir_row * cos_t - self.dir_col * sin_t,
            self.dir_row * sin_t + self.dir_col * cos_t,
        )
        self.plane_row, self.plane_col = (
            self.plane_row * cos_t - self.plane_col * sin_t,
            self.plane_row * sin_t + self.plane_col * cos_t,
        )
        self.angle = math.atan2(self.dir_row, self.dir_col)

    def turn_left(self) -> None:
        self.rotate(self.rot_speed, 1)

    def turn_right(self) -> None:
        self.rotate(self.rot_speed, -1)

    def _try_move(self, grid: MapGrid, row: float, col: float) -> None:
        if valid_position(grid, col, row, self.buffer):
            self.row, self.col = row, col

    def move_forward(self, grid: MapGrid) -> None:
        self._try_move(
            grid,
            self.row + self.dir_row * self.speed,
            self.col + self.dir_col * self.speed,
        )

    def move_backward(self, grid: MapGrid) -> None:
        self._try_move(
            grid,
            self.row - self.dir_row * self.speed,
            self.col - self.dir_col * self.speed,
        )

    def _strafe(self, grid: MapGrid, offset: float) -> None:
        heading = self.angle + offset
        self._try_move(
            grid,
            self.row + math.sin(heading) * self.speed,
            self.col + math.cos(heading) * self.speed,
        )

    def strafe_left(self, grid: MapGrid) -> None:
        self._strafe(grid, -math.pi / 2)

    def strafe_right(self, grid: MapGrid) -> None:
        self._strafe(grid, math.pi / 2)


def spawn_player(grid: MapGrid, fov: float = FOV) -> Player:
    """Place the player at the centre of its start cell, facing its heading.

    ``fov`` is the horizontal field of view in degrees.
    """
    col, row, heading = find_player(grid)
    angle = HEADINGS[heading]
    dir_row, dir_col = math.sin(angle), math.cos(angle)
    scale = math.tan(math.radians(fov) / 2)
    return Player(
        row=row + 0.5,
        col=col + 0.5,
        angle=angle,
        dir_row=dir_row,
        dir_col=dir_col,
        plane_row=dir_col * scale,
        plane_col=-dir_row * scale,
    )