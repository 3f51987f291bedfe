"""Reading, validating and displaying the map grid of a scene file."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from os import PathLike

HEADER_PREFIXES = ("NO", "SO", "WE", "EA", "F", "C")
MAP_CHARS = frozenset("01 \nNSEW")
PLAYER_CHARS = frozenset("NSEW")
FLOOR = "0"
WALL = "1"
FLOODED = "F"
EMPTY = " "

_RED = "\033[31m"
_GREEN = "\033[32m"
_MAGENTA = "\033[1;35m"
_RESET = "\033[0m"


class MapError(ValueError):
    """Raised when a map is missing, malformed or not closed by walls."""


class LineKind(enum.IntEnum):
    """What a line of a scene file holds."""

    HEADER = 0
    MAP = 1
    INVALID = 2


@dataclass(frozen=True)
class MapGrid:
    """The rows of a map, as read, with the width of the widest row."""

    rows: tuple[str, ...]

    @property
    def width(self) -> int:
        return max((len(row) for row in self.rows), default=0)

    @property
    def height(self) -> int:
        return len(self.rows)

    def cell(self, x: int, y: int) -> str:
        """Return the character at column ``x``, row ``y``.

        Positions past the end of a short row read as a space.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} map")
        row = self.rows[y]
        return row[x] if x < len(row) else EMPTY


def classify_line(line: str) -> LineKind:
    """Tell whether ``line`` is a header, a map row or neither."""
    if line.startswith(HEADER_PREFIXES):
        return LineKind.HEADER
    if all(char in MAP_CHARS for char in line):
        return LineKind.MAP
    return LineKind.INVALID


def parse_map_lines(lines: Iterable[str]) -> MapGrid:
    """Collect the map rows among the lines of a scene file.

    Header lines and lines starting with a newline are skipped; a line
    with a character that belongs to no map raises :class:`MapError`.
    """
    rows: list[str] = []
    for line in lines:
        kind = classify_line(line)
        if kind is LineKind.HEADER or line.startswith("\n"):
            continue
        if kind is LineKind.INVALID:
            raise MapError(f"invalid character in map line: {line!r}")
        rows.append(line.split("\n", 1)[0])
    return MapGrid(tuple(rows))


def read_map(path: str | PathLike[str]) -> MapGrid:
    """Read the map rows of the scene file at ``path``."""
    try:
        with open(path, encoding="utf-8") as handle:
            lines = handle.readlines()
    except OSError as exc:
        raise MapError(f"cannot read file: {path}") from exc
    if not lines:
        raise MapError(f"failed to create map: {path} is empty")
    return parse_map_lines(lines)


def _touches_space(grid: MapGrid, x: int, y: int, flooded: set[tuple[int, int]]) -> bool:
    neighbours = []
    if x > 0:
        neighbours.append((x - 1, y))
    if x < grid.width - 1:
        neighbours.append((x + 1, y))
    if y > 0:
        neighbours.append((x, y - 1))
    if y < grid.height - 1:
        neighbours.append((x, y + 1))
    return any(
        (nx, ny) not in flooded and grid.cell(nx, ny) == EMPTY
        for nx, ny in neighbours
    )


def _flood(grid: MapGrid, start: tuple[int, int], flooded: set[tuple[int, int]]) -> None:
    stack = [start]
    while stack:
        x, y = stack.pop()
        if not (0 <= x < grid.width and 0 <= y < grid.height):
            raise MapError("map is not closed")
        char = FLOODED if (x, y) in flooded else grid.cell(x, y)
        if char == FLOOR and _touches_space(grid, x, y, flooded):
            raise MapError("map is not closed")
        if char in (WALL, FLOODED):
            continue
        flooded.add((x, y))
        stack.extend(((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)))


def check_closed(grid: MapGrid) -> frozenset[tuple[int, int]]:
    """Check that every floor cell is enclosed by walls.

    Returns the set of ``(x, y)`` cells reached by flooding from the floor
    cells; raises :class:`MapError` if the flood escapes the map or a floor
    cell borders empty space.
    """
    flooded: set[tuple[int, int]] = set()
    for y in range(grid.height):
        for x in range(grid.width):
            if (x, y) not in flooded and grid.cell(x, y) == FLOOR:
                _flood(grid, (x, y), flooded)
    return frozenset(flooded)


def find_player(grid: MapGrid) -> tuple[int, int, str]:
    """Return the column, row and heading letter of the player's start cell."""
    for y in range(grid.height):
        for x in range(grid.width - 1):
            char = grid.cell(x, y)
            if char in PLAYER_CHARS:
                return x, y, char
    raise MapError("no player start position on the map")


def find_first_floor(grid: MapGrid) -> tuple[int, int]:
    """Return the column and row of the first floor cell in reading order."""
    for y in range(grid.height):
        for x in range(grid.width - 1):
            if grid.cell(x, y) == FLOOR:
                return x, y
    raise MapError("no floor cell on the map")


def count_players(grid: MapGrid) -> int:
    """Count the player start cells on the map."""
    return sum(char in PLAYER_CHARS for row in grid.rows for char in row)


def _render_cell(char: str) -> str:
    if char == WALL:
        return f"{_RED}{char}{_RESET}"
    if char == FLOODED:
        return f"{_GREEN}{char}{_RESET}"
    if char in PLAYER_CHARS:
        return f"{_MAGENTA}{char}{_RESET}"
    return char


def render_map(grid: MapGrid) -> str:
    """Return the map as coloured terminal text."""
    lines = (
        "".join(_render_cell(grid.cell(x, y)) for x in range(grid.width)) + "\n"
        for y in range(grid.height)
    )
    return "\n\n" + "".join(lines) + "\n\n"


def check_extension(name: str, extension: str) -> bool:
    """Tell whether the characters of ``extension`` appear in ``name`` in order."""
    remaining = iter(name)
    return all(char in remaining for char in extension)


def validate_map_file(path: str | PathLike[str]) -> MapGrid:
    """Check a ``.cub`` file and return its map once it is known to be closed."""
    name = str(path)
    if not check_extension(name, ".cub"):
        raise MapError(f"invalid file extension: {name}")
    try:
        with open(path, "rb"):
            pass
    except OSError as exc:
        raise MapError(f"the file does not exist: {name}") from exc
    grid = read_map(path)
    find_first_floor(grid)
    check_closed(grid)
    return grid