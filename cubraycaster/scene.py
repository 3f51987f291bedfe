"""Scene description files: wall textures, floor and ceiling colours, and the map."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from dataclasses import dataclass
from os import PathLike

from .mapgrid import MapGrid, check_extension, count_players, parse_map_lines, validate_map_file

TEXTURE_KEYS = ("NO", "SO", "WE", "EA")
FLOOR_KEY = "F"
CEILING_KEY = "C"
TEXTURE_EXTENSION = ".xpm"

_CHANNEL_WIDTH = 3
_INT = re.compile(r"\s*([+-]?\d+)")


class SceneError(ValueError):
    """Raised when the textures or colours of a scene file are invalid."""


@dataclass(frozen=True)
class Color:
    """An RGB colour with 8-bit channels."""

    r: int
    g: int
    b: int

    def as_int(self) -> int:
        """Return the colour packed as 0xRRGGBB."""
        return (self.r << 16) | (self.g << 8) | self.b


@dataclass(frozen=True)
class Scene:
    """Everything a scene file describes.

    ``textures`` holds the north, south, west and east wall texture paths,
    in that order.
    """

    textures: tuple[str, str, str, str]
    floor: Color
    ceiling: Color
    grid: MapGrid


def texture_kind(line: str) -> int | None:
    """Return the index in :data:`TEXTURE_KEYS` of a texture line, or None."""
    for index, key in enumerate(TEXTURE_KEYS):
        if line.startswith(key + " "):
            return index
    return None


def _atoi(text: str) -> int:
    match = _INT.match(text)
    return int(match.group(1)) if match else 0


def parse_color(line: str) -> Color:
    """Parse a colour line such as ``F 220,100,0``.

    The two-character identifier is skipped, then spaces, then three
    comma-separated channels of at most three characters each.
    """
    pos = 2
    while pos < len(line) and line[pos] == " ":
        pos += 1
    channels: list[int] = []
    for index in range(3):
        start = pos
        while (
            pos < len(line)
            and line[pos] not in ",\n"
            and pos - start < _CHANNEL_WIDTH
        ):
            pos += 1
        value = _atoi(line[start:pos])
        if not 0 <= value <= 255:
            raise SceneError(f"invalid color value: {line!r}")
        channels.append(value)
        if pos < len(line) and line[pos] == ",":
            pos += 1
        elif index != 2:
            raise SceneError(f"invalid color value: {line!r}")
    red, green, blue = channels
    return Color(red, green, blue)


def _texture_path(line: str) -> str:
    rest = line.split(" ", 1)[1].lstrip(" ")
    return rest.split("\n", 1)[0]


def parse_scene_lines(lines: Iterable[str]) -> Scene:
    """Build a :class:`Scene` from the lines of a scene file.

    Later texture lines for the same wall replace earlier ones; each of
    the floor and ceiling colours must be given exactly once.
    """
    lines = list(lines)
    if not lines:
        raise SceneError("scene file is empty")
    textures: list[str | None] = [None] * len(TEXTURE_KEYS)
    colors: dict[str, list[Color]] = {FLOOR_KEY: [], CEILING_KEY: []}
    for line in lines:
        kind = texture_kind(line)
        if kind is not None:
            if not check_extension(line, TEXTURE_EXTENSION):
                raise SceneError(f"invalid texture extension: {line!r}")
            textures[kind] = _texture_path(line)
        for key, found in colors.items():
            if line.startswith(key + " "):
                found.append(parse_color(line))
    missing = [key for key, path in zip(TEXTURE_KEYS, textures) if path is None]
    if missing:
        raise SceneError(f"missing texture path for {', '.join(missing)}")
    if any(len(found) != 1 for found in colors.values()):
        raise SceneError("F or C values not found or too many")
    north, south, west, east = (str(path) for path in textures)
    return Scene(
        textures=(north, south, west, east),
        floor=colors[FLOOR_KEY][0],
        ceiling=colors[CEILING_KEY][0],
        grid=parse_map_lines(lines),
    )


def check_textures_exist(scene: Scene) -> None:
    """Raise :class:`SceneError` if a texture file of ``scene`` does not exist."""
    for path in scene.textures:
        if not os.path.exists(path):
            raise SceneError(f"the texture path does not exist: {path!r}")


def load_scene(path: str | PathLike[str]) -> Scene:
    """Read and check the ``.cub`` scene file at ``path``."""
    grid = validate_map_file(path)
    if count_players(grid) != 1:
        raise SceneError("there is less or more than one player entity on the map")
    with open(path, encoding="utf-8") as handle:
        lines = handle.readlines()
    scene = parse_scene_lines(lines)
    check_textures_exist(scene)
    return scene