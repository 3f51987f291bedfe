"""Reading XPM pixmaps into 32-bit images."""

from __future__ import annotations

import re
from collections.abc import Sequence
from os import PathLike

from .colornames import lookup_color
from .image import Image

_TRANSPARENT = 0xFF000000
_NAME_BUFFER = 63
_INT = re.compile(r"\s*([+-]?\d+)")
_HEX = re.compile(r"\s*([+-]?)(?:0[xX])?([0-9a-fA-F]+)")
_QUOTED = re.compile(r'"([^"]*)"')


class XpmError(ValueError):
    """Raised when XPM data cannot be parsed."""


def split_words(text: str) -> list[str]:
    """Split ``text`` on spaces and tabs, dropping empty words."""
    return [word for word in re.split(r"[ \t]+", text) if word]


def _find_unquoted(text: str, token: str) -> int:
    inside = False
    for pos, char in enumerate(text):
        if char == '"':
            inside = not inside
        if not inside and text.startswith(token, pos):
            return pos
    return -1


def _blank(text: str, start: int, stop: int) -> str:
    return text[:start] + " " * (stop - start) + text[stop:]


def strip_comments(text: str) -> str:
    """Blank out C comments outside double quotes, keeping the text length."""
    while (start := _find_unquoted(text, "/*")) != -1:
        end = text.find("*/", start + 2)
        text = _blank(text, start, len(text) if end == -1 else end + 2)
    while (start := _find_unquoted(text, "//")) != -1:
        end = text.find("\n", start + 2)
        text = _blank(text, start, len(text) if end == -1 else end + 1)
    return text


def _atoi(word: str) -> int:
    match = _INT.match(word)
    return int(match.group(1)) if match else 0


def text_to_rgb(name: str, extra: str | None) -> int:
    """Turn an XPM colour spec into 0xRRGGBB; unknown names give 0.

    ``#`` specs are hexadecimal. Otherwise ``extra``, the word following
    the colour, is joined to the name with a space before the lookup, so
    two-word names such as ``dark red`` are found. ``none`` gives -1.
    """
    if name.startswith("#"):
        match = _HEX.match(name[1:])
        if not match:
            return 0
        value = int(match.group(2), 16)
        return -value if match.group(1) == "-" else value
    if extra is not None:
        name = f"{name} {extra}"[:_NAME_BUFFER]
    try:
        return lookup_color(name)
    except KeyError:
        return 0


def quoted_lines(text: str) -> list[str]:
    """Return the contents of each double-quoted string in ``text``, in order."""
    return _QUOTED.findall(text)


def _parse_header(line: str) -> tuple[int, int, int, int]:
    words = split_words(line)
    if len(words) < 4:
        raise XpmError(f"incomplete XPM header: {line!r}")
    values = tuple(_atoi(word) for word in words[:4])
    if not all(values):
        raise XpmError(f"invalid XPM header: {line!r}")
    width, height, ncolors, cpp = values
    return width, height, ncolors, cpp


def parse_xpm(lines: Sequence[str]) -> Image:
    """Build an :class:`Image` from the strings of an XPM image.

    ``lines`` holds the header, the colour definitions and the pixel rows.
    Pixels whose colour is ``None`` are stored as 0xFF000000.
    """
    rows = iter(lines)

    def next_line(what: str) -> str:
        try:
            return next(rows)
        except StopIteration:
            raise XpmError(f"XPM data ends before {what}") from None

    width, height, ncolors, cpp = _parse_header(next_line("the header"))

    colors: dict[str, int] = {}
    for _ in range(ncolors):
        line = next_line("the colour table ends")
        words = split_words(line[cpp:])
        try:
            index = words.index("c") + 1
        except ValueError:
            raise XpmError(f"colour line without 'c' key: {line!r}") from None
        if index >= len(words):
            raise XpmError(f"colour line without a colour: {line!r}")
        extra = words[index + 1] if index + 1 < len(words) else None
        rgb = text_to_rgb(words[index], extra)
        key = line[:cpp]
        if cpp <= 2:
            colors[key] = rgb
        else:
            colors.setdefault(key, rgb)

    image = Image(width, height)
    for y in range(height):
        line = next_line("the pixel rows end")
        for x in range(width):
            color = colors.get(line[x * cpp:(x + 1) * cpp], 0)
            if color == -1:
                color = _TRANSPARENT
            image.put_pixel(x, y, color)
    return image


def load_xpm(path: str | PathLike[str]) -> Image:
    """Read an XPM file and return its image."""
    with open(path, encoding="latin-1") as handle:
        text = handle.read()
    return parse_xpm(quoted_lines(strip_comments(text)))