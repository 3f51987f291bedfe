import pytest

from cubraycaster.image import Image
from cubraycaster.mapgrid import MapGrid
from cubraycaster.minimap import (
    arrow_points,
    draw_line,
    draw_minimap,
    draw_player,
    fill_triangle,
    interpolate_x,
    is_on_map,
    tile_color,
)
from cubraycaster.player import spawn_player


def painted(image):
    return {
        (x, y)
        for y in range(image.height)
        for x in range(image.width)
        if image.get_pixel(x, y)
    }


@pytest.mark.parametrize(
    "cell, expected",
    [("0", 0xFF0000), ("N", 0xFF0000), ("W", 0xFF0000), ("1", 0x00FF00), (" ", 0xFFFFFF)],
)
def test_tile_color(cell, expected):
    assert tile_color(cell) == expected


@pytest.mark.parametrize("cell, expected", [("1", True), ("E", True), (" ", False), ("F", False)])
def test_is_on_map(cell, expected):
    assert is_on_map(cell) is expected


def test_draw_minimap_places_tiles():
    tile = 2
    grid = MapGrid(("10", "1 "))
    image = Image(10, 10)
    draw_minimap(image, grid, tile)
    assert image.get_pixel(tile, tile) == 0x00FF00
    assert image.get_pixel(2 * tile + 1, tile + 1) == 0xFF0000
    assert image.get_pixel(2 * tile, 2 * tile) == 0
    assert image.get_pixel(0, 0) == 0


def test_draw_minimap_clips_to_image():
    image = Image(3, 3)
    draw_minimap(image, MapGrid(("111", "111")), 2)
    assert painted(image) == {(x, y) for x in (2,) for y in (2,)}


def test_draw_line_single_point():
    image = Image(5, 5)
    draw_line(image, (2, 3), (2, 3), 0x0000FF)
    assert painted(image) == {(2, 3)}


def test_draw_line_diagonal():
    image = Image(5, 5)
    draw_line(image, (0, 0), (3, 3), 0x0000FF)
    assert painted(image) == {(i, i) for i in range(4)}


def test_draw_line_is_connected_and_has_ends():
    image = Image(20, 20)
    draw_line(image, (1, 17), (15, 4), 0x0000FF)
    points = painted(image)
    assert (1, 17) in points and (15, 4) in points
    for x, y in points:
        if (x, y) != (15, 4):
            assert any((x + dx, y + dy) in points for dx in (-1, 0, 1) for dy in (-1, 0, 1)
                       if (dx, dy) != (0, 0))


def test_interpolate_x():
    assert interpolate_x((7, 3), (1, 3), 5) == 7
    assert interpolate_x((0, 0), (4, 4), 2) == 2
    assert interpolate_x((0, 0), (-3, 2), 1) == -1


def test_fill_triangle_covers_inside():
    image = Image(12, 12)
    fill_triangle(image, (5, 1), (1, 6), (9, 9), 0x0000FF)
    assert image.get_pixel(5, 5) == 0x0000FF
    assert image.get_pixel(0, 0) == 0


def test_fill_triangle_ignores_corner_order():
    first, second = Image(12, 12), Image(12, 12)
    fill_triangle(first, (5, 1), (1, 6), (9, 9), 0x0000FF)
    fill_triangle(second, (9, 9), (5, 1), (1, 6), 0x0000FF)
    assert first.to_bytes() == second.to_bytes()


def test_arrow_points_facing_east():
    tile = 10
    player = spawn_player(MapGrid(("11111", "10E01", "11111")))
    head, left, right = arrow_points(player, tile)
    centre_x = round(player.col * tile + tile)
    centre_y = round(player.row * tile + tile)
    assert head == (centre_x + tile // 2, centre_y)
    assert left[0] == right[0] == centre_x
    assert left[1] + right[1] == 2 * centre_y


def test_draw_player_marks_arrow():
    tile = 10
    player = spawn_player(MapGrid(("11111", "10E01", "11111")))
    image = Image(60, 40)
    draw_player(image, player, tile)
    for corner in arrow_points(player, tile):
        assert image.get_pixel(*corner) == 0x0000FF