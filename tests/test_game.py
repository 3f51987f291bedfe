import math

import pytest

from cubraycaster.game import SCREEN_HEIGHT, SCREEN_WIDTH, TILE, Game, Key, load_game, main
from cubraycaster.mapgrid import MapGrid
from cubraycaster.minimap import WALL_COLOR
from cubraycaster.player import ROT_SPEED
from cubraycaster.raycast import Texture
from cubraycaster.scene import Color, Scene

ROWS = (
    "11111",
    "10001",
    "10N01",
    "10001",
    "11111",
)
FLOOR = Color(220, 100, 0)
CEILING = Color(10, 30, 200)


def _textures():
    return [Texture(2, 2, (0x112233,) * 4) for _ in range(4)]


def _game():
    scene = Scene(
        textures=("n.xpm", "s.xpm", "w.xpm", "e.xpm"),
        floor=FLOOR,
        ceiling=CEILING,
        grid=MapGrid(ROWS),
    )
    return Game(scene, _textures())


def test_wrong_texture_count_rejected():
    scene = Scene(("a", "b", "c", "d"), FLOOR, CEILING, MapGrid(ROWS))
    with pytest.raises(ValueError):
        Game(scene, _textures()[:3])


def test_forward_moves_player_north():
    game = _game()
    start_row, start_col = game.player.row, game.player.col
    game.key_press(Key.W)
    assert game.tick() is True
    assert game.player.row < start_row
    assert math.isclose(game.player.col, start_col, abs_tol=1e-9)


def test_released_key_stops_movement():
    game = _game()
    game.key_press(Key.W)
    game.key_release(Key.W)
    start = (game.player.row, game.player.col)
    game.tick()
    assert (game.player.row, game.player.col) == start
    assert game.pressed == frozenset()


def test_escape_ends_game_without_moving():
    game = _game()
    start = (game.player.row, game.player.col)
    game.key_press(Key.W)
    game.key_press(Key.ESCAPE)
    assert game.tick() is False
    assert game.running is False
    assert (game.player.row, game.player.col) == start


def test_untracked_keys_are_ignored():
    game = _game()
    game.key_press(0x1234)
    game.key_press(2)
    assert game.pressed == frozenset()


def test_plain_escape_code_is_not_escape_key():
    game = _game()
    game.key_press(27)
    assert game.pressed == frozenset({27})
    assert game.tick() is True
    assert game.running is True


def test_left_key_rotates_by_rot_speed():
    game = _game()
    start = math.atan2(game.player.dir_row, game.player.dir_col)
    game.key_press(Key.LEFT)
    game.tick()
    assert math.isclose(game.player.angle, start + ROT_SPEED, abs_tol=1e-9)
    assert math.isclose(math.hypot(game.player.dir_row, game.player.dir_col), 1.0)


def test_mouse_at_centre_does_not_turn():
    game = _game()
    before = (game.player.dir_row, game.player.dir_col)
    game.mouse_move(game.mouse_x)
    assert (game.player.dir_row, game.player.dir_col) == before


def test_mouse_right_and_left_turn_opposite_ways():
    right = _game()
    left = _game()
    start = right.player.angle
    right.mouse_move(SCREEN_WIDTH)
    left.mouse_move(0)
    assert right.player.dir_col < 0 < left.player.dir_col or (
        left.player.dir_col < 0 < right.player.dir_col
    )
    assert right.player.angle != left.player.angle
    assert right.player.angle != start


def test_tick_draws_floor_ceiling_and_minimap():
    game = _game()
    game.tick()
    image = game.image
    assert (image.width, image.height) == (SCREEN_WIDTH, SCREEN_HEIGHT)
    top = image.get_pixel(SCREEN_WIDTH - 1, 0) & 0xFFFFFF
    bottom = image.get_pixel(SCREEN_WIDTH - 1, SCREEN_HEIGHT - 1) & 0xFFFFFF
    assert top == FLOOR.r | (FLOOR.g << 8) | (FLOOR.b << 16)
    assert bottom == CEILING.r | (CEILING.g << 8) | (CEILING.b << 16)
    assert image.get_pixel(TILE, TILE) == WALL_COLOR


XPM = '/* XPM */\nstatic char *t[] = {\n"2 2 1 1",\n"a c #FF0000",\n"aa",\n"aa"\n};\n'


def _write_scene(tmp_path, rows=ROWS):
    paths = []
    for name in ("north", "south", "west", "east"):
        path = tmp_path / f"{name}.xpm"
        path.write_text(XPM)
        paths.append(path)
    header = "".join(
        f"{key} {path}\n" for key, path in zip(("NO", "SO", "WE", "EA"), paths)
    )
    text = header + "F 220,100,0\nC 10,30,200\n\n" + "\n".join(rows) + "\n"
    scene = tmp_path / "scene.cub"
    scene.write_text(text)
    return scene


def test_load_game_reads_scene_and_textures(tmp_path):
    game = load_game(_write_scene(tmp_path))
    assert game.scene.floor == FLOOR
    assert game.scene.grid.rows == ROWS
    assert len(game.textures) == 4
    assert game.textures[0].pixel(0, 0) == 0xFF0000


def test_main_without_arguments_fails(capsys):
    assert main([]) == 1
    assert "wrong number of arguments" in capsys.readouterr().out


def test_main_with_missing_file_fails(tmp_path, capsys):
    assert main([str(tmp_path / "missing.cub")]) == 1
    assert "Exiting program" in capsys.readouterr().out


def test_main_with_open_map_fails(tmp_path, capsys):
    scene = _write_scene(tmp_path, rows=("11111", "10N0 ", "11111"))
    assert main([str(scene)]) == 1
    assert "Exiting program" in capsys.readouterr().out