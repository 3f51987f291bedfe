import math

import pytest

from cubraycaster.mapgrid import MapError, MapGrid
from cubraycaster.player import Player, spawn_player, valid_position


def make_grid(heading="E"):
    return MapGrid(
        (
            "111111",
            "100001",
            f"10{heading}001",
            "100001",
            "111111",
        )
    )


def make_player(heading="E"):
    player = spawn_player(make_grid(heading), 90)
    player.speed = 0.1
    player.buffer = 0.2
    return player


def test_spawn_position_is_cell_centre():
    player = spawn_player(make_grid(), 66)
    assert (player.row, player.col) == (2.5, 2.5)


@pytest.mark.parametrize("heading", ["N", "S", "E", "W"])
def test_spawn_plane_perpendicular_to_direction(heading):
    player = spawn_player(make_grid(heading), 90)
    dot = player.plane_row * player.dir_row + player.plane_col * player.dir_col
    assert dot == pytest.approx(0.0, abs=1e-12)
    assert math.hypot(player.plane_row, player.plane_col) == pytest.approx(
        math.tan(math.radians(45))
    )


def test_spawn_headings():
    assert make_player("N").dir_row == pytest.approx(-1.0)
    assert make_player("S").dir_row == pytest.approx(1.0)
    assert make_player("W").dir_col == pytest.approx(-1.0)
    assert make_player("E").dir_col == pytest.approx(1.0)


def test_spawn_without_player():
    with pytest.raises(MapError):
        spawn_player(MapGrid(("111", "101", "111")), 66)


def test_rotate_keeps_lengths_and_angle():
    player = make_player()
    for _ in range(7):
        player.turn_left()
    assert math.hypot(player.dir_row, player.dir_col) == pytest.approx(1.0)
    assert player.angle == pytest.approx(math.atan2(player.dir_row, player.dir_col))
    dot = player.plane_row * player.dir_row + player.plane_col * player.dir_col
    assert dot == pytest.approx(0.0, abs=1e-12)


def test_turn_left_then_right_restores_view():
    player = make_player()
    before = (player.dir_row, player.dir_col, player.plane_row, player.plane_col)
    player.turn_left()
    player.turn_right()
    after = (player.dir_row, player.dir_col, player.plane_row, player.plane_col)
    assert after == pytest.approx(before)


def test_turn_left_from_east_gives_rot_speed_angle():
    player = make_player()
    player.turn_left()
    assert player.angle == pytest.approx(player.rot_speed)


def test_move_forward_into_open_floor():
    grid = make_grid()
    player = make_player()
    player.move_forward(grid)
    assert player.col == pytest.approx(2.5 + player.speed)
    assert player.row == pytest.approx(2.5)


def test_move_forward_stops_before_wall():
    grid = make_grid()
    player = make_player()
    for _ in range(100):
        player.move_forward(grid)
    assert 4.5 < player.col < 5 - player.buffer + 1e-9
    assert valid_position(grid, player.col, player.row, player.buffer)


def test_move_backward_stops_before_wall():
    grid = make_grid()
    player = make_player()
    for _ in range(100):
        player.move_backward(grid)
    assert 1 + player.buffer - 1e-9 < player.col < 1.5
    assert valid_position(grid, player.col, player.row, player.buffer)


def test_strafe_left_and_right_from_east():
    grid = make_grid()
    player = make_player()
    player.strafe_left(grid)
    assert player.row == pytest.approx(2.5 - player.speed)
    assert player.col == pytest.approx(2.5)
    player.strafe_right(grid)
    assert player.row == pytest.approx(2.5)


def test_valid_position_cases():
    grid = make_grid()
    assert valid_position(grid, 2.5, 2.5, 0.2)
    assert valid_position(grid, 1.5, 2.5, 0.2)
    assert not valid_position(grid, 0.5, 0.5, 0.2)
    assert not valid_position(grid, 1.1, 2.5, 0.2)
    assert not valid_position(grid, 2.5, 1.1, 0.2)
    assert not valid_position(grid, -3.0, -3.0, 0.2)


def test_blocked_move_keeps_position():
    grid = MapGrid(("111", "1E1", "111"))
    player = spawn_player(grid, 66)
    player.speed = 0.45
    start = (player.row, player.col)
    player.move_forward(grid)
    player.strafe_right(grid)
    assert (player.row, player.col) == start
    assert isinstance(player, Player) and player.angle == 0.0