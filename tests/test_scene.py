import pytest

from cubraycaster.mapgrid import MapError
from cubraycaster.scene import (
    Color,
    Scene,
    SceneError,
    check_textures_exist,
    load_scene,
    parse_color,
    parse_scene_lines,
    texture_kind,
)

MAP_ROWS = ["11111\n", "10001\n", "10N01\n", "10001\n", "11111\n"]


def scene_lines(textures=None, floor="F 220,100,0\n", ceiling="C 225,30,0\n"):
    if textures is None:
        textures = ["NO n.xpm\n", "SO s.xpm\n", "WE w.xpm\n", "EA e.xpm\n"]
    return [*textures, "\n", floor, ceiling, "\n", *MAP_ROWS]


def test_texture_kind_order():
    assert texture_kind("NO a.xpm") == 0
    assert texture_kind("SO a.xpm") == 1
    assert texture_kind("WE a.xpm") == 2
    assert texture_kind("EA a.xpm") == 3


def test_texture_kind_needs_space():
    assert texture_kind("NOa.xpm") is None
    assert texture_kind("F 1,2,3") is None


def test_color_as_int():
    assert Color(0x12, 0x34, 0x56).as_int() == 0x123456


def test_parse_color_basic():
    assert parse_color("F 220,100,0\n") == Color(220, 100, 0)


def test_parse_color_skips_spaces():
    assert parse_color("C    7,8,9\n") == Color(7, 8, 9)


def test_parse_color_ignores_trailing_text():
    assert parse_color("F 1,2,3xyz\n") == Color(1, 2, 3)


@pytest.mark.parametrize(
    "line", ["F 256,0,0\n", "F 1000,0,0\n", "F -1,0,0\n", "F 1,2\n", "F 1;2;3\n"]
)
def test_parse_color_errors(line):
    with pytest.raises(SceneError):
        parse_color(line)


def test_parse_scene_lines():
    scene = parse_scene_lines(scene_lines())
    assert scene.textures == ("n.xpm", "s.xpm", "w.xpm", "e.xpm")
    assert scene.floor == Color(220, 100, 0)
    assert scene.ceiling == Color(225, 30, 0)
    assert scene.grid.rows == tuple(row.rstrip("\n") for row in MAP_ROWS)


def test_later_texture_replaces_earlier():
    textures = ["NO a.xpm\n", "NO b.xpm\n", "SO s.xpm\n", "WE w.xpm\n", "EA e.xpm\n"]
    assert parse_scene_lines(scene_lines(textures)).textures[0] == "b.xpm"


def test_texture_without_xpm_extension():
    textures = ["NO n.png\n", "SO s.xpm\n", "WE w.xpm\n", "EA e.xpm\n"]
    with pytest.raises(SceneError):
        parse_scene_lines(scene_lines(textures))


def test_missing_texture():
    with pytest.raises(SceneError):
        parse_scene_lines(scene_lines(["NO n.xpm\n", "SO s.xpm\n", "WE w.xpm\n"]))


def test_duplicate_floor_colour():
    lines = scene_lines()
    lines.insert(0, "F 1,2,3\n")
    with pytest.raises(SceneError):
        parse_scene_lines(lines)


def test_missing_ceiling_colour():
    with pytest.raises(SceneError):
        parse_scene_lines(scene_lines(ceiling="\n"))


def test_empty_scene():
    with pytest.raises(SceneError):
        parse_scene_lines([])


def _write_scene(tmp_path, rows=MAP_ROWS, make_textures=True):
    paths = []
    for name in ("n", "s", "w", "e"):
        texture = tmp_path / f"{name}.xpm"
        if make_textures:
            texture.write_text('"1 1 1 1",\n"a c #000000",\n"a"\n')
        paths.append(texture)
    header = [f"{key} {path}\n" for key, path in zip(("NO", "SO", "WE", "EA"), paths)]
    cub = tmp_path / "level.cub"
    cub.write_text("".join([*header, "F 10,20,30\n", "C 40,50,60\n", "\n", *rows]))
    return cub, paths


def test_check_textures_exist(tmp_path):
    _, paths = _write_scene(tmp_path, make_textures=False)
    scene = Scene(tuple(str(p) for p in paths), Color(0, 0, 0), Color(0, 0, 0), None)
    with pytest.raises(SceneError):
        check_textures_exist(scene)


def test_load_scene(tmp_path):
    cub, paths = _write_scene(tmp_path)
    scene = load_scene(cub)
    assert scene.textures == tuple(str(p) for p in paths)
    assert scene.floor == Color(10, 20, 30)
    assert scene.ceiling == Color(40, 50, 60)
    assert scene.grid.height == len(MAP_ROWS)


def test_load_scene_missing_texture_files(tmp_path):
    cub, _ = _write_scene(tmp_path, make_textures=False)
    with pytest.raises(SceneError):
        load_scene(cub)


def test_load_scene_two_players(tmp_path):
    rows = ["11111\n", "1N001\n", "10001\n", "100S1\n", "11111\n"]
    cub, _ = _write_scene(tmp_path, rows=rows)
    with pytest.raises(SceneError):
        load_scene(cub)


def test_load_scene_open_map(tmp_path):
    rows = ["11111\n", "10001\n", "10N00\n", "11111\n"]
    cub, _ = _write_scene(tmp_path, rows=rows)
    with pytest.raises(MapError):
        load_scene(cub)