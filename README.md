# cubraycaster

A small first-person raycaster. It reads a `.cub` scene file that gives four
wall textures (XPM images), a floor colour, a ceiling colour and a map grid.
It then lets you walk through the maze in a 640×480 window drawn with pygame.
An overhead minimap and an arrow for the player are drawn near the top-left
corner.

## Installing

```
pip install .
```

## Running

```
cubraycaster path/to/level.cub
```

Before the window opens, the command prints the map to the terminal with
walls, player start and flooded cells in colour. If the scene cannot be loaded,
it prints the error and `Exiting program ...`, then exits with status 1.

### Controls

| Key | Action |
| --- | --- |
| `W` / `S` | move forward / backward |
| `A` / `D` | strafe left / right |
| Left / Right arrow | turn |
| mouse | turn (the pointer is kept at the window centre) |
| `Esc` or closing the window | quit |

The player cannot step into walls. Movement also stops short of a wall by a
small margin.

## Scene files

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm

F 220,100,0
C 225,30,0

111111
100101
101001
1100N1
111111
```

Rules:

- The file name must refer to a `.cub` file.
- Each of `NO`, `SO`, `WE` and `EA` must name an `.xpm` texture file that exists. If a key is given twice, the later line wins.
- `F` and `C` must each appear exactly once. Each has three comma-separated values from 0 to 255.
- Map lines may contain only `0`, `1`, spaces and the player start. There must be exactly one player start: `N`, `S`, `E` or `W`. The letter also sets the starting direction.
- The map must contain at least one floor cell (`0`). It must also be closed:
  - no floor cell may touch a space;
  - the open area may not reach the edge of the grid.

When drawing, the `F` colour fills the rows above each wall slice. The `C`
colour fills the rows below it.

## Using it as a library

Everything except the window can be used from Python:

- **`cubraycaster.mapgrid`**: reads and checks the map.
  - `read_map` and `parse_map_lines` return a `MapGrid`.
  - `check_closed` checks that the map is enclosed.
  - `validate_map_file` runs all the checks on a file.
  - `render_map` gives the coloured text view.
  - Problems raise `MapError`.
- **`cubraycaster.scene`**: `load_scene` returns a `Scene`. It has the four texture paths, the `floor` and `ceiling` colours (`Color`), and the `grid`. Problems raise `SceneError`.
- **`cubraycaster.xpm`**: decodes XPM images.
  - `load_xpm` decodes a file and `parse_xpm` decodes its strings.
  - Colours named `None` are stored as `0xFF000000`.
  - Errors raise `XpmError`.
- **`cubraycaster.colornames`**: `lookup_color` gives the RGB value of a named colour.
- **`cubraycaster.image`**: `Image` is an off-screen 32-bit pixel buffer with `put_pixel`, `get_pixel` and `to_bytes`.
- **`cubraycaster.player`**: `spawn_player` places a `Player` at the start cell. `Player` has methods to move, strafe and rotate.
- **`cubraycaster.raycast`**: `cast_ray` follows a single ray, and `render_frame` draws one frame into an `Image`. Textures are `Texture` objects, which `Texture.from_image` builds from an `Image`.
- **`cubraycaster.minimap`**: `draw_minimap` and `draw_player` draw the overhead view.
- **`cubraycaster.game`**:
  - `load_game` builds a `Game` from a scene file.
  - `Game.key_press`, `Game.key_release` and `Game.mouse_move` feed it input.
  - `Game.tick` applies the held keys and draws one frame. It returns `False` once Escape is held.

## Limitations

- Only XPM files are read as textures.
- Transparent texture pixels are not blended. They are drawn like any other colour.
- There are no sprites, doors, sound or saved state.

## Tests

```
pip install .[test]
pytest
```