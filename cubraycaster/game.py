"""The game: key state, the per-frame update and the window loop."""

from __future__ import annotations

import enum
import sys
from collections.abc import Sequence
from os import PathLike

from .image import Image
from .mapgrid import MapError, render_map
from .minimap import draw_minimap, draw_player
from .player import spawn_player
from .raycast import TEXTURE_COUNT, Texture, render_frame
from .scene import Scene, SceneError, load_scene
from .xpm import XpmError, load_xpm

GAME_NAME = "cub3D"
SCREEN_WIDTH = 640
SCREEN_HEIGHT = 480
TILE = 8
FRAME_RATE = 60

_PLAIN_KEY_RANGE = range(3, 256)


class Key(enum.IntEnum):
    """Key symbols the game reacts to."""

    LEFT = 0xFF51
    RIGHT = 0xFF53
    ESCAPE = 0xFF1B
    W = ord("w")
    S = ord("s")
    A = ord("a")
    D = ord("d")


_SPECIAL_KEYS = frozenset((Key.LEFT, Key.RIGHT, Key.ESCAPE))


class Game:
    """The running state of one scene: player, pressed keys and frame image."""

    def __init__(self, scene: Scene, textures: Sequence[Texture]) -> None:
        if len(textures) != TEXTURE_COUNT:
            raise ValueError(f"expected {TEXTURE_COUNT} textures, got {len(textures)}")
        self.scene = scene
        self.textures = tuple(textures)
        self.player = spawn_player(scene.grid)
        self.image = Image(SCREEN_WIDTH, SCREEN_HEIGHT)
        self.mouse_x = SCREEN_WIDTH // 2
        self.running = True
        self._pressed: set[int] = set()

    @property
    def pressed(self) -> frozenset[int]:
        """The key symbols currently held down."""
        return frozenset(self._pressed)

    @staticmethod
    def _tracked(key: int) -> bool:
        return key in _PLAIN_KEY_RANGE or key in _SPECIAL_KEYS

    def key_press(self, key: int) -> None:
        """Record that ``key`` went down; keys the game ignores are dropped."""
        if self._tracked(key):
            self._pressed.add(int(key))

    def key_release(self, key: int) -> None:
        """Record that ``key`` went up."""
        if self._tracked(key):
            self._pressed.discard(int(key))

    def mouse_move(self, x: int) -> None:
        """Turn toward the side of the screen centre the pointer moved to."""
        if x > self.mouse_x:
            self.player.turn_right()
        elif x < self.mouse_x:
            self.player.turn_left()

    def tick(self) -> bool:
        """Apply held keys and draw one frame; return False once Escape ends the game."""
        if Key.ESCAPE in self._pressed:
            self.running = False
            return False
        grid = self.scene.grid
        player = self.player
        if Key.W in self._pressed:
            player.move_forward(grid)
        if Key.S in self._pressed:
            player.move_backward(grid)
        if Key.A in self._pressed:
            player.strafe_left(grid)
        if Key.D in self._pressed:
            player.strafe_right(grid)
        if Key.LEFT in self._pressed:
            player.rotate(player.rot_speed, 1)
        if Key.RIGHT in self._pressed:
            player.rotate(player.rot_speed, -1)
        render_frame(
            self.image, grid, player, self.textures, self.scene.floor, self.scene.ceiling
        )
        draw_minimap(self.image, grid, TILE)
        draw_player(self.image, player, TILE)
        return True


def load_game(path: str | PathLike[str]) -> Game:
    """Read a scene file and its wall textures and set up a game."""
    scene = load_scene(path)
    textures = [Texture.from_image(load_xpm(texture)) for texture in scene.textures]
    return Game(scene, textures)


def _rgb_bytes(image: Image) -> bytes:
    rgb = bytearray(image.width * image.height * 3)
    data = image.data
    rgb[0::3] = data[2::4]
    rgb[1::3] = data[1::4]
    rgb[2::3] = data[0::4]
    return bytes(rgb)


def _run(game: Game) -> None:
    import pygame

    special = {
        pygame.K_LEFT: Key.LEFT,
        pygame.K_RIGHT: Key.RIGHT,
        pygame.K_ESCAPE: Key.ESCAPE,
    }

    def keysym(key: int) -> int | None:
        if key in special:
            return special[key]
        return key if key in _PLAIN_KEY_RANGE else None

    pygame.init()
    try:
        screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption(GAME_NAME)
        centre = (SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2)
        clock = pygame.time.Clock()
        while game.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    game.running = False
                elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                    symbol = keysym(event.key)
                    if symbol is None:
                        continue
                    if event.type == pygame.KEYDOWN:
                        game.key_press(symbol)
                    else:
                        game.key_release(symbol)
                elif event.type == pygame.MOUSEMOTION:
                    game.mouse_move(event.pos[0])
                    if event.pos != centre:
                        pygame.mouse.set_pos(centre)
            if not game.running or not game.tick():
                break
            frame = pygame.image.frombuffer(
                _rgb_bytes(game.image), (SCREEN_WIDTH, SCREEN_HEIGHT), "RGB"
            )
            screen.blit(frame, (0, 0))
            pygame.display.flip()
            clock.tick(FRAME_RATE)
    finally:
        pygame.quit()


def main(argv: Sequence[str] | None = None) -> int:
    """Load the scene named on the command line and play it in a window."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print("Error: wrong number of arguments")
        return 1
    try:
        game = load_game(args[0])
    except (MapError, SceneError, XpmError, OSError) as exc:
        print(f"Error: {exc}")
        print("Exiting program ...")
        return 1
    print(render_map(game.scene.grid), end="")
    _run(game)
    return 1