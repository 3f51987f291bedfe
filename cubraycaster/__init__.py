"""A grid-based first-person raycaster: .cub scenes, XPM textures, minimap and a pygame window."""

__version__ = "0.1.0"