"""Core game-engine services: logging, profiling, asserts, an entity-component system, scenes, cameras, timing, input mapping and asset data."""

__version__ = "0.1.0"

__all__ = [
    "assets",
    "asserts",
    "camera",
    "entity",
    "gametime",
    "input",
    "logger",
    "profiling",
    "registry",
    "rotator",
    "scene",
    "services",
    "transform",
    "views",
    "world",
]