"""Scene module.

Components:
    scene: Scene container with camera commands and reference shading
    commands: Camera commands and key bindings
    intersection: Nearest-hit queries over the sphere list
    serialization: Binary scene snapshots broadcast to workers
    default: The built-in three-sphere scene
"""

from .commands import KEY_BINDINGS, Command, resolve_command
from .intersection import Hit, nearest_hit, nearest_sphere
from .serialization import MalformedSceneData, deserialize_scene, serialize_scene
from .scene import Scene
from .default import create_default_scene

__all__ = [
    "Scene",
    "Command",
    "KEY_BINDINGS",
    "resolve_command",
    "Hit",
    "nearest_hit",
    "nearest_sphere",
    "MalformedSceneData",
    "serialize_scene",
    "deserialize_scene",
    "create_default_scene",
]
