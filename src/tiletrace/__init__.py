"""Tiled, parallel sphere ray tracer built on Taichi.

A render coordinator cuts each frame into tiles, hands them to a pool of
workers that each hold their own copy of the scene, and presents the frame
once every tile of the current render pass has come back. Camera moves start
a new pass; late tiles from a superseded pass are discarded.

Subpackages:
    core: Vector math, Taichi ray helpers, tiles, the tile renderer and the
        render coordinator
    geometry: Sphere primitive and ray-sphere intersection
    camera: Eye plus film-rectangle camera
    lights: Point lights with hard shadows
    scene: Scene container, commands, wire format and the default scene
    workers: Coordinator-to-worker transports (in-process and multiprocessing)
    preview: Frame buffer, PNG export and the interactive GGUI window
"""

__version__ = "0.1.0"
