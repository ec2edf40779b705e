"""Pytest configuration for tiletrace tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. Kernels run in
    float64 to match the pure-Python shading path.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture
def single_sphere_scene():
    """Scene with one red sphere in front of the default camera and one light."""
    from tiletrace.camera.planar import Camera, Film
    from tiletrace.core.vector import RED, Vector3
    from tiletrace.geometry.sphere import Sphere
    from tiletrace.lights.point import Light
    from tiletrace.scene.scene import Scene

    camera = Camera(Vector3(3.0, 3.0, 0.0), Film(Vector3(0.0, 0.0, 3.0), 6.0, 6.0))
    sphere = Sphere(Vector3(5.0, 3.0, 5.0), 2.0, RED)
    light = Light(Vector3(3.0, 3.0, -1.0), 100.0)
    return Scene(camera, [sphere], [light], 60, 60)
