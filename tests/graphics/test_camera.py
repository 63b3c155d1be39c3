import math

import numpy as np

from babo.graphics.camera import Camera
from babo.math import orthographic, translation
from babo.types import Vector2

ORIGIN = np.array([0.0, 0.0, 0.0, 1.0], dtype="f4")


class SizedWindow:
    size = (1024, 768)


def test_defaults():
    camera = Camera(800, 600)

    assert camera.position == Vector2(0.0, 0.0)
    assert camera.zoom == Vector2(1.0, 1.0)
    assert camera.rotation == 0.0
    assert camera.screen == Vector2(800.0, 600.0)


def test_projection_is_pixel_space():
    camera = Camera(800, 600)

    assert np.allclose(
        camera.projection(), orthographic(0.0, 800.0, 600.0, 0.0, -1.0, 1.0)
    )


def test_view_without_rotation_or_zoom_is_a_translation():
    camera = Camera(800, 600)
    camera.set_position(Vector2(120.0, -40.0))

    # Centered on the screen, offset by the negated camera position.
    expected = translation(400.0 - 120.0, 300.0 + 40.0)
    assert np.allclose(camera.view(), expected)


def test_view_applies_position_offset_twice_around_rotation():
    camera = Camera(800, 600)
    camera.set_position(Vector2(10.0, 0.0))
    camera.set_rotation(math.pi / 2)

    moved = camera.view() @ ORIGIN

    # With a single offset before the rotation this would be (390, 310).
    assert np.allclose(moved[:2], [380.0, 310.0], atol=1e-4)


def test_set_screen_updates_projection_only():
    camera = Camera(800, 600)
    camera.set_position(Vector2(50.0, 25.0))
    before = camera.projection().copy()

    camera.set_screen(1280, 720)

    assert not np.allclose(camera.projection(), before)
    assert np.allclose(
        camera.projection(), orthographic(0.0, 1280.0, 720.0, 0.0, -1.0, 1.0)
    )

    # The position dependent part of the view is still -position.
    view = camera.view()
    assert np.allclose(view[:2, 3], [640.0 - 50.0, 360.0 - 25.0])


def test_projection_is_cached():
    camera = Camera(800, 600)
    camera.set_position(Vector2(5.0, 5.0))
    camera.set_rotation(1.0)
    camera.set_zoom(Vector2(2.0, 2.0))

    assert camera.projection() is camera.projection()


def test_zoom_scales_view():
    camera = Camera(800, 600)
    camera.set_zoom(Vector2(2.0, 3.0))

    view = camera.view()
    assert np.allclose(np.diag(view)[:3], [2.0, 3.0, 1.0])


def test_from_window():
    camera = Camera.from_window(SizedWindow())

    assert camera.screen == Vector2(1024.0, 768.0)
