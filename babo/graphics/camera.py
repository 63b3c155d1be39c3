# babo/graphics/camera.py
from __future__ import annotations

from typing import Protocol, Tuple

import numpy as np

from babo.math import compose, orthographic, rotation_z, scaling, translation
from babo.types import Scalar, Vector2


class _Sized(Protocol):
    @property
    def size(self) -> Tuple[int, int]: ...


class Camera:
    """
    2D camera in pixel units.

    The projection maps (0, 0) to the top-left of the screen and
    (width, height) to the bottom-right. It only changes with the screen
    size. The view is rebuilt on every read from position, zoom and rotation.
    """

    def __init__(self, width: Scalar, height: Scalar):
        self._screen = Vector2(float(width), float(height))
        self._projection = self._build_projection()

        self._position = Vector2.zero()
        self._zoom = Vector2(1.0, 1.0)
        self._rotation: Scalar = 0.0

    @classmethod
    def from_window(cls, window: _Sized) -> Camera:
        width, height = window.size
        return cls(float(width), float(height))

    # -- Properties --
    @property
    def screen(self) -> Vector2:
        return self._screen

    @property
    def position(self) -> Vector2:
        return self._position

    @property
    def zoom(self) -> Vector2:
        return self._zoom

    @property
    def rotation(self) -> Scalar:
        return self._rotation

    # -- Matrices --
    def projection(self) -> np.ndarray:
        return self._projection

    def view(self) -> np.ndarray:
        half_w, half_h = self._screen.half()
        px, py = self._position

        return compose(
            # Center the camera.
            translation(half_w, half_h),
            # Set the position.
            translation(-px, -py),
            # Rotate around the camera position. The position offset above is
            # applied a second time here.
            translation(-px, -py),
            rotation_z(self._rotation),
            translation(px, py),
            # Zoom around the center of the screen.
            translation(half_w, half_h),
            scaling(self._zoom.x, self._zoom.y, 1.0),
            translation(-half_w, -half_h),
        )

    # -- Mutators --
    def set_position(self, position: Vector2) -> None:
        self._position = position

    def set_zoom(self, zoom: Vector2) -> None:
        self._zoom = zoom

    def set_rotation(self, rotation: Scalar) -> None:
        self._rotation = rotation

    def set_screen(self, width: Scalar, height: Scalar) -> None:
        self._screen = Vector2(float(width), float(height))
        self._projection = self._build_projection()

    def _build_projection(self) -> np.ndarray:
        return orthographic(0.0, self._screen.x, self._screen.y, 0.0, -1.0, 1.0)
