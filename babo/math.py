# babo/math.py
"""
Matrix builders for the 2D pipeline.

All matrices are 4x4 float32 numpy arrays in column-vector convention:
translation lives in the last column and points transform as ``M @ p``.
Use ``babo.graphics.utils.uniforms.pack_mat4`` to get GL column-major bytes.
"""

import math

import numpy as np

from babo.types import Scalar


def translation(x: Scalar, y: Scalar, z: Scalar = 0.0) -> np.ndarray:
    mat = np.eye(4, dtype=np.float32)
    mat[0, 3] = x
    mat[1, 3] = y
    mat[2, 3] = z
    return mat


def rotation_z(angle: Scalar) -> np.ndarray:
    """Right-handed rotation about +Z by ``angle`` radians."""
    c = math.cos(angle)
    s = math.sin(angle)

    mat = np.eye(4, dtype=np.float32)
    mat[0, 0] = c
    mat[0, 1] = -s
    mat[1, 0] = s
    mat[1, 1] = c
    return mat


def scaling(x: Scalar, y: Scalar, z: Scalar = 1.0) -> np.ndarray:
    mat = np.eye(4, dtype=np.float32)
    mat[0, 0] = x
    mat[1, 1] = y
    mat[2, 2] = z
    return mat


def orthographic(
    left: Scalar,
    right: Scalar,
    bottom: Scalar,
    top: Scalar,
    near: Scalar,
    far: Scalar,
) -> np.ndarray:
    """
    Standard OpenGL orthographic projection.

    ``orthographic(0, w, h, 0, -1, 1)`` maps pixel (0, 0) to the top-left
    corner and (w, h) to the bottom-right corner of clip space.
    """
    rml, tmb, fmn = right - left, top - bottom, far - near
    if rml == 0 or tmb == 0 or fmn == 0:
        raise ValueError(
            f"Degenerate orthographic volume: {left, right, bottom, top, near, far}"
        )

    mat = np.zeros((4, 4), dtype=np.float32)
    mat[0, 0] = 2.0 / rml
    mat[1, 1] = 2.0 / tmb
    mat[2, 2] = -2.0 / fmn
    mat[0, 3] = -(right + left) / rml
    mat[1, 3] = -(top + bottom) / tmb
    mat[2, 3] = -(far + near) / fmn
    mat[3, 3] = 1.0
    return mat


def compose(*matrices: np.ndarray) -> np.ndarray:
    """Multiply matrices left to right: ``compose(A, B, C) == A @ B @ C``."""
    result = np.eye(4, dtype=np.float32)
    for mat in matrices:
        result = result @ mat
    return result.astype(np.float32)
