# babo/graphics/utils/uniforms.py
import struct
from typing import Sequence

import numpy as np

# Plain (non-UBO) uniform layouts, as glUniform* expects them:
# float / int = 4 bytes, vec3 = 12 bytes, vec4 = 16 bytes,
# mat4 = 64 bytes, column-major.


def pack_float(val: float) -> bytes:
    return struct.pack("f", val)


def pack_int(val: int) -> bytes:
    return struct.pack("i", val)


def pack_vec3(val: Sequence[float]) -> bytes:
    x, y, z = val
    return struct.pack("3f", x, y, z)


def pack_vec4(val: Sequence[float]) -> bytes:
    x, y, z, w = val
    return struct.pack("4f", x, y, z, w)


def pack_mat4(mat: np.ndarray) -> bytes:
    """
    Packs a 4x4 column-vector matrix (translation in the last column).

    numpy stores rows contiguously, GLSL reads columns; the transpose turns
    one into the other.
    """
    mat = np.asarray(mat)
    if mat.shape != (4, 4):
        raise ValueError("Matrix must be 4x4")
    return mat.astype("f4").T.tobytes()
