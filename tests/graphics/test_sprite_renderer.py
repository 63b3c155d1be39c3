import math
import struct

import moderngl
import numpy as np
import pytest

from babo.graphics.errors import GlError
from babo.graphics.sprite_renderer import (
    QUAD_VERTICES,
    SpriteRenderer,
    sprite_model,
    sprite_transform,
)
from babo.graphics.texture import Texture
from babo.graphics.utils.uniforms import pack_mat4
from babo.math import orthographic, scaling, translation
from babo.types import Vector2, Vector3

PROJECTION = orthographic(0.0, 800.0, 600.0, 0.0, -1.0, 1.0)
IDENTITY = np.eye(4, dtype="f4")


@pytest.fixture
def renderer(ctx):
    return SpriteRenderer(ctx)


@pytest.fixture
def texture(ctx):
    return Texture.from_pixels(ctx, bytes(2 * 2 * 4), 2, 2)


def test_transform_without_rotation():
    position = Vector3(100.0, 50.0, 1.0)
    size = Vector2(64.0, 32.0)

    transform = sprite_transform(PROJECTION, IDENTITY, position, size, 0.0)

    expected = PROJECTION @ translation(100.0, 50.0, 1.0) @ scaling(64.0, 32.0, 1.0)
    assert np.allclose(transform, expected, atol=1e-6)


def test_rotation_pivots_on_sprite_center():
    position = Vector3(100.0, 50.0, 0.0)
    size = Vector2(64.0, 32.0)
    center = np.array([0.5, 0.5, 0.0, 1.0], dtype="f4")

    for angle in (0.0, 0.3, math.pi / 2, math.pi):
        moved = sprite_model(position, size, angle) @ center
        assert np.allclose(moved[:2], [132.0, 66.0], atol=1e-4)


def test_unit_quad():
    floats = list(QUAD_VERTICES)

    assert len(floats) == 6 * 4
    assert all(0.0 <= f <= 1.0 for f in floats)
    # UVs match positions.
    for i in range(0, len(floats), 4):
        assert floats[i : i + 2] == floats[i + 2 : i + 4]


def test_create(renderer, gl):
    program = gl.programs[-1]
    vao = gl.vertex_arrays[-1]

    assert vao.program is program
    assert vao.content[0][1:] == ("2f 2f", "in_position", "in_uv")
    assert gl.buffers[-1].data == QUAD_VERTICES.tobytes()
    assert struct.unpack("i", program["image"].last) == (0,)


def test_draw(renderer, texture, gl, ctx):
    position = Vector3(10.0, 20.0, 0.0)
    size = Vector2(32.0, 32.0)

    renderer.draw(texture, PROJECTION, IDENTITY, position, size, 0.25, (1.0, 0.5, 0.0))

    assert len(gl.draws) == 1
    draw = gl.draws[0]
    assert draw["mode"] == moderngl.TRIANGLES
    assert draw["vertices"] == 6
    assert draw["blend"]
    assert draw["texture"] is texture.handle

    program = gl.programs[-1]
    expected = sprite_transform(PROJECTION, IDENTITY, position, size, 0.25)
    assert program["transform"].last == pack_mat4(expected)
    assert struct.unpack("3f", program["spriteColor"].last) == (1.0, 0.5, 0.0)

    # Blending and the vertex array do not outlive the call.
    assert not gl.blend_enabled
    assert ctx.current_vertex_array is None
    assert ctx.current_program is renderer.program


def test_draw_failure_propagates(renderer, texture, gl, ctx):
    gl.fail_render = True

    with pytest.raises(GlError) as info:
        renderer.draw(
            texture, PROJECTION, IDENTITY, Vector3.zero(), Vector2(1.0, 1.0), 0.0, (1.0, 1.0, 1.0)
        )

    assert info.value.method == "DrawArrays"
    assert not gl.blend_enabled
    assert ctx.current_vertex_array is None


def test_release(renderer, gl):
    renderer.release()
    renderer.release()

    assert gl.vertex_arrays[-1].released
    assert gl.buffers[-1].released
    assert gl.programs[-1].released
    with pytest.raises(RuntimeError):
        renderer.draw(None, PROJECTION, IDENTITY, Vector3.zero(), Vector2(1.0, 1.0), 0.0, (1.0, 1.0, 1.0))
