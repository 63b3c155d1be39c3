# babo/graphics/sprite_renderer.py
from __future__ import annotations

import array
from typing import Any, Optional

import moderngl
import numpy as np

from babo.graphics.context import RenderContext
from babo.graphics.shader import ShaderKind, ShaderProgram, compile_shader, link_program
from babo.graphics.shaders import SPRITE_FRAGMENT, SPRITE_VERTEX
from babo.graphics.texture import Texture
from babo.math import compose, rotation_z, scaling, translation
from babo.types import Color, Scalar, Vector2, Vector3

# Unit quad as two triangles: x, y, u, v per vertex.
QUAD_VERTICES = array.array(
    "f",
    [
        0.0, 1.0, 0.0, 1.0,
        1.0, 0.0, 1.0, 0.0,
        0.0, 0.0, 0.0, 0.0,
        0.0, 1.0, 0.0, 1.0,
        1.0, 1.0, 1.0, 1.0,
        1.0, 0.0, 1.0, 0.0,
    ],
)  # fmt: skip

QUAD_VERTEX_COUNT = 6


def sprite_model(position: Vector3, size: Vector2, rotation: Scalar) -> np.ndarray:
    """
    Model matrix for a sprite: scale the unit quad to ``size``, rotate it
    about its own center, then move its top-left corner to ``position``.
    """
    pivot = size.half()

    return compose(
        translation(position.x, position.y, position.z),
        translation(pivot.x, pivot.y),
        rotation_z(rotation),
        translation(-pivot.x, -pivot.y),
        scaling(size.x, size.y, 1.0),
    )


def sprite_transform(
    projection: np.ndarray,
    view: np.ndarray,
    position: Vector3,
    size: Vector2,
    rotation: Scalar,
) -> np.ndarray:
    """Final ``projection . view . model`` matrix uploaded for one sprite."""
    return compose(projection, view, sprite_model(position, size, rotation))


class SpriteRenderer:
    """
    Draws one textured, tinted quad per call.

    Owns the sprite program and a static unit-quad buffer; nothing else is
    carried between draws.
    """

    def __init__(self, ctx: RenderContext) -> None:
        self._ctx = ctx
        self.program: Optional[ShaderProgram] = None
        self.vbo: Optional[moderngl.Buffer] = None
        self.vao: Optional[moderngl.VertexArray] = None

        try:
            self.program = link_program(
                ctx,
                [
                    compile_shader(ctx, ShaderKind.VERTEX, SPRITE_VERTEX),
                    compile_shader(ctx, ShaderKind.FRAGMENT, SPRITE_FRAGMENT),
                ],
                label="sprite",
            )

            self.vbo = ctx.call("BufferData", ctx.gl.buffer, QUAD_VERTICES.tobytes())
            self.vao = ctx.call(
                "VertexAttribPointer",
                ctx.gl.vertex_array,
                self.program.handle,
                [(self.vbo, "2f 2f", "in_position", "in_uv")],
            )

            self.program.use()
            self.program.set_int("image", 0)
        except Exception:
            self.release()
            raise

    def draw(
        self,
        texture: Texture,
        projection: np.ndarray,
        view: np.ndarray,
        position: Vector3,
        size: Vector2,
        rotation: Scalar,
        color: Color,
    ) -> None:
        """
        Draw ``texture`` stretched over ``size`` pixels at ``position``,
        rotated by ``rotation`` radians about the sprite's center.

        Alpha blending is on for the draw and off again afterwards.
        """
        program = self._require_program()
        transform = sprite_transform(projection, view, position, size, rotation)

        with self._ctx.blending():
            program.use()
            self._ctx.bind_vertex_array(self.vao)
            try:
                texture.bind(0)
                program.set_mat4("transform", transform)
                program.set_vec3("spriteColor", tuple(color))
                self._ctx.draw_arrays(moderngl.TRIANGLES, QUAD_VERTEX_COUNT)
            finally:
                self._ctx.unbind_vertex_array()

    def _require_program(self) -> ShaderProgram:
        if self.program is None or self.vao is None:
            raise RuntimeError("SpriteRenderer has been released.")
        return self.program

    def release(self) -> None:
        if self.vao is not None:
            self.vao.release()
            self.vao = None
        if self.vbo is not None:
            self.vbo.release()
            self.vbo = None
        if self.program is not None:
            self.program.release()
            self.program = None

    def __enter__(self) -> SpriteRenderer:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()
