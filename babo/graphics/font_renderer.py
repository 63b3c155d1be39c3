# babo/graphics/font_renderer.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import moderngl
import numpy as np

from babo.graphics.context import RenderContext
from babo.graphics.rasterizer import FreeTypeRasterizer, GlyphFace, Rasterizer
from babo.graphics.shader import ShaderKind, ShaderProgram, compile_shader, link_program
from babo.graphics.shaders import FONT_FRAGMENT, FONT_VERTEX
from babo.graphics.texture import Filter, PixelFormat, Texture, Wrap
from babo.math import orthographic
from babo.types import Color, Scalar, Vector2

logger = logging.getLogger("babo")

# One quad: 6 vertices of (x, y, u, v).
QUAD_VERTEX_COUNT = 6
QUAD_FLOATS = QUAD_VERTEX_COUNT * 4
QUAD_BYTES = QUAD_FLOATS * 4


@dataclass(slots=True)
class Character:
    """A rasterized glyph and the metrics needed to place it."""

    texture: Texture
    bearing: Vector2
    advance: int  # 1/64 pixel units


class Font:
    """
    A font face at one pixel size, plus the glyphs rasterized from it so far.

    Glyphs are rasterized on first use and kept for the lifetime of the font.
    """

    def __init__(
        self,
        ctx: RenderContext,
        face: GlyphFace,
        path: Optional[Path] = None,
        pixel_size: int = 0,
    ) -> None:
        self._ctx = ctx
        self.face = face
        self.path = path
        self.pixel_size = pixel_size
        self.glyphs: Dict[str, Character] = {}

    @property
    def glyph_count(self) -> int:
        return len(self.glyphs)

    def load_glyph(self, char: str) -> Character:
        character = self.glyphs.get(char)
        if character is not None:
            return character

        logger.debug("Glyph cache miss: %r", char)
        bitmap = self.face.rasterize(char)

        # Glyph rows are tightly packed single bytes.
        texture = Texture.from_pixels(
            self._ctx,
            bitmap.buffer,
            bitmap.width,
            bitmap.rows,
            PixelFormat.RED,
            PixelFormat.RED,
            Wrap.CLAMP_TO_EDGE,
            Wrap.CLAMP_TO_EDGE,
            Filter.LINEAR,
            Filter.LINEAR,
            alignment=1,
        )

        character = Character(
            texture=texture,
            bearing=Vector2(float(bitmap.left), float(bitmap.top)),
            advance=int(bitmap.advance),
        )
        self.glyphs[char] = character
        return character

    def load_default_glyphs(self, count: int = 128) -> None:
        for code in range(count):
            self.load_glyph(chr(code))

    def release(self) -> None:
        for character in self.glyphs.values():
            character.texture.release()
        self.glyphs.clear()

    def __enter__(self) -> Font:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()


def glyph_quad(character: Character, x: Scalar, y: Scalar, scale: Scalar) -> np.ndarray:
    """The 6 (x, y, u, v) vertices of ``character`` with its pen at (x, y)."""
    texture = character.texture

    xpos = x + character.bearing.x * scale
    ypos = y - (texture.height - character.bearing.y) * scale
    w = texture.width * scale
    h = texture.height * scale

    return np.array(
        [
            [xpos, ypos + h, 0.0, 0.0],
            [xpos, ypos, 0.0, 1.0],
            [xpos + w, ypos, 1.0, 1.0],
            [xpos, ypos + h, 0.0, 0.0],
            [xpos + w, ypos, 1.0, 1.0],
            [xpos + w, ypos + h, 1.0, 0.0],
        ],
        dtype="f4",
    )


class FontRenderer:
    """
    Draws text one glyph quad at a time.

    Owns the rasterizer, the text program and a dynamic vertex buffer that
    holds exactly one quad; every glyph overwrites it in place. Fonts loaded
    through a renderer share all three.
    """

    def __init__(
        self, ctx: RenderContext, rasterizer: Optional[Rasterizer] = None
    ) -> None:
        self._ctx = ctx
        self.rasterizer: Rasterizer = rasterizer or FreeTypeRasterizer()
        self.program: Optional[ShaderProgram] = None
        self.vbo: Optional[moderngl.Buffer] = None
        self.vao: Optional[moderngl.VertexArray] = None

        try:
            self.program = link_program(
                ctx,
                [
                    compile_shader(ctx, ShaderKind.VERTEX, FONT_VERTEX),
                    compile_shader(ctx, ShaderKind.FRAGMENT, FONT_FRAGMENT),
                ],
                label="font",
            )

            self.vbo = ctx.call(
                "BufferData", ctx.gl.buffer, reserve=QUAD_BYTES, dynamic=True
            )
            self.vao = ctx.call(
                "VertexAttribPointer",
                ctx.gl.vertex_array,
                self.program.handle,
                [(self.vbo, "4f", "vertex")],
            )

            self.program.use()
            self.program.set_int("text", 0)
        except Exception:
            self.release()
            raise

    def load_font(self, path: Path | str, pixel_size: int) -> Font:
        """
        Open ``path`` at ``pixel_size`` and rasterize the basic ASCII range.

        Any glyph that fails to rasterize fails the whole load.
        """
        path = Path(path)
        face = self.rasterizer.open_face(path, pixel_size)
        font = Font(self._ctx, face, path, pixel_size)

        try:
            font.load_default_glyphs(self._ctx.settings.default_glyph_count)
        except Exception:
            font.release()
            raise

        logger.debug(
            "Loaded font %s @ %dpx (%d glyphs)", path, pixel_size, font.glyph_count
        )
        return font

    def draw(
        self,
        font: Font,
        text: str,
        x: Scalar,
        y: Scalar,
        scale: Scalar,
        color: Color,
    ) -> Vector2:
        """
        Draw ``text`` with its pen starting at (x, y).

        Text is projected through the fixed ``text_projection_size`` screen,
        not through a camera. A newline moves the pen back to x = 0 and down
        by the newline glyph's own height.

        Returns the final pen position.
        """
        program = self._require_program()

        width, height = self._ctx.settings.text_projection_size
        program.use()
        program.set_vec3("textColor", tuple(color))
        program.set_mat4("transform", orthographic(0.0, width, height, 0.0, -1.0, 1.0))

        self._ctx.bind_vertex_array(self.vao)
        try:
            for char in text:
                character = font.load_glyph(char)
                vertices = glyph_quad(character, x, y, scale)

                self._ctx.enable_blending()
                character.texture.bind(0)
                self._ctx.call("BufferSubData", self.vbo.write, vertices.tobytes(), offset=0)
                self._ctx.draw_arrays(moderngl.TRIANGLES, QUAD_VERTEX_COUNT)

                x += (character.advance >> 6) * scale
                if char == "\n":
                    x = 0.0
                    y += character.texture.height * scale
        finally:
            self._ctx.unbind_vertex_array()
            self._ctx.unbind_texture(0)

        return Vector2(x, y)

    def _require_program(self) -> ShaderProgram:
        if self.program is None or self.vao is None or self.vbo is None:
            raise RuntimeError("FontRenderer has been released.")
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

    def __enter__(self) -> FontRenderer:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()
