# babo/graphics/rasterizer.py
"""
Glyph rasterization collaborator.

The font renderer only needs two things from a font library: open a face at
a pixel size, and turn one character into an 8-bit coverage bitmap plus its
metrics. :class:`FreeTypeRasterizer` does this with freetype-py; anything
with the same shape can be passed to :class:`~babo.graphics.font_renderer.FontRenderer`
instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import freetype
import numpy as np

from babo.graphics.errors import FontLoadError, GlyphRasterError


@dataclass(frozen=True, slots=True)
class GlyphBitmap:
    """
    One rendered glyph.

    ``buffer`` holds ``rows`` rows of ``width`` bytes, top row first.
    ``left``/``top`` are the offsets from the pen position to the bitmap's
    top-left corner. ``advance`` is in 1/64 pixel units.
    """

    buffer: bytes
    width: int
    rows: int
    left: int
    top: int
    advance: int


class GlyphFace(Protocol):
    def rasterize(self, char: str) -> GlyphBitmap: ...


class Rasterizer(Protocol):
    def open_face(self, path: Path | str, pixel_size: int) -> GlyphFace: ...


class FreeTypeFace:
    def __init__(self, face: freetype.Face) -> None:
        self.face = face

    def rasterize(self, char: str) -> GlyphBitmap:
        try:
            self.face.load_char(char, freetype.FT_LOAD_RENDER)
        except freetype.FT_Exception as e:
            raise GlyphRasterError(char, str(e)) from e

        slot = self.face.glyph
        bitmap = slot.bitmap
        width, rows = bitmap.width, bitmap.rows

        if width and rows:
            # Rows may be padded out to the bitmap pitch.
            pixels = np.array(bitmap.buffer, dtype=np.uint8).reshape(rows, -1)
            buffer = pixels[:, :width].tobytes()
        else:
            buffer = b""

        return GlyphBitmap(
            buffer=buffer,
            width=width,
            rows=rows,
            left=slot.bitmap_left,
            top=slot.bitmap_top,
            advance=slot.advance.x,
        )


class FreeTypeRasterizer:
    def __init__(self) -> None:
        # The shared FT_Library every Face is opened against.
        self.library = freetype.get_handle()

    def open_face(self, path: Path | str, pixel_size: int) -> FreeTypeFace:
        try:
            face = freetype.Face(str(path))
            face.set_pixel_sizes(0, pixel_size)
        except freetype.FT_Exception as e:
            raise FontLoadError(path, str(e)) from e

        return FreeTypeFace(face)
