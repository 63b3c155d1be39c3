# babo/graphics/settings.py
from dataclasses import dataclass
from typing import Tuple

import moderngl


@dataclass(slots=True)
class WindowSettings:
    """
    Configuration for the OS window and its OpenGL context.
    """

    width: int = 1280
    height: int = 720
    title: str = "Babo Engine: v0.0.1"
    gl_version: Tuple[int, int] = (3, 3)
    vsync: bool = True


@dataclass(slots=True)
class GraphicsSettings:
    """
    Knobs shared by the renderers through the RenderContext.
    """

    # Text is projected through a fixed screen rectangle, independent of
    # the camera used for sprites.
    text_projection_size: Tuple[float, float] = (1280.0, 720.0)

    # Glyphs rasterized eagerly when a font is loaded (basic ASCII).
    default_glyph_count: int = 128

    blend_func: Tuple[int, int] = (moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA)

    # Upper bound on error flags consumed by a single error check.
    max_error_drain: int = 16
