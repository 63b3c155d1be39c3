# babo/graphics/__init__.py
from babo.graphics.camera import Camera
from babo.graphics.context import RenderContext
from babo.graphics.errors import (
    BaboError,
    FontLoadError,
    GlError,
    GlyphRasterError,
    ShaderCompileError,
    ShaderLinkError,
    TextureDecodeError,
    UniformNotFound,
)
from babo.graphics.font_renderer import Character, Font, FontRenderer
from babo.graphics.gl import gl_call
from babo.graphics.rasterizer import FreeTypeRasterizer, GlyphBitmap
from babo.graphics.settings import GraphicsSettings, WindowSettings
from babo.graphics.shader import (
    Shader,
    ShaderKind,
    ShaderProgram,
    compile_shader,
    compile_shader_from_file,
    link_program,
)
from babo.graphics.sprite_renderer import SpriteRenderer
from babo.graphics.texture import Filter, PixelFormat, Texture, Wrap

__all__ = [
    "BaboError",
    "Camera",
    "Character",
    "Filter",
    "Font",
    "FontLoadError",
    "FontRenderer",
    "FreeTypeRasterizer",
    "GlError",
    "GlyphBitmap",
    "GlyphRasterError",
    "GraphicsSettings",
    "PixelFormat",
    "RenderContext",
    "Shader",
    "ShaderCompileError",
    "ShaderKind",
    "ShaderLinkError",
    "ShaderProgram",
    "SpriteRenderer",
    "Texture",
    "TextureDecodeError",
    "UniformNotFound",
    "WindowSettings",
    "Wrap",
    "compile_shader",
    "compile_shader_from_file",
    "gl_call",
    "link_program",
]
