# babo/graphics/shaders/__init__.py
"""Embedded GLSL sources for the built-in renderers."""

from pathlib import Path

_DIR = Path(__file__).parent


def _read(name: str) -> str:
    return (_DIR / name).read_text(encoding="utf-8")


SPRITE_VERTEX = _read("sprite.vert")
SPRITE_FRAGMENT = _read("sprite.frag")
FONT_VERTEX = _read("font.vert")
FONT_FRAGMENT = _read("font.frag")

__all__ = [
    "SPRITE_VERTEX",
    "SPRITE_FRAGMENT",
    "FONT_VERTEX",
    "FONT_FRAGMENT",
]
