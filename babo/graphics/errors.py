# babo/graphics/errors.py
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from babo.graphics.shader import ShaderKind


class BaboError(Exception):
    """Base class for every error raised by the rendering layer."""


class GlError(BaboError):
    """A wrapped graphics call left the GL error state set."""

    def __init__(
        self,
        method: str,
        code: int,
        reason: str,
        detail: Optional[str] = None,
    ) -> None:
        self.method = method
        self.code = code
        self.reason = reason
        self.detail = detail

        message = f'Graphics error "{method}" (code {code}): {reason}'
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ShaderCompileError(BaboError):
    def __init__(
        self,
        log: str,
        kind: Optional[ShaderKind] = None,
        path: Optional[Path] = None,
    ) -> None:
        self.log = log
        self.kind = kind
        self.path = path

        where = kind.value if kind is not None else "shader"
        if path is not None:
            where = f"{where} ({path})"
        super().__init__(f"Failed to compile {where}:\n{log}")


class ShaderLinkError(BaboError):
    def __init__(self, log: str) -> None:
        self.log = log
        super().__init__(f"Failed to link program:\n{log}")


class UniformNotFound(BaboError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Uniform not found: {name}")


class TextureDecodeError(BaboError):
    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to decode texture {self.path}: {reason}")


class FontLoadError(BaboError):
    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to load font {self.path}: {reason}")


class GlyphRasterError(BaboError):
    def __init__(self, char: str, reason: str) -> None:
        self.char = char
        self.reason = reason
        super().__init__(f"Failed to rasterize glyph {char!r}: {reason}")
