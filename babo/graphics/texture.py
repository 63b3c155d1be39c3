# babo/graphics/texture.py
from __future__ import annotations

import logging
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any, Optional

import moderngl
from PIL import Image, UnidentifiedImageError

from babo.graphics.context import RenderContext
from babo.graphics.errors import TextureDecodeError

logger = logging.getLogger("babo")


class PixelFormat(Enum):
    """Pixel layout: component count and the sized GL internal format."""

    RED = (1, 0x8229)  # GL_R8
    RG = (2, 0x822B)  # GL_RG8
    RGB = (3, 0x8051)  # GL_RGB8
    RGBA = (4, 0x8058)  # GL_RGBA8

    @property
    def components(self) -> int:
        return self.value[0]

    @property
    def internal_format(self) -> int:
        return self.value[1]


class Wrap(Enum):
    REPEAT = "repeat"
    CLAMP_TO_EDGE = "clamp_to_edge"


class Filter(IntEnum):
    NEAREST = moderngl.NEAREST
    LINEAR = moderngl.LINEAR
    NEAREST_MIPMAP_NEAREST = moderngl.NEAREST_MIPMAP_NEAREST
    LINEAR_MIPMAP_NEAREST = moderngl.LINEAR_MIPMAP_NEAREST
    NEAREST_MIPMAP_LINEAR = moderngl.NEAREST_MIPMAP_LINEAR
    LINEAR_MIPMAP_LINEAR = moderngl.LINEAR_MIPMAP_LINEAR


_MAG_FILTERS = (Filter.NEAREST, Filter.LINEAR)


class Texture:
    """
    Wrapper around moderngl.Texture.

    Width and height are fixed at creation. Wrap and filter state can be
    changed afterwards; every mutator binds this texture to the active unit
    and leaves it bound.
    """

    def __init__(
        self,
        ctx: RenderContext,
        handle: moderngl.Texture,
        width: int,
        height: int,
        internal_format: PixelFormat,
        external_format: PixelFormat,
        wrap_s: Wrap,
        wrap_t: Wrap,
        filter_min: Filter,
        filter_max: Filter,
    ) -> None:
        self._ctx = ctx
        self.handle: Optional[moderngl.Texture] = handle
        self._width = width
        self._height = height
        self.internal_format = internal_format
        self.external_format = external_format
        self.wrap_s = wrap_s
        self.wrap_t = wrap_t
        self.filter_min = filter_min
        self.filter_max = filter_max

    # -- Construction --
    @classmethod
    def from_pixels(
        cls,
        ctx: RenderContext,
        data: Optional[bytes],
        width: int,
        height: int,
        internal_format: PixelFormat = PixelFormat.RGBA,
        external_format: PixelFormat = PixelFormat.RGBA,
        wrap_s: Wrap = Wrap.REPEAT,
        wrap_t: Wrap = Wrap.REPEAT,
        filter_min: Filter = Filter.LINEAR,
        filter_max: Filter = Filter.LINEAR,
        alignment: int = 4,
    ) -> Texture:
        """
        Allocate a texture and upload ``data`` (rows top to bottom).

        ``data=None`` allocates storage without contents. An image with a zero
        dimension keeps its logical size but is backed by blank storage one
        texel deep in that dimension, since GL storage cannot be empty.
        """
        if width < 0 or height < 0:
            raise ValueError(f"Invalid texture size {width}x{height}")
        if filter_max not in _MAG_FILTERS:
            raise ValueError(f"{filter_max.name} is not a magnification filter")

        components = external_format.components
        storage = (max(width, 1), max(height, 1))
        if data is not None and (width == 0 or height == 0):
            # Blank fill for the whole backing storage, rows padded to alignment.
            row = storage[0] * components
            row += -row % alignment
            data = bytes(row * storage[1])

        handle = ctx.call(
            "TexImage2D",
            ctx.gl.texture,
            storage,
            components,
            data,
            alignment=alignment,
            internal_format=internal_format.internal_format,
        )

        texture = cls(
            ctx,
            handle,
            width,
            height,
            internal_format,
            external_format,
            wrap_s,
            wrap_t,
            filter_min,
            filter_max,
        )
        texture.bind()
        texture._apply_wrap(s=True, t=True)
        texture._apply_filter()

        logger.debug(
            "Created texture %s (%dx%d, %s)", handle.glo, width, height, internal_format.name
        )
        return texture

    @classmethod
    def create_empty(
        cls,
        ctx: RenderContext,
        width: int,
        height: int,
        internal_format: PixelFormat,
        external_format: PixelFormat,
        wrap_s: Wrap,
        wrap_t: Wrap,
        filter_min: Filter,
        filter_max: Filter,
    ) -> Texture:
        """Allocate a texture with no initial pixel data."""
        return cls.from_pixels(
            ctx,
            None,
            width,
            height,
            internal_format,
            external_format,
            wrap_s,
            wrap_t,
            filter_min,
            filter_max,
        )

    @classmethod
    def from_file(cls, ctx: RenderContext, path: Path | str) -> Texture:
        """
        Decode an image into RGBA and upload it with mipmaps, repeat wrapping
        and trilinear minification.
        """
        path = Path(path)
        try:
            with Image.open(path) as img:
                converted = img.convert("RGBA")
                width, height = converted.size
                data = converted.tobytes()
        except (OSError, UnidentifiedImageError) as e:
            raise TextureDecodeError(path, str(e)) from e

        texture = cls.from_pixels(
            ctx,
            data,
            width,
            height,
            PixelFormat.RGBA,
            PixelFormat.RGBA,
            Wrap.REPEAT,
            Wrap.REPEAT,
            Filter.LINEAR_MIPMAP_LINEAR,
            Filter.LINEAR,
        )
        texture.generate_mipmaps()
        return texture

    # -- Properties --
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def glo(self) -> int:
        return self._texture.glo

    @property
    def _texture(self) -> moderngl.Texture:
        if self.handle is None:
            raise RuntimeError("Texture has been released.")
        return self.handle

    # -- State --
    def bind(self, unit: Optional[int] = None) -> None:
        """Bind to ``unit``, or to the context's active unit."""
        if unit is None:
            unit = self._ctx.active_texture_unit
        self._ctx.bind_texture(self, unit)

    def set_wrap_s(self, wrap: Wrap) -> None:
        self.wrap_s = wrap
        self.bind()
        self._apply_wrap(s=True)

    def set_wrap_t(self, wrap: Wrap) -> None:
        self.wrap_t = wrap
        self.bind()
        self._apply_wrap(t=True)

    def set_wrap(self, wrap_s: Wrap, wrap_t: Wrap) -> None:
        self.wrap_s = wrap_s
        self.wrap_t = wrap_t
        self.bind()
        self._apply_wrap(s=True, t=True)

    def set_filter_min(self, filter_min: Filter) -> None:
        self.filter_min = filter_min
        self.bind()
        self._apply_filter()

    def set_filter_max(self, filter_max: Filter) -> None:
        if filter_max not in _MAG_FILTERS:
            raise ValueError(f"{filter_max.name} is not a magnification filter")
        self.filter_max = filter_max
        self.bind()
        self._apply_filter()

    def set_filter(self, filter_min: Filter, filter_max: Filter) -> None:
        if filter_max not in _MAG_FILTERS:
            raise ValueError(f"{filter_max.name} is not a magnification filter")
        self.filter_min = filter_min
        self.filter_max = filter_max
        self.bind()
        self._apply_filter()

    def generate_mipmaps(self) -> None:
        self.bind()
        self._ctx.call("GenerateMipmap", self._texture.build_mipmaps)

    def _apply_wrap(self, s: bool = False, t: bool = False) -> None:
        texture = self._texture
        if s:
            self._ctx.call(
                "TexParameteri", setattr, texture, "repeat_x", self.wrap_s is Wrap.REPEAT
            )
        if t:
            self._ctx.call(
                "TexParameteri", setattr, texture, "repeat_y", self.wrap_t is Wrap.REPEAT
            )

    def _apply_filter(self) -> None:
        # moderngl sets min and mag filters as one pair.
        self._ctx.call(
            "TexParameteri",
            setattr,
            self._texture,
            "filter",
            (int(self.filter_min), int(self.filter_max)),
        )

    # -- Lifetime --
    def release(self) -> None:
        if self.handle is None:
            return

        for unit, bound in list(self._ctx.bound_textures.items()):
            if bound is self:
                self._ctx.unbind_texture(unit)

        self.handle.release()
        self.handle = None

    def __enter__(self) -> Texture:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()

    def __repr__(self) -> str:
        return (
            f"Texture({self._width}x{self._height}, {self.internal_format.name}, "
            f"wrap=({self.wrap_s.value}, {self.wrap_t.value}), "
            f"filter=({self.filter_min.name}, {self.filter_max.name}))"
        )
