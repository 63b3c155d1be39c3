# babo/graphics/context.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, Optional, TypeVar

import moderngl

from babo.graphics.gl import check_errors, gl_call
from babo.graphics.settings import GraphicsSettings

if TYPE_CHECKING:
    from babo.graphics.shader import ShaderProgram
    from babo.graphics.texture import Texture

logger = logging.getLogger("babo")

T = TypeVar("T")


class RenderContext:
    """
    Wraps the moderngl context together with the binding state every draw
    call depends on.

    OpenGL keeps the current program, the texture bound to each unit, the
    current vertex array and the blend switch as global state. This object is
    the single place that state is changed from, so the renderers can rely on
    a known binding order instead of whatever the previous call left behind.
    """

    def __init__(
        self, gl: moderngl.Context, settings: Optional[GraphicsSettings] = None
    ) -> None:
        self.gl = gl
        self.settings = settings or GraphicsSettings()

        self.current_program: Optional[ShaderProgram] = None
        self.current_vertex_array: Optional[moderngl.VertexArray] = None
        self.bound_textures: Dict[int, Texture] = {}
        self.active_texture_unit = 0
        self.blend_enabled = False

    def call(self, method: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run ``func`` as the GL entry point ``method`` and check for errors."""
        return gl_call(
            self.gl,
            method,
            func,
            *args,
            limit=self.settings.max_error_drain,
            **kwargs,
        )

    def check(self, method: str) -> None:
        check_errors(self.gl, method, self.settings.max_error_drain)

    # -- Programs --
    def use_program(self, program: ShaderProgram) -> None:
        # moderngl issues glUseProgram itself before uniform writes and
        # renders; the tracked value is what callers are allowed to rely on.
        self.current_program = program

    # -- Textures --
    def bind_texture(self, texture: Texture, unit: int = 0) -> None:
        if texture.handle is None:
            raise RuntimeError("Cannot bind a released texture.")
        self.call("BindTexture", texture.handle.use, location=unit)
        self.bound_textures[unit] = texture
        self.active_texture_unit = unit

    def unbind_texture(self, unit: int = 0) -> None:
        """
        Forget the texture tracked on ``unit``. Tracker only: moderngl has no
        unbind entry point, so the GL binding stays until the next ``use()``
        on that unit. Nothing here reads the GL binding back.
        """
        self.bound_textures.pop(unit, None)

    def bound_texture(self, unit: int = 0) -> Optional[Texture]:
        return self.bound_textures.get(unit)

    # -- Vertex arrays --
    def bind_vertex_array(self, vao: moderngl.VertexArray) -> None:
        self.current_vertex_array = vao

    def unbind_vertex_array(self) -> None:
        """
        Tracker only. moderngl binds the vertex array inside ``render()``, so
        clearing it here is what stops ``draw_arrays()`` from drawing again.
        """
        self.current_vertex_array = None

    def draw_arrays(self, mode: int, count: int, first: int = 0) -> None:
        vao = self.current_vertex_array
        if vao is None:
            raise RuntimeError("draw_arrays() called with no vertex array bound.")
        self.call("DrawArrays", vao.render, mode, vertices=count, first=first)

    # -- Blending --
    def enable_blending(self) -> None:
        self.call("Enable", self.gl.enable, moderngl.BLEND)
        self.call("BlendFunc", setattr, self.gl, "blend_func", self.settings.blend_func)
        self.blend_enabled = True

    def disable_blending(self) -> None:
        self.call("Disable", self.gl.disable, moderngl.BLEND)
        self.blend_enabled = False

    @contextmanager
    def blending(self) -> Iterator[None]:
        """Alpha blending for the duration of the block; off afterwards."""
        self.enable_blending()
        try:
            yield
        finally:
            self.disable_blending()
