# babo/graphics/shader.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

import moderngl
import numpy as np

from babo.graphics.context import RenderContext
from babo.graphics.errors import ShaderCompileError, ShaderLinkError, UniformNotFound
from babo.graphics.utils.uniforms import (
    pack_float,
    pack_int,
    pack_mat4,
    pack_vec3,
    pack_vec4,
)

logger = logging.getLogger("babo")

# Headers moderngl puts in front of the driver's info log.
COMPILER_FAILED = "GLSL Compiler failed"
LINKER_FAILED = "GLSL Linker failed"

# Stand-in vertex stage used to compile a fragment stage on its own.
_PROBE_VERTEX = """
#version 330 core
void main() {
    gl_Position = vec4(0.0);
}
"""


class ShaderKind(str, Enum):
    VERTEX = "vertex_shader"
    FRAGMENT = "fragment_shader"


@dataclass(frozen=True, slots=True)
class Shader:
    """
    A single compiled stage.

    moderngl only exposes stages through programs, so a Shader keeps the
    source that compiled successfully; linking hands it to the driver again.
    """

    kind: ShaderKind
    source: str
    path: Optional[Path] = None


def _info_log(error: moderngl.Error, program: bool) -> str:
    """
    Extract the driver's info log from a moderngl compile or link error.

    Compile errors carry a stage title and underline before the log; link
    errors carry only the header.
    """
    text = str(error).strip()
    header = LINKER_FAILED if program else COMPILER_FAILED

    if text.startswith(header):
        text = text[len(header) :].strip()

    if not program:
        lines = text.splitlines()
        if len(lines) >= 2 and lines[1] and set(lines[1]) == {"="}:
            text = "\n".join(lines[2:]).strip()

    return text or str(error).strip()


def _failed_stage(error: moderngl.Error) -> Optional[str]:
    lines = str(error).strip().splitlines()
    if len(lines) >= 3 and lines[0].startswith(COMPILER_FAILED):
        return lines[2].strip()
    return None


def compile_shader(
    ctx: RenderContext,
    kind: ShaderKind,
    source: str,
    path: Optional[Path] = None,
) -> Shader:
    """
    Compile one shader stage.

    :raises ShaderCompileError: With the compiler's log if the stage does not
        compile.
    """
    if kind is ShaderKind.VERTEX:
        stages = {"vertex_shader": source}
    else:
        stages = {"vertex_shader": _PROBE_VERTEX, "fragment_shader": source}

    try:
        probe = ctx.gl.program(**stages)
    except moderngl.Error as e:
        message = str(e).strip()

        # The stage compiled; only the pairing with the probe failed to link.
        if message.startswith(LINKER_FAILED):
            return Shader(kind=kind, source=source, path=path)

        if kind is ShaderKind.FRAGMENT and _failed_stage(e) == ShaderKind.VERTEX.value:
            logger.warning(
                "Probe vertex stage rejected by driver; deferring %s check to link",
                kind.value,
            )
            return Shader(kind=kind, source=source, path=path)

        raise ShaderCompileError(_info_log(e, program=False), kind, path) from e

    probe.release()
    ctx.check("CompileShader")

    return Shader(kind=kind, source=source, path=path)


def compile_shader_from_file(
    ctx: RenderContext, kind: ShaderKind, path: Path | str
) -> Shader:
    path = Path(path)
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ShaderCompileError(str(e), kind, path) from e

    return compile_shader(ctx, kind, source, path)


def link_program(
    ctx: RenderContext, shaders: Sequence[Shader], label: str = ""
) -> ShaderProgram:
    """
    Link compiled stages into a program.

    Exactly one vertex stage and at most one fragment stage are accepted.
    The shaders are not retained by the program.
    """
    vertex = [s for s in shaders if s.kind is ShaderKind.VERTEX]
    fragment = [s for s in shaders if s.kind is ShaderKind.FRAGMENT]

    if len(vertex) != 1 or len(fragment) > 1:
        raise ValueError(
            "A program needs exactly one vertex shader and at most one "
            f"fragment shader, got {len(vertex)} and {len(fragment)}."
        )

    try:
        program = ctx.gl.program(
            vertex_shader=vertex[0].source,
            fragment_shader=fragment[0].source if fragment else None,
        )
    except moderngl.Error as e:
        if str(e).strip().startswith(COMPILER_FAILED):
            stage = _failed_stage(e)
            culprit = next((s for s in shaders if s.kind.value == stage), None)
            raise ShaderCompileError(
                _info_log(e, program=False),
                culprit.kind if culprit else None,
                culprit.path if culprit else None,
            ) from e
        raise ShaderLinkError(_info_log(e, program=True)) from e

    ctx.check("LinkProgram")

    linked = ShaderProgram(ctx, program, label=label)
    logger.debug("Linked program %s (%s)", linked.glo, label or "unnamed")
    return linked


class ShaderProgram:
    """
    Owns a linked moderngl program and the uniform lookups made against it.

    Uniform lookups are cached by name for the lifetime of the program. Every
    program here is built from fixed sources, so the set of names is fixed
    too and a cached entry never goes stale.
    """

    def __init__(
        self, ctx: RenderContext, program: moderngl.Program, label: str = ""
    ) -> None:
        self._ctx = ctx
        self.handle: Optional[moderngl.Program] = program
        self.label = label
        self._uniforms: Dict[str, Any] = {}

    @property
    def glo(self) -> int:
        return self._program.glo

    @property
    def _program(self) -> moderngl.Program:
        if self.handle is None:
            raise RuntimeError(f"Program {self.label!r} has been released.")
        return self.handle

    def use(self) -> None:
        self._ctx.use_program(self)

    def uniform_location(self, name: str) -> int:
        return self._uniform(name).location

    def set_float(self, name: str, value: float) -> None:
        self._write(name, "Uniform1f", pack_float(value))

    def set_int(self, name: str, value: int) -> None:
        self._write(name, "Uniform1i", pack_int(value))

    def set_vec3(self, name: str, value: Tuple[float, float, float]) -> None:
        self._write(name, "Uniform3f", pack_vec3(value))

    def set_vec4(self, name: str, value: Tuple[float, float, float, float]) -> None:
        self._write(name, "Uniform4f", pack_vec4(value))

    def set_mat4(self, name: str, value: np.ndarray) -> None:
        self._write(name, "UniformMatrix4fv", pack_mat4(value))

    def _uniform(self, name: str) -> Any:
        uniform = self._uniforms.get(name)
        if uniform is not None:
            return uniform

        member = self._program.get(name, None)
        if member is None or not _is_uniform(member):
            raise UniformNotFound(name)

        self._uniforms[name] = member
        return member

    def _write(self, name: str, method: str, data: bytes) -> None:
        uniform = self._uniform(name)
        self._ctx.call(method, uniform.write, data)

    def release(self) -> None:
        if self.handle is None:
            return

        logger.debug("Releasing program %s (%s)", self.handle.glo, self.label)
        self.handle.release()
        self.handle = None
        self._uniforms.clear()

        if self._ctx.current_program is self:
            self._ctx.current_program = None

    def __enter__(self) -> ShaderProgram:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()


def _is_uniform(member: Any) -> bool:
    # Attributes have a location but no write(); uniform blocks have neither.
    return hasattr(member, "write") and hasattr(member, "location")
