import struct
from pathlib import Path

import numpy as np
import pytest

from babo.graphics.errors import GlError, ShaderCompileError, ShaderLinkError, UniformNotFound
from babo.graphics.gl import GL_INVALID_OPERATION
from babo.graphics.shader import (
    Shader,
    ShaderKind,
    compile_shader,
    compile_shader_from_file,
    link_program,
)
from babo.math import translation
from tests.conftest import FLAT_FRAGMENT, NOOP_VERTEX

BROKEN_SOURCE = "#version 330 core\nvoid mian( {"

UV_FRAGMENT = """
#version 330 core
in vec2 v_uv;
out vec4 f_color;
void main() {
    f_color = vec4(v_uv, 0.0, 1.0);
}
"""


@pytest.fixture
def program(ctx):
    prog = link_program(
        ctx,
        [
            compile_shader(ctx, ShaderKind.VERTEX, NOOP_VERTEX),
            compile_shader(ctx, ShaderKind.FRAGMENT, FLAT_FRAGMENT),
        ],
    )
    prog.use()
    return prog


@pytest.mark.parametrize("kind", [ShaderKind.VERTEX, ShaderKind.FRAGMENT])
def test_invalid_source_reports_compiler_log(ctx, kind):
    with pytest.raises(ShaderCompileError) as info:
        compile_shader(ctx, kind, BROKEN_SOURCE)

    err = info.value
    assert err.log
    assert "syntax error" in err.log
    assert "GLSL Compiler failed" not in err.log
    assert err.kind is kind


def test_fragment_stage_compiles_on_its_own(ctx, gl):
    # The probe vertex stage has no v_uv output; that is a link problem,
    # not a compile problem.
    shader = compile_shader(ctx, ShaderKind.FRAGMENT, UV_FRAGMENT)

    assert shader.kind is ShaderKind.FRAGMENT
    assert shader.source == UV_FRAGMENT


def test_probe_programs_are_released(ctx, gl):
    compile_shader(ctx, ShaderKind.VERTEX, NOOP_VERTEX)
    compile_shader(ctx, ShaderKind.FRAGMENT, FLAT_FRAGMENT)

    assert gl.programs
    assert all(p.released for p in gl.programs)


def test_link_valid_stages(program, gl):
    assert program.glo == gl.programs[-1].glo
    assert not gl.programs[-1].released

    program.set_vec4("color", (1.0, 0.5, 0.25, 1.0))

    written = gl.programs[-1]["color"].last
    assert struct.unpack("4f", written) == (1.0, 0.5, 0.25, 1.0)


def test_link_mismatched_stages(ctx):
    vertex = compile_shader(ctx, ShaderKind.VERTEX, NOOP_VERTEX)
    fragment = compile_shader(ctx, ShaderKind.FRAGMENT, UV_FRAGMENT)

    with pytest.raises(ShaderLinkError) as info:
        link_program(ctx, [vertex, fragment])

    assert "v_uv" in info.value.log
    assert "GLSL Linker failed" not in info.value.log


def test_link_reports_stage_that_fails_to_compile(ctx):
    vertex = compile_shader(ctx, ShaderKind.VERTEX, NOOP_VERTEX)
    broken = Shader(ShaderKind.FRAGMENT, BROKEN_SOURCE, path=Path("shaders/broken.frag"))

    with pytest.raises(ShaderCompileError) as info:
        link_program(ctx, [vertex, broken])

    err = info.value
    assert err.kind is ShaderKind.FRAGMENT
    assert err.path == Path("shaders/broken.frag")
    assert "syntax error" in err.log
    assert "fragment_shader" not in err.log


def test_fragment_compiles_when_driver_rejects_stand_in_vertex_stage(ctx, gl):
    gl.reject_stage = "vertex_shader"

    shader = compile_shader(ctx, ShaderKind.FRAGMENT, FLAT_FRAGMENT)

    assert shader.kind is ShaderKind.FRAGMENT
    assert shader.source == FLAT_FRAGMENT
    assert gl.programs == []


def test_link_needs_one_vertex_stage(ctx):
    fragment = compile_shader(ctx, ShaderKind.FRAGMENT, FLAT_FRAGMENT)

    with pytest.raises(ValueError):
        link_program(ctx, [fragment])


def test_compile_from_file_records_path(ctx, tmp_path):
    f = tmp_path / "noop.vert"
    f.write_text(NOOP_VERTEX)

    shader = compile_shader_from_file(ctx, ShaderKind.VERTEX, f)

    assert shader.path == f
    assert shader.source == NOOP_VERTEX


def test_compile_from_missing_file(ctx, tmp_path):
    with pytest.raises(ShaderCompileError) as info:
        compile_shader_from_file(ctx, ShaderKind.VERTEX, tmp_path / "nope.vert")

    assert info.value.path == tmp_path / "nope.vert"


def test_missing_uniform(program):
    with pytest.raises(UniformNotFound) as info:
        program.set_float("does_not_exist", 1.0)

    assert info.value.name == "does_not_exist"


def test_attribute_is_not_a_uniform(program):
    with pytest.raises(UniformNotFound):
        program.set_vec4("in_position", (0.0, 0.0, 0.0, 0.0))


def test_typed_setters(program, gl):
    program.set_float("intensity", 0.5)
    program.set_int("mode", 3)
    program.set_vec3("tint", (1.0, 2.0, 3.0))

    members = gl.programs[-1]
    assert struct.unpack("f", members["intensity"].last) == (0.5,)
    assert struct.unpack("i", members["mode"].last) == (3,)
    assert struct.unpack("3f", members["tint"].last) == (1.0, 2.0, 3.0)


def test_mat4_is_uploaded_column_major(program, gl):
    program.set_mat4("transform", translation(1.0, 2.0, 3.0))

    floats = struct.unpack("16f", gl.programs[-1]["transform"].last)
    # Translation is the fourth column.
    assert floats[12:15] == (1.0, 2.0, 3.0)
    assert np.allclose(floats[:12], [1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0])


def test_type_mismatch_surfaces_gl_error(program):
    with pytest.raises(GlError) as info:
        program.set_float("color", 1.0)

    assert info.value.code == GL_INVALID_OPERATION
    assert info.value.method == "Uniform1f"


def test_uniform_lookup_is_cached(program, gl):
    program.set_float("intensity", 1.0)
    program.set_float("intensity", 2.0)
    location = program.uniform_location("intensity")

    assert gl.programs[-1].get_calls.count("intensity") == 1
    assert location == gl.programs[-1]["intensity"].location


def test_use_marks_program_current(ctx, program):
    assert ctx.current_program is program


def test_release(ctx, program, gl):
    program.release()
    program.release()

    assert gl.programs[-1].released
    assert ctx.current_program is None
    with pytest.raises(RuntimeError):
        program.set_float("intensity", 1.0)
