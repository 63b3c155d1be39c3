import pytest

from babo.graphics.context import RenderContext
from tests.fakes import CountingRasterizer, FakeContext

NOOP_VERTEX = """
#version 330 core
layout (location = 0) in vec2 in_position;
void main() {
    gl_Position = vec4(in_position, 0.0, 1.0);
}
"""

FLAT_FRAGMENT = """
#version 330 core
out vec4 f_color;
uniform vec4 color;
uniform float intensity;
uniform int mode;
uniform vec3 tint;
uniform mat4 transform;
void main() {
    f_color = color * intensity;
}
"""


@pytest.fixture
def gl():
    """A fresh recording GL context for each test."""
    return FakeContext()


@pytest.fixture
def ctx(gl):
    return RenderContext(gl)


@pytest.fixture
def rasterizer():
    return CountingRasterizer()
