# babo/graphics/gl.py
"""
Checked graphics calls.

Every GL-touching operation in the package runs through :func:`gl_call`, which
invokes the call and then inspects the context's error state. moderngl exposes
``glGetError`` as the human-readable ``Context.error`` property; the names it
returns are translated back to numeric codes here.

GL error flags are sticky: a query reports whatever has accumulated since the
previous query, not only the result of the call that was just made. The error
check therefore drains every pending flag and reports the first one.
"""

import logging
from typing import Any, Callable, Dict, TypeVar

import moderngl

from babo.graphics.errors import GlError

logger = logging.getLogger("babo")

T = TypeVar("T")

GL_NO_ERROR = 0x0000
GL_INVALID_ENUM = 0x0500
GL_INVALID_VALUE = 0x0501
GL_INVALID_OPERATION = 0x0502
GL_STACK_OVERFLOW = 0x0503
GL_STACK_UNDERFLOW = 0x0504
GL_OUT_OF_MEMORY = 0x0505
GL_INVALID_FRAMEBUFFER_OPERATION = 0x0506

DEFAULT_MAX_DRAIN = 16

ERROR_CODES: Dict[str, int] = {
    "GL_NO_ERROR": GL_NO_ERROR,
    "GL_INVALID_ENUM": GL_INVALID_ENUM,
    "GL_INVALID_VALUE": GL_INVALID_VALUE,
    "GL_INVALID_OPERATION": GL_INVALID_OPERATION,
    "GL_STACK_OVERFLOW": GL_STACK_OVERFLOW,
    "GL_STACK_UNDERFLOW": GL_STACK_UNDERFLOW,
    "GL_OUT_OF_MEMORY": GL_OUT_OF_MEMORY,
    "GL_INVALID_FRAMEBUFFER_OPERATION": GL_INVALID_FRAMEBUFFER_OPERATION,
}

ERROR_REASONS: Dict[int, str] = {
    GL_INVALID_ENUM: "Invalid enum",
    GL_INVALID_VALUE: "Invalid value",
    GL_INVALID_OPERATION: "Invalid operation",
    GL_INVALID_FRAMEBUFFER_OPERATION: "Invalid framebuffer operation",
    GL_OUT_OF_MEMORY: "Out of memory",
}

UNKNOWN_REASON = "Unknown error"


def error_reason(code: int) -> str:
    """Human-readable reason for a GL error code."""
    return ERROR_REASONS.get(code, UNKNOWN_REASON)


def error_code(name: str) -> int:
    """Numeric code for an error name as reported by ``Context.error``."""
    if name.startswith("0x"):
        return int(name, 16)
    return ERROR_CODES.get(name, -1)


def drain_errors(ctx: moderngl.Context, limit: int = DEFAULT_MAX_DRAIN) -> int:
    """
    Consume every pending GL error flag.

    Returns the first pending code, or ``GL_NO_ERROR``. Additional flags are
    logged and discarded. ``limit`` bounds the loop for contexts that keep
    reporting the same error (e.g. a lost context).
    """
    first = GL_NO_ERROR

    for _ in range(limit):
        code = error_code(ctx.error)
        if code == GL_NO_ERROR:
            break

        if first == GL_NO_ERROR:
            first = code
        else:
            logger.debug(
                "Discarding additional GL error %#06x (%s)", code, error_reason(code)
            )

    return first


def gl_call(
    ctx: moderngl.Context,
    method: str,
    func: Callable[..., T],
    *args: Any,
    limit: int = DEFAULT_MAX_DRAIN,
    **kwargs: Any,
) -> T:
    """
    Invoke ``func(*args, **kwargs)`` and check the GL error state.

    :param ctx: The context whose error state is queried.
    :param method: Name of the GL entry point the call stands for; reported
        in the raised :class:`GlError`.
    :raises GlError: If the call left an error flag set, or moderngl refused
        the call.
    """
    try:
        result = func(*args, **kwargs)
    except moderngl.Error as exc:
        code = drain_errors(ctx, limit)
        raise GlError(method, code, error_reason(code), detail=str(exc)) from exc

    code = drain_errors(ctx, limit)
    if code != GL_NO_ERROR:
        raise GlError(method, code, error_reason(code))

    return result


def check_errors(
    ctx: moderngl.Context, method: str, limit: int = DEFAULT_MAX_DRAIN
) -> None:
    """Raise for any error left pending by code outside :func:`gl_call`."""
    code = drain_errors(ctx, limit)
    if code != GL_NO_ERROR:
        raise GlError(method, code, error_reason(code))
