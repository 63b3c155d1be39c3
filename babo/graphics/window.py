# babo/graphics/window.py
import logging
from typing import List, Optional, Tuple

import moderngl
import pygame

from babo.graphics.settings import WindowSettings

logger = logging.getLogger("babo")


class Window:
    """
    Manages the OS Window and OpenGL Context.

    The window owns the swap cycle; renderers only draw into the current
    back buffer between ``clear()`` and ``present()``.
    """

    def __init__(self, settings: Optional[WindowSettings] = None):
        self.settings = settings or WindowSettings()

        if not pygame.get_init():
            pygame.init()

        major, minor = self.settings.gl_version
        pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MAJOR_VERSION, major)
        pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MINOR_VERSION, minor)
        pygame.display.gl_set_attribute(
            pygame.GL_CONTEXT_PROFILE_MASK, pygame.GL_CONTEXT_PROFILE_CORE
        )
        pygame.display.gl_set_attribute(pygame.GL_DOUBLEBUFFER, 1)

        self._screen = pygame.display.set_mode(
            (self.settings.width, self.settings.height),
            pygame.OPENGL | pygame.DOUBLEBUF,
            vsync=int(self.settings.vsync),
        )
        pygame.display.set_caption(self.settings.title)

        self.ctx = moderngl.create_context()
        self._running = True

        logger.info(
            "OpenGL context created: %s (%s)",
            self.ctx.version_code,
            self.ctx.info.get("GL_RENDERER", "unknown"),
        )

    @property
    def size(self) -> Tuple[int, int]:
        return self._screen.get_size()

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]

    def set_title(self, title: str) -> None:
        pygame.display.set_caption(title)

    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        self._running = False

    def events(self) -> List[pygame.event.Event]:
        """Every event queued since the last call."""
        return pygame.event.get()

    def clear(self, r: float, g: float, b: float) -> None:
        self.ctx.clear(r, g, b)

    def present(self) -> None:
        pygame.display.flip()

    def destroy(self) -> None:
        self.ctx.release()
        pygame.quit()
