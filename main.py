import math
import sys

import pygame

from babo import configure_logging, logger
from babo.graphics import (
    Camera,
    FontRenderer,
    RenderContext,
    SpriteRenderer,
    Texture,
    UniformNotFound,
)
from babo.graphics.window import Window
from babo.types import Vector2, Vector3

WHITE = (1.0, 1.0, 1.0)
VELOCITY = Vector2(1.0, 0.4)


def main():
    configure_logging()

    window = Window()
    ctx = RenderContext(window.ctx)

    camera = Camera.from_window(window)

    sprite_renderer = SpriteRenderer(ctx)
    font_renderer = FontRenderer(ctx)

    texture = Texture.from_file(ctx, "./assets/textures/awesome.png")
    babo_texture = Texture.from_file(ctx, "./assets/textures/babo.png")
    font = font_renderer.load_font("./assets/fonts/font.ttf", 32)

    position = Vector3(0.0, 0.0, 1.0)
    rotation = 0.0

    big_boy_position = Vector3(128.0, 0.0, 1.0)
    big_boy_rotation = 0.0

    clock = pygame.time.Clock()

    while window.running():
        for event in window.events():
            if event.type == pygame.QUIT:
                window.stop()
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                window.stop()

        position = position.moved(VELOCITY)
        rotation += 0.01
        big_boy_rotation -= 0.005

        # Keep the camera on the center of the sprite.
        camera.set_position(
            position.xy
            + Vector2(float(babo_texture.width), float(babo_texture.height)).half()
        )

        window.clear(math.sin(rotation * math.pi * 2.0), 0.25, 0.25)

        sprite_renderer.draw(
            texture,
            camera.projection(),
            camera.view(),
            big_boy_position,
            Vector2(720.0, 720.0),
            big_boy_rotation,
            WHITE,
        )

        sprite_renderer.draw(
            babo_texture,
            camera.projection(),
            camera.view(),
            position,
            Vector2(float(babo_texture.width), float(babo_texture.height)),
            rotation,
            WHITE,
        )

        fps = f"FPS: {clock.get_fps():.0f}"
        window.set_title(f"{window.settings.title} | {fps}")
        try:
            font_renderer.draw(font, fps, 16.0, 48.0, 1.0, WHITE)
        except UniformNotFound as e:
            logger.warning("Skipping text overlay: %s", e)

        window.present()
        clock.tick(60)

    font.release()
    babo_texture.release()
    texture.release()
    font_renderer.release()
    sprite_renderer.release()
    window.destroy()
    sys.exit()


if __name__ == "__main__":
    main()
