#!/usr/bin/env python3

"""
PyGame Renderer Plugin

Draws the framebuffer onto an SDL window surface via PyGame.  The surface is
allocated at the emulated screen size, and then the contents are stretched
(using 'Nearest Neighbour' translation) to fit the window, so each emulated
pixel becomes a filled block.  This means we don't have to draw the same pixel
multiple times.
"""

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .r_null import RendererError, Renderer as RendererBase
from ..constants import APP_NAME

BACKGROUND_COLOUR = 0x222222
FOREGROUND_COLOUR = 0xDDDDDD


class Renderer(RendererBase):
    def __init__(self, scale=None, **kwargs):
        if scale is None:
            scale = 640  # Default window width if not supplied, or set to default

        if scale < 64:
            raise RendererError("Window width must be at least 64 pixels.")

        pygame.display.init()
        self.set_title(APP_NAME)
        self.rgb_buffer = None
        self.scaled_size = (scale, scale // 2)
        self.display_surface = pygame.display.set_mode(self.scaled_size)

        # Split compound RGB values for faster byte-based lookup later
        self.rgb_map = [
            bytes((colour >> 16, (colour >> 8) & 0xFF, colour & 0xFF))
            for colour in (BACKGROUND_COLOUR, FOREGROUND_COLOUR)
        ]

        super().__init__(scale, **kwargs)

    def set_resolution(self, width, height):
        # Offscreen 24-bit buffer, filled with the background colour
        self.rgb_buffer = bytearray(self.rgb_map[0] * (width * height)) if width and height else None
        super().set_resolution(width, height)

    def draw(self, pixels):
        if self.rgb_buffer is None:
            return

        # Update RGB buffer in-place to minimise allocations and PyGame calls
        rgb_buffer = self.rgb_buffer
        rgb_map = self.rgb_map

        for location, pixel in enumerate(pixels):
            rgb_location = location * 3
            rgb_buffer[rgb_location:rgb_location + 3] = rgb_map[pixel]

        # Blit the bytearray straight to the surface, then stretch it over the window
        render_surface = pygame.image.frombuffer(bytes(rgb_buffer), (self.width, self.height), "RGB")
        scaled_win = pygame.transform.scale(render_surface, self.scaled_size)
        self.display_surface.blit(scaled_win, (0, 0))
        pygame.display.flip()
        super().draw(pixels)

    def set_title(self, title):
        pygame.display.set_caption(title)

    def shutdown(self):
        # PyGame can segfault if display.quit is called via __del__
        pygame.display.quit()
        super().shutdown()
