#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and are only drawn to the actual display (the host
rendering system) at 60Hz, and only when something has changed since the last
time.  Calling PyGame/Curses for every pixel touched would lower speed
substantially, as ROMs can draw thousands of sprites every second.

Unlike other computers, programs for this system cannot write directly into
video RAM.  Instead, sprites are drawn to the screen using an XOR method.  Each
cell of the buffer holds 0 or 1.

Collisions (where any pixel was set, but was unset by an XOR), are reported back
to the CPU, which places them in Vf.

The CPU is the only writer.  Renderers only ever see a read-only view of the
cells, handed over by present().
"""

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import VID_WIDTH, VID_HEIGHT
from .ram import RAM

SPRITE_WIDTH = 8


class Framebuffer:
    def __init__(self, vid_width=VID_WIDTH, vid_height=VID_HEIGHT):
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.vram = RAM(self.vid_size)
        self.dirty = False

    def clear(self):
        self.vram.clear()
        self.dirty = True

    def get_pixel(self, x, y):
        return self.vram.read((y % self.vid_height) * self.vid_width + (x % self.vid_width))

    def xor_pixel(self, x, y):
        # Flip a single pixel on, returning whether it was already on.  Coordinates always wrap.
        vram_loc = (y % self.vid_height) * self.vid_width + (x % self.vid_width)
        pixel = self.vram.read(vram_loc)
        self.vram.write(vram_loc, pixel ^ 1)
        self.dirty = True
        return pixel != 0

    def draw_sprite(self, x, y, rows):
        """
        XOR an 8-pixel wide sprite onto the screen, one byte per row, most
        significant bit on the left.  Returns True if any pixel was switched
        off.
        """
        x %= self.vid_width
        y %= self.vid_height
        collided = False

        for row, spr_data in enumerate(rows):
            if not spr_data:
                continue

            for col in range(SPRITE_WIDTH):
                if spr_data & (0x80 >> col) and self.xor_pixel(x + col, y + row):
                    # Don't stop drawing.  Set the flag, and never unset it for this sprite.
                    collided = True

        return collided

    def view(self):
        return self.vram.mem.toreadonly()

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    def present(self, renderer):
        # Hand the screen to the renderer if it changed since last time.  Returns True if a redraw happened.
        if not self.dirty:
            return False

        renderer.draw(self.view())
        self.dirty = False
        return True
