#!/usr/bin/env python3

"""
Curses Renderer Plugin

Draws the screen in a standard Linux-style TTY Terminal, the Windows Command
Prompt, or PowerShell, using inverted spaces to represent each lit pixel.  The
top line is kept for the title and performance figures.
"""

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import curses
import _curses
from .r_null import Renderer as RendererBase


class Renderer(RendererBase):
    def __init__(self, scale=None, **kwargs):
        if scale is None:
            scale = 2  # Default horizontal stretch, as terminal characters are roughly twice as tall as they are wide

        self.pixel_char = " " * scale
        self.pad = None
        self.title = ""
        self.screen = curses.initscr()
        curses.curs_set(0)
        curses.noecho()
        curses.cbreak()
        super().__init__(scale, **kwargs)

    def set_resolution(self, width, height):
        if width and height:
            # We have to allow one extra character, presumably for the cursor, otherwise we can't write the
            # furthest bottom-right pixel.  The extra row on top holds the title.
            self.pad = curses.newpad(height + 2, width * self.scale + 1)

        super().set_resolution(width, height)

    def draw(self, pixels):
        if self.pad is None:
            return

        width = self.width
        scale = self.scale
        pixel_char = self.pixel_char

        for location, pixel in enumerate(pixels):
            y, x = divmod(location, width)
            self.pad.addstr(y + 1, x * scale, pixel_char, curses.A_REVERSE if pixel else curses.A_NORMAL)

        self._draw_title()
        screen_height, screen_width = self.screen.getmaxyx()
        self.pad.refresh(0, 0, 0, 0, screen_height - 1, screen_width - 1)
        super().draw(pixels)

    def _draw_title(self):
        line_width = self.width * self.scale
        self.pad.addstr(0, 0, self.title[:line_width].ljust(line_width), curses.A_REVERSE)

    def set_title(self, title):
        self.title = title

    def shutdown(self):
        curses.nocbreak()
        curses.echo()

        try:
            curses.curs_set(1)
        except _curses.error:
            pass

        curses.endwin()
        super().shutdown()

    # No Superclass for this Curses-specific method

    def get_curses_screen(self):
        return self.screen
