#!/usr/bin/env python3

"""
Null Renderer Plugin

This serves as a base class for other rendering plugins.

This module can be used on its own as a Renderer plugin if you only want to see
log output, or are running headless.  Without a renderer, performance data will
also not be shown.
"""

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RendererError(Exception):
    pass


class Renderer:
    def __init__(self, scale=None, **kwargs):  # pylint: disable=unused-argument
        self.scale = 1 if scale is None else scale
        self.draw_count = 0
        self.set_resolution(0, 0)

    def set_resolution(self, width, height):
        self.width = width
        self.height = height

    def draw(self, pixels):  # pylint: disable=unused-argument
        # Pixels are a read-only flat sequence of width * height cells, each 0 or 1.  Redraw all of them.
        self.draw_count += 1

    def set_title(self, title):
        pass

    def shutdown(self):
        pass
