#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chocchip.renderers.r_null import Renderer
from chocchip.framebuffer import Framebuffer


class TestFrameBuffer(unittest.TestCase):
    def setUp(self):
        self.renderer = Renderer()
        self.framebuffer = Framebuffer(4, 5)

    def test_framebuffer_init(self):
        fb = Framebuffer()
        self.assertEqual((64, 32), fb.get_vid_size())
        self.assertEqual(64 * 32, len(fb.view()))
        self.assertFalse(fb.dirty)

    def test_framebuffer_xor_pixel(self):
        fb = self.framebuffer
        self.assertFalse(fb.xor_pixel(0, 0))
        self.assertEqual("0100000000000000000000000000000000000000", fb.vram.mem.hex())
        self.assertFalse(fb.xor_pixel(1, 1))
        self.assertEqual("0100000000010000000000000000000000000000", fb.vram.mem.hex())
        self.assertTrue(fb.dirty)

        # Wraps round to (0, 0), which is already set
        self.assertTrue(fb.xor_pixel(4, 5))
        self.assertEqual("0000000000010000000000000000000000000000", fb.vram.mem.hex())

    def test_framebuffer_clear(self):
        fb = self.framebuffer
        fb.xor_pixel(2, 3)
        fb.dirty = False
        fb.clear()
        self.assertEqual(bytes(20), fb.view().tobytes())
        self.assertTrue(fb.dirty)

    def test_framebuffer_draw_sprite_wraps(self):
        fb = Framebuffer()
        # 0xC3 = 11000011, drawn so it straddles the right-hand edge, and the second row lands on the top line
        self.assertFalse(fb.draw_sprite(60, 31, [0xC3, 0x80]))

        for x, pixel in (60, 1), (61, 1), (62, 0), (63, 0), (0, 0), (1, 0), (2, 1), (3, 1), (4, 0):
            self.assertEqual(pixel, fb.get_pixel(x, 31))

        self.assertEqual(1, fb.get_pixel(60, 0))
        self.assertEqual(0, fb.get_pixel(61, 0))

    def test_framebuffer_draw_sprite_start_wraps(self):
        fb = Framebuffer()
        fb.draw_sprite(64 + 5, 32 + 2, [0x80])
        self.assertEqual(1, fb.get_pixel(5, 2))
        self.assertEqual(1, sum(fb.view()))

    def test_framebuffer_draw_sprite_collision_sticky(self):
        fb = Framebuffer()
        fb.draw_sprite(0, 0, [0x80])
        # First pixel collides, second doesn't.  The flag must survive the second.
        self.assertTrue(fb.draw_sprite(0, 0, [0xC0]))
        self.assertEqual(0, fb.get_pixel(0, 0))
        self.assertEqual(1, fb.get_pixel(1, 0))

    def test_framebuffer_draw_sprite_twice_restores(self):
        fb = Framebuffer()
        fb.draw_sprite(10, 10, [0x3C])
        before = fb.view().tobytes()
        sprite = [0xFF, 0x81, 0x81, 0xFF]
        self.assertTrue(fb.draw_sprite(8, 9, sprite))
        fb.draw_sprite(8, 9, sprite)
        self.assertEqual(before, fb.view().tobytes())

    def test_framebuffer_empty_sprite_not_dirty(self):
        fb = Framebuffer()
        self.assertFalse(fb.draw_sprite(0, 0, [0x00, 0x00]))
        self.assertFalse(fb.draw_sprite(0, 0, []))
        self.assertFalse(fb.dirty)

    def test_framebuffer_view_read_only(self):
        view = self.framebuffer.view()

        with self.assertRaises(TypeError):
            view[0] = 1

    def test_framebuffer_present(self):
        fb = self.framebuffer
        self.assertFalse(fb.present(self.renderer))
        self.assertEqual(0, self.renderer.draw_count)
        fb.xor_pixel(1, 2)
        self.assertTrue(fb.present(self.renderer))
        self.assertEqual(1, self.renderer.draw_count)
        self.assertFalse(fb.dirty)
        self.assertFalse(fb.present(self.renderer))
        self.assertEqual(1, self.renderer.draw_count)
