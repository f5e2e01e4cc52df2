#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chocchip.keypad import Keypad


class TestKeypad(unittest.TestCase):
    def setUp(self):
        self.keypad = Keypad()

    def test_keypad_init(self):
        self.assertEqual([False] * 16, self.keypad.key_down)
        self.assertIsNone(self.keypad.first_key_down())

    def test_keypad_press_release(self):
        self.keypad.press(0xA)
        self.assertTrue(self.keypad.is_key_down(0xA))
        self.keypad.release(0xA)
        self.assertFalse(self.keypad.is_key_down(0xA))

    def test_keypad_masks_key_number(self):
        self.keypad.press(0x1C)
        self.assertTrue(self.keypad.is_key_down(0xC))
        self.assertTrue(self.keypad.is_key_down(0xFC))

    def test_keypad_first_key_down(self):
        self.keypad.press(0x9)
        self.keypad.press(0x5)
        self.assertEqual(0x5, self.keypad.first_key_down())

    def test_keypad_set_key_release_all(self):
        self.keypad.set_key(0x3, 1)
        self.keypad.set_key(0x4, True)
        self.assertEqual(0x3, self.keypad.first_key_down())
        self.keypad.release_all()
        self.assertIsNone(self.keypad.first_key_down())
