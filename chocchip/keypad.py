#!/usr/bin/env python3

"""
Keypad State

The original machine has a 16-key hexadecimal keypad.  The Input plugins own
the host side (polling PyGame events, reading the terminal) and write the
up/down state of each key in here.  The CPU only reads it, apart from the
optional key release quirk.

Key numbers coming from registers are masked down to 0-F, as a register can hold
anything up to 0xFF and the original hardware only decoded the low nibble.
"""

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import NUM_KEYS


class Keypad:
    def __init__(self):
        self.key_down = [False] * NUM_KEYS

    def press(self, key):
        self.key_down[key & 0xF] = True

    def release(self, key):
        self.key_down[key & 0xF] = False

    def set_key(self, key, down):
        self.key_down[key & 0xF] = bool(down)

    def release_all(self):
        for key in range(NUM_KEYS):
            self.key_down[key] = False

    def is_key_down(self, key):
        return self.key_down[key & 0xF]

    def first_key_down(self):
        # Lowest numbered key held, or None
        for key, down in enumerate(self.key_down):
            if down:
                return key

        return None
