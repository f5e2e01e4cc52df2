#!/usr/bin/env python3

"""
Null Input Plugin

Serves as a base class for other Input plugins.  Can be used on its own if zero
input functionality is required, in which case every key stays up.

Plugins translate host keys into the 16 hex keys using the keymap, and write the
result into the shared Keypad.  The keymap is 16 comma-separated decimals, one
per hex key from 0 to F.
"""

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from ..constants import NUM_KEYS


class InputsError(Exception):
    pass


class Inputs:
    def __init__(self, keymap, renderer, keypad, force_lowercase=False):
        self.keymap_dict = {}
        self.renderer = renderer
        self.keypad = keypad
        keymap_split = keymap.split(",")

        if len(keymap_split) != NUM_KEYS:
            raise InputsError("Incorrect number of keys defined -- 16 required.  Use commas to split numbers")

        for key_num, key_defined in enumerate(keymap_split):
            try:
                key_defined_ord = int(key_defined)
            except ValueError:
                raise InputsError("Defined keys are not all integer values") from None

            if force_lowercase:
                # If we are working with characters rather than keyscan codes, we should convert to lowercase
                key_defined_ord = ord(chr(key_defined_ord).lower())

            if key_defined_ord in self.keymap_dict:
                raise InputsError("Duplicate keys defined")

            self.keymap_dict[key_defined_ord] = key_num

    def process_messages(self):
        return False  # Don't exit the program

    def shutdown(self):
        pass
