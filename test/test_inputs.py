#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chocchip.constants import DEFAULT_KEYMAP
from chocchip.keypad import Keypad
from chocchip.inputs.i_null import Inputs, InputsError
from chocchip.renderers.r_null import Renderer


class TestInputs(unittest.TestCase):
    def setUp(self):
        self.renderer = Renderer()
        self.keypad = Keypad()

    def test_inputs_default_keymap(self):
        inputs = Inputs(DEFAULT_KEYMAP, self.renderer, self.keypad)
        self.assertEqual(16, len(inputs.keymap_dict))
        self.assertEqual(0x0, inputs.keymap_dict[ord("x")])
        self.assertEqual(0x1, inputs.keymap_dict[ord("1")])
        self.assertEqual(0xF, inputs.keymap_dict[ord("v")])
        self.assertFalse(inputs.process_messages())
        self.assertIsNone(self.keypad.first_key_down())

    def test_inputs_wrong_key_count(self):
        self.assertRaises(InputsError, Inputs, "1,2,3", self.renderer, self.keypad)

    def test_inputs_non_integer_key(self):
        keymap = ",".join(["a"] + [str(i) for i in range(15)])
        self.assertRaises(InputsError, Inputs, keymap, self.renderer, self.keypad)

    def test_inputs_duplicate_key(self):
        keymap = ",".join(["65"] * 2 + [str(i) for i in range(14)])
        self.assertRaises(InputsError, Inputs, keymap, self.renderer, self.keypad)

    def test_inputs_force_lowercase(self):
        keymap = ",".join([str(ord("X"))] + [str(i) for i in range(15)])
        inputs = Inputs(keymap, self.renderer, self.keypad, force_lowercase=True)
        self.assertEqual(0x0, inputs.keymap_dict[ord("x")])
        self.assertNotIn(ord("X"), inputs.keymap_dict)
