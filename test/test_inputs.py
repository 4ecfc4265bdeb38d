#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from c8kit.constants import DEFAULT_KEYMAP
from c8kit.inputs.i_null import Inputs, InputsError
from c8kit.renderers.r_null import Renderer


class TestInputs(unittest.TestCase):
    def setUp(self):
        self.inputs = Inputs(DEFAULT_KEYMAP, Renderer())

    def test_inputs_keymap(self):
        self.assertEqual(0x0, self.inputs.keymap_dict[120])  # 'x'
        self.assertEqual(0xF, self.inputs.keymap_dict[118])  # 'v'

    def test_inputs_bad_keymaps(self):
        self.assertRaises(InputsError, Inputs, "1,2,3", Renderer())
        self.assertRaises(InputsError, Inputs, ",".join(["a"] * 16), Renderer())
        self.assertRaises(InputsError, Inputs, ",".join(["1"] * 16), Renderer())

    def test_inputs_lowercase(self):
        keymap = ",".join(str(ord(char)) for char in "X1234567890ABCDE")
        self.assertEqual(0x0, Inputs(keymap, Renderer(), force_lowercase=True).keymap_dict[ord("x")])

    def test_inputs_key_state(self):
        self.assertFalse(self.inputs.is_key_down(0x3))
        self.inputs.key_down(0x3)
        self.assertTrue(self.inputs.is_key_down(0x3))
        self.assertEqual(0x3, self.inputs.last_keypress)
        self.inputs.key_up(0x3)
        self.assertFalse(self.inputs.is_key_down(0x3))
        self.assertEqual(0x3, self.inputs.last_keypress)

    def test_inputs_out_of_range_key(self):
        self.assertFalse(self.inputs.is_key_down(0x10))
        self.assertFalse(self.inputs.is_key_down(0xFF))

    def test_inputs_keypress_callback(self):
        pressed = []
        self.inputs.request_next_keypress(pressed.append)
        self.inputs.key_down(0x5)
        self.inputs.key_down(0x6)
        self.assertEqual([0x5], pressed)

    def test_inputs_keypress_callback_cancelled(self):
        pressed = []
        self.inputs.request_next_keypress(pressed.append)
        self.inputs.request_next_keypress(None)
        self.inputs.key_down(0x5)
        self.assertEqual([], pressed)

    def test_inputs_null_never_quits(self):
        self.assertFalse(self.inputs.process_messages())
