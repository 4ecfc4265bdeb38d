#!/usr/bin/env python3

"""
Null Input Plugin

Serves as a base class for other Input plugins.  Can be used on its own if zero
input functionality is required.

Holds the state every plugin shares with the CPU: the pressed/released flag for
each of the 16 keys, the most recently pressed key, and a single-shot callback
for the next key press (used by the 'wait for key' instruction).  Subclasses
only need to translate host events into key_down() and key_up() calls from
within process_messages(), which always runs on the same thread as the CPU.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from ..constants import KEY_COUNT


class InputsError(Exception):
    pass


class Inputs:
    def __init__(self, keymap, renderer, force_lowercase=False):
        self.keymap_dict = {}
        self.renderer = renderer
        keymap_split = keymap.split(",")

        if len(keymap_split) != KEY_COUNT:
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

        self.keys = [False] * KEY_COUNT
        self.last_keypress = None
        self.keypress_callback = None

    def process_messages(self):
        return False  # Don't exit the program

    def key_down(self, key):
        self.keys[key] = True
        self.last_keypress = key

        # Single-shot, so it is dropped before being called in case it registers another
        callback = self.keypress_callback
        self.keypress_callback = None

        if callback is not None:
            callback(key)

    def key_up(self, key):
        self.keys[key] = False

    def is_key_down(self, key):
        # Programs can ask about any register value, but only 16 keys exist
        if 0 <= key < KEY_COUNT:
            return self.keys[key]

        return False

    def request_next_keypress(self, callback):
        # Passing None forgets any pending request
        self.keypress_callback = callback

    def shutdown(self):
        pass
