#!/usr/bin/env python3

"""
Stack Emulator

The call stack is not part of system RAM.  There is no specified location for
it, and the stack pointer (SP) is not exposed to the running program, so it is
kept as a fixed array of 16-bit slots with its own pointer.

Running off either end of the stack is fatal.  A ROM that does so has lost
track of its return addresses, and continuing with a wrapped pointer would
only return into garbage.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class StackError(Exception):
    pass


class StackOverflowError(StackError):
    pass


class StackUnderflowError(StackError):
    pass


class Stack:
    def __init__(self, size):
        self.size = size
        self.slots = [0] * size
        self.sp = 0

    def push(self, item):
        if self.sp >= self.size:
            raise StackOverflowError("Stack overflow")

        self.slots[self.sp] = item & 0xFFFF
        self.sp += 1

    def pop(self):
        if self.sp <= 0:
            raise StackUnderflowError("Stack underflow")

        self.sp -= 1
        return self.slots[self.sp]

    def clear(self):
        for slot in range(self.size):
            self.slots[slot] = 0

        self.sp = 0

    def get_items(self):
        # For debugging
        return self.slots[:self.sp]
