#!/usr/bin/env python3

"""
RAM Emulator

Supports reading and writing of blocks of memory or individual bytes, and
zeroing of memory blocks.

Every access is bounds-checked.  Programs can push the index register past
the top of memory, and this must be reported rather than silently wrapping
round to the font area.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RAMError(Exception):
    pass


class RAM:
    def __init__(self, mem_size=0):
        self.resize(mem_size)

    def resize(self, mem_size):
        self.mem = memoryview(bytearray(mem_size))
        self.mem_top = mem_size - 1
        self.mem_size = mem_size

    def read(self, location):
        self.check_overflow(location)
        return self.mem[location]

    def read_block(self, location, size=1):
        self.check_overflow(location)

        if size > 1:
            self.check_overflow(location + size - 1)

        return self.mem[location:location + size]

    def write(self, location, byte):
        self.check_overflow(location)
        self.mem[location] = byte

    def write_block(self, location, block):
        block_top = location + len(block)
        self.check_overflow(location)
        self.check_overflow(block_top - 1)
        self.mem[location:block_top] = block

    def check_overflow(self, location):
        if location < 0 or location > self.mem_top:
            raise RAMError("Memory access out of range at 0x{:04x}".format(location))

    def zero_block(self, offset, size):
        if size <= 0:
            return

        block_top = offset + size
        self.check_overflow(offset)
        self.check_overflow(block_top - 1)
        self.mem[offset:block_top] = bytes(size)

    def clear(self):
        self.zero_block(0, self.mem_size)
