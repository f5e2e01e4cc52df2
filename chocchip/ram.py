#!/usr/bin/env python3

"""
RAM Emulator

Supports reading and writing of blocks of memory or individual bytes, plus
zeroing of the whole bank.

CHIP-8 has a flat 4K address space.  Writes are bounds-checked, so a ROM that is
too big, or a store that runs off the end, is reported rather than quietly
corrupting host memory.  The CPU is responsible for wrapping addresses it
derives from registers before calling in here.
"""

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import MEM_SIZE


class RAMError(Exception):
    pass


class OutOfBoundsError(RAMError):
    pass


class RAM:
    def __init__(self, mem_size=MEM_SIZE):
        self.mem = memoryview(bytearray(mem_size))
        self.mem_top = mem_size - 1
        self.mem_size = mem_size

    def read(self, location):
        return self.mem[location]

    def read_block(self, location, size=1):
        return self.mem[location:location + size]

    def write(self, location, byte):
        self.check_overflow(location)
        self.mem[location] = byte

    def write_block(self, location, block):
        block_size = len(block)

        if not block_size:
            return

        block_top = location + block_size
        self.check_overflow(block_top - 1)
        self.mem[location:block_top] = block

    def check_overflow(self, location):
        if location > self.mem_top or location < 0:
            raise OutOfBoundsError(
                "Memory overflow at address 0x{:04x} (top of memory is 0x{:03x})".format(location, self.mem_top)
            )

    def clear(self):
        self.mem[:] = bytes(self.mem_size)
