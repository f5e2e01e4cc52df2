#!/usr/bin/env python3

"""
Stack Emulator

It is unnecessary to include the CPU call stack as part of system RAM, because
there is no specified location for it, and no program can read the stack
pointer.  A list is enough to emulate it, with the stack pointer being the
number of items held.

Going past 16 levels, or returning with nothing on the stack, means the ROM (or
the emulator) is broken, so both are reported as errors rather than wrapping.
"""

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import STACK_LEVELS


class StackError(Exception):
    pass


class Stack:
    def __init__(self, size=STACK_LEVELS):
        self.items = []
        self.size = size

    @property
    def pointer(self):
        return len(self.items)

    def push(self, item):
        # Fetching the stack size with 'len' should be immediate, so no slow loop
        if len(self.items) >= self.size:
            raise StackError("Stack overflow ({} levels in use)".format(self.size))

        self.items.append(item)

    def pop(self):
        try:
            return self.items.pop()
        except IndexError:
            raise StackError("Stack underflow") from None

    def clear(self):
        self.items.clear()

    def get_items(self):
        # For debugging
        return self.items
