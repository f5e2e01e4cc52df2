#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  The host
calls cycle() to run exactly one instruction, and tick_timers() at 60Hz to
decay the delay and sound timers.  The two are kept apart, so the instruction
rate can be anything the host likes without games running at the wrong speed.

Every instruction is 2 bytes.  The program counter is moved on straight after
the fetch, so jumps simply overwrite it, and skips add another 2.
"""

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from random import Random
from .constants import (
    APP_INTRO, ADDR_MASK, FONT_GLYPH_SIZE, FONT_START, FONTSET, NUM_KEYS, NUM_REGISTERS, ROM_START
)
from .debugger import Debugger
from .ram import OutOfBoundsError
from .stack import StackError

logger = logging.getLogger(__name__)


class CPUError(Exception):
    pass


class CPU:
    def __init__(self, ram, stack, framebuffer, keypad, debugger=None, shift_quirks=None, key_release_quirks=None,
                 rng=None):

        self.ram = ram
        self.stack = stack
        self.framebuffer = framebuffer
        self.keypad = keypad
        self.debugger = Debugger() if debugger is None else debugger
        self.live_debug = self.debugger.is_live()
        self.rng = Random() if rng is None else rng

        """
        Quirks
        ------

        - Shift quirks      : 8xy6/8xyE shift Vy into Vx, as the COSMAC VIP did.  Disabled by default, so Vx is
                              shifted in place and Vy is ignored.
        - Key release quirks: Ex9E/ExA1 release the key they tested, so a press is only seen once.  Disabled by
                              default, so keys stay down until the input plugin says otherwise.
        """

        self.shift_quirks = False if shift_quirks is None else shift_quirks
        self.key_release_quirks = False if key_release_quirks is None else key_release_quirks

        self.reset()

    def reset(self):
        # Power-on state.  Also usable by a host wanting to restart after a crash (reload the ROM afterwards).
        self.v = memoryview(bytearray(NUM_REGISTERS))  # Bytearrays are mutable, so this should be fast
        self.i = 0  # Index register

        # Initialise timers
        self.dt = 0  # Delay timer
        self.st = 0  # Sound timer

        # Initialise program counter and current opcode
        self.pc = ROM_START
        self.debug_pc = ROM_START
        self.opcode = 0

        # Input-related vars
        self.awaiting_keypress = False

        self.stack.clear()
        self.ram.clear()
        self.framebuffer.clear()
        self.install_font()

    def install_font(self):
        self.ram.write_block(FONT_START, FONTSET)

    def load(self, rom):
        # Fonts go in first, so they're present whatever order things are loaded in
        rom_size = len(rom)

        if ROM_START + rom_size > self.ram.mem_size:
            raise OutOfBoundsError(
                "ROM is {} bytes, but only {} bytes are available from address 0x{:03x}".format(
                    rom_size, self.ram.mem_size - ROM_START, ROM_START
                )
            )

        self.install_font()
        self.ram.write_block(ROM_START, rom)
        logger.info("Loaded %d byte ROM at 0x%03x", rom_size, ROM_START)

    def cycle(self):
        # Keep track of the program counter before altering it in any way for debugging purposes
        self.debug_pc = self.pc
        self.opcode = self.fetch()
        self.inc_pc()  # Program counter updates after fetch (and technically before decode), but before execute
        self.decode_exec()

    def tick_timers(self):
        # Call at 60Hz, regardless of how fast cycle() is being called
        if self.dt > 0:
            self.dt -= 1

        if self.st > 0:
            self.st -= 1

    def is_sound_active(self):
        return self.st > 0

    def fetch(self):
        # Big-endian.  The second byte wraps round to 0x000 if an odd jump leaves the PC on the very last byte.
        pc = self.pc
        return (self.ram.read(pc & ADDR_MASK) << 8) | self.ram.read((pc + 1) & ADDR_MASK)

    def decode_exec(self):
        # Branch on the first nibble, then on whichever part of the opcode picks the instruction in that family.
        opcode = self.opcode
        family = opcode >> 12

        if family == 0x0:
            if opcode == 0x00E0:
                self._00E0()
            elif opcode == 0x00EE:
                self._00EE()
            else:
                self._opcode_unsupported()  # 0nnn (call machine code routine) can't be emulated
        elif family == 0x1:
            self._1nnn()
        elif family == 0x2:
            self._2nnn()
        elif family == 0x3:
            self._3xkk()
        elif family == 0x4:
            self._4xkk()
        elif family == 0x5:
            if self.nibble == 0x0:
                self._5xy0()
            else:
                self._opcode_unsupported()
        elif family == 0x6:
            self._6xkk()
        elif family == 0x7:
            self._7xkk()
        elif family == 0x8:
            self._decode_exec_8xyn()
        elif family == 0x9:
            if self.nibble == 0x0:
                self._9xy0()
            else:
                self._opcode_unsupported()
        elif family == 0xA:
            self._Annn()
        elif family == 0xB:
            self._Bnnn()
        elif family == 0xC:
            self._Cxkk()
        elif family == 0xD:
            self._Dxyn()
        elif family == 0xE:
            selector = self.byte

            if selector == 0x9E:
                self._Ex9E()
            elif selector == 0xA1:
                self._ExA1()
            else:
                self._opcode_unsupported()
        else:
            self._decode_exec_fxkk()

    def _decode_exec_8xyn(self):
        selector = self.nibble

        if selector == 0x0:
            self._8xy0()
        elif selector == 0x1:
            self._8xy1()
        elif selector == 0x2:
            self._8xy2()
        elif selector == 0x3:
            self._8xy3()
        elif selector == 0x4:
            self._8xy4()
        elif selector == 0x5:
            self._8xy5()
        elif selector == 0x6:
            self._8xy6()
        elif selector == 0x7:
            self._8xy7()
        elif selector == 0xE:
            self._8xyE()
        else:
            self._opcode_unsupported()

    def _decode_exec_fxkk(self):
        selector = self.byte

        if selector == 0x07:
            self._Fx07()
        elif selector == 0x0A:
            self._Fx0A()
        elif selector == 0x15:
            self._Fx15()
        elif selector == 0x18:
            self._Fx18()
        elif selector == 0x1E:
            self._Fx1E()
        elif selector == 0x29:
            self._Fx29()
        elif selector == 0x33:
            self._Fx33()
        elif selector == 0x55:
            self._Fx55()
        elif selector == 0x65:
            self._Fx65()
        else:
            self._opcode_unsupported()

    def inc_pc(self):
        self.pc = (self.pc + 2) & ADDR_MASK

    def dec_pc(self):
        # Only used to re-run instructions (i.e. keypress wait).
        self.pc = (self.pc - 2) & ADDR_MASK

    # References to Vx, Vy, byte and addr are always in the same opcode position throughout all instructions, so avoid
    # excessive code duplication (ever so slight slowdown).  Don't reference these more than necessary as they are
    # recalculated each time.
    @property
    def vx(self):
        return (self.opcode & 0xF00) >> 8

    @property
    def vy(self):
        return (self.opcode & 0xF0) >> 4

    @property
    def addr(self):
        return self.opcode & 0xFFF

    @property
    def byte(self):
        return self.opcode & 0xFF

    @property
    def nibble(self):
        return self.opcode & 0xF

    def _crash_report(self, reason):
        return (
            "Emulation halted.\n\n" +
            "{}Debug info:\n" +
            "{}\n\n{}"
        ).format(APP_INTRO, self.debugger.debug(self, "???", verbose=True), reason)

    def _opcode_unsupported(self):
        raise CPUError(
            self._crash_report(
                "Opcode 0x{:04x} at address 0x{:03x} is not a CHIP-8 instruction.".format(self.opcode, self.debug_pc)
            )
        ) from None

    def debug(self, instruction):
        self.debugger.output(self, instruction)

    def _post_skip(self):
        self.inc_pc()

    def _00E0(self):  # CLS
        if self.live_debug:
            self.debug("CLS")

        self.framebuffer.clear()

    def _00EE(self):  # RET
        if self.live_debug:
            self.debug("RET")

        try:
            self.pc = self.stack.pop()
        except StackError as err:
            raise StackError(
                self._crash_report("{} returning from address 0x{:03x}.".format(err, self.debug_pc))
            ) from None

    def _1nnn(self):  # JP addr
        if self.live_debug:
            self.debug("JP 0x{:03x}".format(self.addr))

        self.pc = self.addr

    def _2nnn(self):  # CALL addr
        if self.live_debug:
            self.debug("CALL 0x{:03x}".format(self.addr))

        try:
            self.stack.push(self.pc)
        except StackError as err:
            raise StackError(
                self._crash_report("{} calling 0x{:03x} from address 0x{:03x}.".format(err, self.addr, self.debug_pc))
            ) from None

        self.pc = self.addr

    def _3xkk(self):  # SE Vx, byte
        if self.live_debug:
            self.debug("SE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        if self.v[self.vx] == self.byte:
            self._post_skip()

    def _4xkk(self):  # SNE Vx, byte
        if self.live_debug:
            self.debug("SNE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        if self.v[self.vx] != self.byte:
            self._post_skip()

    def _5xy0(self):  # SE Vx, Vy
        if self.live_debug:
            self.debug("SE V{:01x}, V{:01x}".format(self.vx, self.vy))

        if self.v[self.vx] == self.v[self.vy]:
            self._post_skip()

    def _6xkk(self):  # LD Vx, byte
        if self.live_debug:
            self.debug("LD V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        self.v[self.vx] = self.byte

    def _7xkk(self):  # ADD Vx, byte
        vx = self.vx
        byte = self.byte

        if self.live_debug:
            self.debug("ADD V{:01x}, 0x{:02x}".format(vx, byte))

        # No carry flag for this one
        byte += self.v[vx]
        self.v[vx] = byte & 0xFF

    def _8xy0(self):  # LD Vx, Vy
        if self.live_debug:
            self.debug("LD V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] = self.v[self.vy]

    def _8xy1(self):  # OR Vx, Vy
        if self.live_debug:
            self.debug("OR V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] |= self.v[self.vy]

    def _8xy2(self):  # AND Vx, Vy
        if self.live_debug:
            self.debug("AND V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] &= self.v[self.vy]

    def _8xy3(self):  # XOR Vx, Vy
        if self.live_debug:
            self.debug("XOR V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] ^= self.v[self.vy]

    # From here on, Vf is always written last, as Vx or Vy may be Vf itself.

    def _8xy4(self):  # ADD Vx, Vy
        vx = self.vx
        vy = self.vy

        if self.live_debug:
            self.debug("ADD V{:01x}, V{:01x}".format(vx, vy))

        val = self.v[vx] + self.v[vy]
        self.v[vx] = val & 0xFF
        self.v[0xF] = int(val > 0xFF)  # Vf is set when carrying

    def _post_8xy5_8xy7(self, val):  # Post-SUB/SUBN
        self.v[self.vx] = val & 0xFF
        self.v[0xF] = int(val >= 0)  # Vf is set when NOT borrowing

    def _8xy5(self):  # SUB Vx, Vy
        if self.live_debug:
            self.debug("SUB V{:01x}, V{:01x}".format(self.vx, self.vy))

        self._post_8xy5_8xy7(self.v[self.vx] - self.v[self.vy])

    def _debug_8xy6_8xyE(self, direction):
        self.debug(
            "{} V{:01x}, V{:01x}".format(direction, self.vx, self.vy) if self.shift_quirks else
            "{} V{:01x}".format(direction, self.vx)
        )

    def _8xy6(self):  # SHR Vx {, Vy}
        if self.live_debug:
            self._debug_8xy6_8xyE("SHR")

        val = self.v[self.vy if self.shift_quirks else self.vx]
        self.v[self.vx] = val >> 1
        self.v[0xF] = val & 1  # Bit shifted out

    def _8xy7(self):  # SUBN Vx, Vy
        if self.live_debug:
            self.debug("SUBN V{:01x}, V{:01x}".format(self.vx, self.vy))

        self._post_8xy5_8xy7(self.v[self.vy] - self.v[self.vx])

    def _8xyE(self):  # SHL Vx {, Vy}
        if self.live_debug:
            self._debug_8xy6_8xyE("SHL")

        val = self.v[self.vy if self.shift_quirks else self.vx]
        self.v[self.vx] = (val << 1) & 0xFF
        self.v[0xF] = val >> 7  # Bit shifted out

    def _9xy0(self):  # SNE Vx, Vy
        if self.live_debug:
            self.debug("SNE V{:01x}, V{:01x}".format(self.vx, self.vy))

        if self.v[self.vx] != self.v[self.vy]:
            self._post_skip()

    def _Annn(self):  # LD I, addr
        if self.live_debug:
            self.debug("LD I, 0x{:03x}".format(self.addr))

        self.i = self.addr

    def _Bnnn(self):  # JP V0, addr
        if self.live_debug:
            self.debug("JP V0, 0x{:03x}".format(self.addr))

        self.pc = (self.v[0x0] + self.addr) & ADDR_MASK

    def _Cxkk(self):  # RND Vx, byte
        if self.live_debug:
            self.debug("RND V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[self.vx] = self.rng.randint(0, 0xFF) & self.byte

    def _Dxyn(self):  # DRW Vx, Vy, nibble
        height = self.nibble

        if self.live_debug:
            self.debug("DRW V{:01x}, V{:01x}, 0x{:01x}".format(self.vx, self.vy, height))

        # Vf is cleared before the position is read, so drawing at Vf always starts from 0
        self.v[0xF] = 0
        i = self.i
        rows = [self.ram.read((i + row) & ADDR_MASK) for row in range(height)]
        collided = self.framebuffer.draw_sprite(self.v[self.vx], self.v[self.vy], rows)
        self.v[0xF] = int(collided)

    def _post_Ex9E_ExA1(self, key):
        if self.key_release_quirks:
            self.keypad.release(key)

    def _Ex9E(self):  # SKP Vx
        if self.live_debug:
            self.debug("SKP V{:01x}".format(self.vx))

        key = self.v[self.vx] & (NUM_KEYS - 1)

        if self.keypad.is_key_down(key):
            self._post_skip()

        self._post_Ex9E_ExA1(key)

    def _ExA1(self):  # SKNP Vx
        if self.live_debug:
            self.debug("SKNP V{:01x}".format(self.vx))

        key = self.v[self.vx] & (NUM_KEYS - 1)

        if not self.keypad.is_key_down(key):
            self._post_skip()

        self._post_Ex9E_ExA1(key)

    def _Fx07(self):  # LD Vx, DT
        if self.live_debug:
            self.debug("LD V{:01x}, DT".format(self.vx))

        self.v[self.vx] = self.dt

    def _Fx0A(self):  # LD Vx, K
        if self.live_debug:
            self.debug("LD V{:01x}, K".format(self.vx))

        # This opcode waits for a keypress, but since the sound and delay timers still need to expire correctly, and
        # the framebuffer still needs updating, we'll return control to the host and simply decrement the incremented
        # program counter.  The same instruction then runs again on the next cycle.
        key = self.keypad.first_key_down()

        if key is None:
            self.dec_pc()
            self.awaiting_keypress = True
        else:
            self.v[self.vx] = key
            self.awaiting_keypress = False

    def _Fx15(self):  # LD DT, Vx
        if self.live_debug:
            self.debug("LD DT, V{:01x}".format(self.vx))

        self.dt = self.v[self.vx]

    def _Fx18(self):  # LD ST, Vx
        if self.live_debug:
            self.debug("LD ST, V{:01x}".format(self.vx))

        self.st = self.v[self.vx]

    def _Fx1E(self):  # ADD I, Vx
        if self.live_debug:
            self.debug("ADD I, V{:01x}".format(self.vx))

        self.i = (self.i + self.v[self.vx]) & ADDR_MASK

    def _Fx29(self):  # LD F, Vx
        if self.live_debug:
            self.debug("LD F, V{:01x}".format(self.vx))

        # Only the low nibble selects a glyph
        self.i = FONT_START + FONT_GLYPH_SIZE * (self.v[self.vx] & 0xF)

    def _Fx33(self):  # LD B, Vx
        if self.live_debug:
            self.debug("LD B, V{:01x}".format(self.vx))

        val = self.v[self.vx]
        i = self.i
        self.ram.write(i & ADDR_MASK, val // 100)             # Most-significant digit
        self.ram.write((i + 1) & ADDR_MASK, (val // 10) % 10)  # Middle digit
        self.ram.write((i + 2) & ADDR_MASK, val % 10)          # Least-significant digit

    def _Fx55(self):  # LD [I], Vx
        if self.live_debug:
            self.debug("LD [I], V{:01x}".format(self.vx))

        i = self.i

        # I is left where it is
        for reg in range(self.vx + 1):
            self.ram.write((i + reg) & ADDR_MASK, self.v[reg])

    def _Fx65(self):  # LD Vx, [I]
        if self.live_debug:
            self.debug("LD V{:01x}, [I]".format(self.vx))

        i = self.i

        for reg in range(self.vx + 1):
            self.v[reg] = self.ram.read((i + reg) & ADDR_MASK)
