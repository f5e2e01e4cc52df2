#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "ChocChip-8 Emulator"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Copyright (C) 2024 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Memory map
MEM_SIZE = 0x1000     # 4K of addressable memory
ADDR_MASK = 0xFFF     # Addresses are 12-bit
ROM_START = 0x200     # Programs are loaded here, and execution starts here
FONT_START = 0x50     # Start of the built-in hexadecimal fontset
FONT_GLYPH_SIZE = 5   # Bytes per glyph

# Machine resources
NUM_REGISTERS = 0x10
NUM_KEYS = 0x10
STACK_LEVELS = 16
VID_WIDTH = 64
VID_HEIGHT = 32

# Timing
TIMER_FREQ = 60.0              # 60Hz delay/sound timer decay
DISPLAY_FREQ = 60.0            # 60Hz display refresh and input polling
DEFAULT_CLOCK_SPEED = 700      # Instructions per second unless overridden
MAX_TIMER_CATCHUP = 8          # Ticks applied at most per poll if the host lags

# 16 glyphs (0-F), 5 rows each.  Only the top nibble of each row is used.
FONTSET = bytes((
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
))

# Default mappings for keys 0-F.  Note that the keyscans (on a UK QWERTY keyboard) and ASCII characters for these are
# the same code.  Laid out as the usual 4x4 grid: 1234/QWER/ASDF/ZXCV.
DEFAULT_KEYMAP = "120,49,50,51,113,119,101,97,115,100,122,99,52,114,102,118"

# Optional behaviour switches
CPU_QUIRKS = ["shift", "key_release"]
