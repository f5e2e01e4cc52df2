#!/usr/bin/env python3

__author__ = "Gregory Maynard-Hoare"
__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"
__version__ = "1.0.0"

from argparse import ArgumentParser
from chocchip import main
from chocchip.constants import CPU_QUIRKS, DEFAULT_KEYMAP, DEFAULT_CLOCK_SPEED


def parse_args():
    parser = ArgumentParser()
    parser.add_argument("filename", help="ROM to execute (normally ending in .ch8 or .c8)")
    parser.add_argument(
        "-c", "--clock_speed", type=int,
        help="set the CPU speed in operations/second (default {}, 0 = uncapped)".format(DEFAULT_CLOCK_SPEED)
    )
    parser.add_argument(
        "-r", "--renderer", choices=["pygame", "curses", "null"],
        help="set the rendering and input systems (pygame by default if available, otherwise curses)"
    )
    parser.add_argument(
        "-s", "--scale", type=int,
        help="set the window width in PyGame mode (default 640), and horizontal scale in Curses mode (default 2)"
    )
    parser.add_argument(
        "-k", "--keymap", default=DEFAULT_KEYMAP,
        help="redefine the 16 keyscan codes (PyGame) or character numbers (Curses).  Separate each decimal with a comma"
    )

    for cpu_quirk in CPU_QUIRKS:
        parser.add_argument(
            "--{}_quirks".format(cpu_quirk), type=int, choices=[0, 1],
            help="manually disable or enable {} quirks".format(cpu_quirk.replace("_", " "))
        )

    parser.add_argument(
        "-d", "--debug", action="store_true", default=False,
        help="log every instruction executed.  Slows CPU execution"
    )
    return parser.parse_args()  # Can call sys.exit(2) if args are incorrect


if __name__ == "__main__":
    args = vars(parse_args())
    # It is possible to start the emulator from a GUI by calling this with a dictionary
    main(args)
