#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.
"""

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from .constants import APP_INTRO, APP_COPYRIGHT, CPU_QUIRKS, DEFAULT_KEYMAP
from .cpu import CPU
from .debugger import Debugger
from .framebuffer import Framebuffer
from .host import Host
from .hostio import Loader
from .keypad import Keypad
from .ram import RAM
from .stack import Stack

logger = logging.getLogger(__name__)


class StartupError(Exception):
    pass


def select_plugins(opt_renderer):
    # If necessary, try PyGame first, then Curses.
    auto_select_renderer = opt_renderer is None

    # flake8: noqa: F401
    if auto_select_renderer or opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import pygame
        except ImportError:
            if auto_select_renderer:
                opt_renderer = "curses"
            else:
                raise StartupError(
                    "PyGame does not appear to be installed."
                )
        else:
            from .inputs.i_pygame import Inputs
            from .renderers.r_pygame import Renderer
            return Inputs, Renderer

    if opt_renderer == "curses":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import curses
        except ImportError:
            if auto_select_renderer:
                raise StartupError(
                    "Neither PyGame nor Curses (or Windows-Curses) appear to be installed."
                )

            raise StartupError(
                "Curses (or Windows-Curses) does not appear to be installed."
            )
        else:
            from .inputs.i_curses import Inputs
            from .renderers.r_curses import Renderer
            return Inputs, Renderer

    if opt_renderer == "null":
        # pylint: disable=import-outside-toplevel
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        return Inputs, Renderer

    raise StartupError("Unknown renderer '{}'.".format(opt_renderer))


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))
    logging.basicConfig(
        level=logging.DEBUG if args["debug"] else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s"
    )

    quirk_settings = {}

    for cpu_quirk in CPU_QUIRKS:
        quirk_label = "{}_quirks".format(cpu_quirk)
        quirk_setting = args[quirk_label]
        quirk_settings[quirk_label] = None if quirk_setting is None else bool(quirk_setting)

    Inputs, Renderer = select_plugins(args["renderer"])

    # Read ROM binary first, so a bad filename is reported before any window opens
    rom = Loader().load_binary(args["filename"])

    # Set up the machine.  The CPU zeroes everything and installs the system font.
    ram = RAM()
    stack = Stack()
    framebuffer = Framebuffer()
    keypad = Keypad()
    debugger = Debugger()
    debugger.set_live(args["debug"])
    cpu = CPU(ram, stack, framebuffer, keypad, debugger, **quirk_settings)
    cpu.load(rom)

    # Set up the host side: rendering system, and inputs linked to it in case it provides inputs too
    renderer = Renderer(scale=args["scale"])

    try:
        inputs = Inputs(args["keymap"] or DEFAULT_KEYMAP, renderer, keypad)
    except Exception:
        renderer.shutdown()
        raise

    host = Host(cpu, framebuffer, renderer, inputs, clock_speed=args["clock_speed"])

    try:
        host.run()
    except Exception:
        # Record what stopped the machine, before the plugins are torn down
        logger.exception("Emulation stopped")
        raise
    finally:
        # The CPU has quit, so shut down the rendering framework.  __del__ cannot be relied upon when using PyPy
        inputs.shutdown()
        renderer.shutdown()
