#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.

Returns the fault that halted the machine, or None if the user quit.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_INTRO, APP_COPYRIGHT, CPU_QUIRKS, PROGRAM_START, STACK_SIZE
from .cpu import CPU
from .debugger import Debugger
from .framebuffer import Framebuffer
from .hostio import Loader
from .ram import RAM
from .stack import Stack

RENDERERS = ("pygame", "curses", "null")


class StartupError(Exception):
    pass


def is_installed(module_name):
    try:
        __import__(module_name)
    except ImportError:
        return False

    return True


def select_plugins(opt_renderer, mute_audio):
    """
    Returns the (Inputs, Renderer, Audio) plugin classes for a renderer name.  If no name is given, PyGame is tried
    first, then Curses.  Curses plays beeps only when sound is asked for explicitly.
    """
    # pylint: disable=import-outside-toplevel
    if opt_renderer is None:
        if is_installed("pygame"):
            opt_renderer = "pygame"
        elif is_installed("curses"):
            opt_renderer = "curses"
        else:
            raise StartupError("Neither PyGame nor Curses (or Windows-Curses) appear to be installed.")
    elif opt_renderer not in RENDERERS:
        raise StartupError("Unknown renderer: {}".format(opt_renderer))
    elif opt_renderer == "pygame" and not is_installed("pygame"):
        raise StartupError("PyGame does not appear to be installed.")
    elif opt_renderer == "curses" and not is_installed("curses"):
        raise StartupError("Curses (or Windows-Curses) does not appear to be installed.")

    if opt_renderer == "pygame":
        from .inputs.i_pygame import Inputs
        from .renderers.r_pygame import Renderer

        if mute_audio:
            from .audio.a_null import Audio
        else:
            from .audio.a_pygame import Audio
    elif opt_renderer == "curses":
        from .inputs.i_curses import Inputs
        from .renderers.r_curses import Renderer

        if mute_audio or mute_audio is None:
            from .audio.a_null import Audio
        else:
            from .audio.a_curses import Audio
    else:
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        from .audio.a_null import Audio

    return Inputs, Renderer, Audio


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))
    quirk_settings = {}

    for cpu_quirk in CPU_QUIRKS:
        quirk_label = "{}_quirks".format(cpu_quirk)
        quirk_setting = args[quirk_label]
        quirk_settings[quirk_label] = None if quirk_setting is None else bool(quirk_setting)

    Inputs, Renderer, Audio = select_plugins(args["renderer"], args["mute"])

    # Read the ROM before touching the display, so a bad filename leaves the terminal alone
    rom = Loader().load_binary(args["filename"])

    renderer = Renderer(scale=args["scale"], pygame_palette=args["pygame_palette"], smoothing=args["smoothing"])
    framebuffer = Framebuffer(renderer)
    inputs = Inputs(args["keymap"], renderer)  # Curses reads keys through the renderer's screen
    audio = Audio()

    debugger = Debugger()
    debugger.set_live(args["debug"])

    cpu = CPU(
        RAM(), Stack(STACK_SIZE), framebuffer, inputs, audio, debugger, clock_speed=args["clock_speed"], **quirk_settings
    )

    try:
        cpu.load_rom(rom)
        fault = cpu.run(PROGRAM_START)
    finally:
        # __del__ cannot be relied upon when using PyPy
        audio.shutdown()
        inputs.shutdown()
        renderer.shutdown()

    if fault is not None:
        # Only printed once the display has been shut down, otherwise Curses would hide it
        print("CPU halted: {}".format(fault.message))
        print(debugger.debug(cpu, verbose=True))

    return fault
