#!/usr/bin/env python3

__author__ = "Gregory Maynard-Hoare"
__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"
__version__ = "1.0.0"

import sys
from argparse import ArgumentParser
from c8kit import main
from c8kit.constants import DEFAULT_KEYMAP, DEFAULT_CLOCK_SPEED, CPU_QUIRKS


def parse_args():
    parser = ArgumentParser()
    parser.add_argument("filename", help="ROM to execute (normally ending in .ch8, .c8 or .rom)")
    parser.add_argument(
        "-c", "--clock_speed", type=int,
        help="set the CPU speed in operations/second (default {})".format(DEFAULT_CLOCK_SPEED)
    )
    parser.add_argument(
        "-r", "--renderer", choices=["pygame", "curses", "null"],
        help="set the rendering, input, and audio systems (pygame by default if available, otherwise curses)"
    )
    parser.add_argument(
        "-s", "--scale", type=int,
        help="set the window width in PyGame mode (default 512), and scale in Curses mode (default 2)"
    )
    parser.add_argument(
        "-f", "--smoothing", type=int, default=0,
        help="define the number of smoothing filter passes for higher quality rendering (default 0)"
    )
    parser.add_argument(
        "-m", "--mute", type=int, choices=[0, 1],
        help="mute the emulated audio.  0 = unmuted (default for PyGame), 1 = muted (default for Curses)"
    )
    parser.add_argument(
        "-k", "--keymap", default=DEFAULT_KEYMAP,
        help="redefine the 16 keyscan codes (PyGame) or character numbers (Curses).  Separate each decimal with a comma"
    )
    parser.add_argument(
        "--pygame_palette",
        help="redefine the background and foreground colours for the PyGame renderer in hex, e.g. 000000,00FF00"
    )

    for cpu_quirk in CPU_QUIRKS:
        parser.add_argument(
            "--{}_quirks".format(cpu_quirk), type=int, choices=[0, 1],
            help="manually disable or enable {} quirks".format(cpu_quirk.replace("_", " "))
        )

    parser.add_argument(
        "-d", "--debug", action="store_true", default=False,
        help="enable live debug output.  Only visible in PyGame renderer during play.  Slows CPU execution"
    )
    return parser.parse_args()  # Can call sys.exit(2) if args are incorrect


if __name__ == "__main__":
    args = vars(parse_args())
    # It is possible to start the emulator from a GUI by calling this with a dictionary
    sys.exit(0 if main(args) is None else 1)
