#!/usr/bin/env python3

__author__ = "Gregory Maynard-Hoare"
__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"
__version__ = "1.0.0"

import logging
import sys
from argparse import ArgumentParser
from c8kit.toolchain import handle_instruction, ACTIONS

LOG_FORMAT = "%(levelname)s: %(message)s"


def parse_args():
    parser = ArgumentParser()
    parser.add_argument("input_file", help="assembly source to assemble, or ROM to disassemble")
    # Checked by the toolchain rather than argparse, so a bad action exits with status 1 like any other failure
    parser.add_argument("action", help="one of: {}".format(", ".join(ACTIONS)))
    parser.add_argument(
        "output_file", nargs="?",
        help="where to write the result (default: the input's name with a .rom or .chip8 extension)"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=False,
        help="show debug output, including the opcode dump when disassembling"
    )
    return parser.parse_args()  # Can call sys.exit(2) if args are incorrect


if __name__ == "__main__":
    args = vars(parse_args())
    logging.basicConfig(format=LOG_FORMAT, level=logging.DEBUG if args["verbose"] else logging.INFO)
    sys.exit(handle_instruction(args))
