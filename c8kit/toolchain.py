#!/usr/bin/env python3

"""
Assembler/Disassembler Toolchain

Simply call handle_instruction(args) to assemble a source file into a ROM, or
disassemble a ROM back into source, replacing args with a dictionary of
options.  Returns the process exit status: 0 on success, 1 on any failure.

If no output file is given, the result is written beside the input, with the
input's base name and a .rom (assembled) or .chip8 (disassembled) extension.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from os import path
from .assembler import Assembler
from .constants import ASSEMBLE_FILE_EXT, DISASSEMBLE_FILE_EXT
from .disassembler import Disassembler
from .errors import CodecError
from .hostio import Loader

log = logging.getLogger(__name__)

ACTION_ASSEMBLE = "assemble"
ACTION_DISASSEMBLE = "disassemble"
ACTIONS = {
    ACTION_ASSEMBLE: ASSEMBLE_FILE_EXT,
    ACTION_DISASSEMBLE: DISASSEMBLE_FILE_EXT,
}


def default_output_path(input_file, action):
    base_name = path.splitext(path.basename(input_file))[0]
    return path.join(path.dirname(input_file), base_name + ACTIONS[action])


def assemble(loader, input_file, output_file):
    rom = Assembler(loader.load_text(input_file)).assemble()
    loader.save_binary(output_file, rom)
    log.info("Wrote %d bytes to %s", len(rom), output_file)


def disassemble(loader, input_file, output_file):
    disassembler = Disassembler(loader.load_binary(input_file))
    lines = disassembler.disassemble()
    loader.save_text(output_file, disassembler.instruction_set + "\n")
    log.info("Wrote %d instructions to %s", len(lines), output_file)


def handle_instruction(args):
    action = args["action"]

    if action not in ACTIONS:
        log.error("Unknown action: %s (expected one of %s)", action, ", ".join(ACTIONS))
        return 1

    input_file = args["input_file"]
    output_file = args["output_file"] or default_output_path(input_file, action)
    log.info("Running %s on %s", action, input_file)

    try:
        if action == ACTION_ASSEMBLE:
            assemble(Loader(), input_file, output_file)
        else:
            disassemble(Loader(), input_file, output_file)
    except CodecError as e:
        log.error("Could not %s %s: %s", action, input_file, e)
        return 1
    except OSError as e:
        log.error("File error: %s", e)
        return 1
    except UnicodeDecodeError:
        log.error("%s is not a text file", input_file)
        return 1

    return 0
