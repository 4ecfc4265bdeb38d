#!/usr/bin/env python3

"""
Disassembler

Turns a ROM image back into assembly text, one line per opcode, each line
prefixed with the address the opcode is loaded at.

This is a best-effort tool for binaries that may contain data as well as
code, so an opcode outside the instruction set does not stop it.  The line
becomes a NOOP with the raw opcode in a comment, and a warning is logged.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from . import isa, tokens

log = logging.getLogger(__name__)

UNKNOWN_OPCODE_LINE = "{}\t{} unknown opcode 0x{{:04X}}".format(isa.OP_0000.mnemonic, tokens.COMMENT_DELIMITER)


class Disassembler:
    def __init__(self, data):
        self.opcodes = []
        self.instructions = []
        self.opcodes_processed = 0

        data = bytes(data)
        log.info("Loaded a buffer into the disassembler of %d bytes", len(data))
        self.load_opcodes(data)
        self.print_opcodes()

    def load_opcodes(self, data):
        for i in range(0, len(data), 2):
            high = data[i]
            low = data[i + 1] if i + 1 < len(data) else 0  # Odd trailing byte is padded
            self.opcodes.append(high << 8 | low)

    def print_opcodes(self):
        if not log.isEnabledFor(logging.DEBUG):
            return

        rows = []

        for row_start in range(0, len(self.opcodes), 8):
            rows.append(" ".join(
                "[{:03d}]0x{:04X}".format(row_start + offset + 1, opcode)
                for offset, opcode in enumerate(self.opcodes[row_start:row_start + 8])
            ))

        log.debug("Got the following opcodes:\n%s", "\n".join(rows))

    def process_opcode(self, opcode):
        self.opcodes_processed += 1
        instruction = isa.decode(opcode)

        if instruction is None:
            log.warning("Unknown opcode 0x%04X @%d", opcode, self.opcodes_processed)
            return UNKNOWN_OPCODE_LINE.format(opcode)

        return isa.render(instruction, opcode)

    def disassemble(self):
        self.opcodes_processed = 0
        lines = [self.process_opcode(opcode) for opcode in self.opcodes]
        self.instructions = [tokens.prepend_address(line, index) for index, line in enumerate(lines)]
        log.info("Finished processing the binary.")
        return self.instructions

    @property
    def instruction_set(self):
        return "\n".join(self.instructions)
