#!/usr/bin/env python3

"""
Assembler

Turns assembly source into a ROM image, one 16-bit big-endian opcode per
source line.

A mnemonic does not fix the opcode on its own.  'SE $1, $2' and 'SE $1, 12'
are different instructions (5XY0 and 3XNN), and LD has eleven forms.  Each
operand is classified once (register, number or keyword), and the form whose
operand kinds match that shape is chosen from the instruction set table.

Assembly stops at the first bad line.  The error is logged with the line
before and after it, and raised with the line number attached.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from collections import namedtuple
from . import isa, tokens
from .errors import CodecError, IllegalArgumentError, InvalidInstructionError, UnknownMnemonicError

log = logging.getLogger(__name__)

Tokens = namedtuple("Tokens", ["mnemonic", "args"])

EMPTY_LINE_MNEMONIC = "NOOP"


def tokenize(line):
    addr_pos = line.find(tokens.ADDR_DELIMITER)
    comment_pos = line.find(tokens.COMMENT_DELIMITER)

    # Comments may contain the address delimiter, so cut them off first
    if comment_pos != -1:
        line = line[:comment_pos]

    if addr_pos != -1 and (comment_pos == -1 or addr_pos < comment_pos):
        line = line[addr_pos + 1:]

    line = line.strip() or EMPTY_LINE_MNEMONIC
    form = tokens.ArgumentForm.match(line)

    if form is None:
        raise InvalidInstructionError("Line does not look like an instruction: {}".format(line))

    mnemonic = form.group("mnemonic").upper()

    if mnemonic not in isa.MNEMONICS:
        raise UnknownMnemonicError("Unknown mnemonic: {}".format(form.group("mnemonic")))

    args = [arg.strip() for arg in line[form.end("mnemonic"):].split(",")]
    return Tokens(mnemonic, [arg for arg in args if arg])


def validate_args(mnemonic, args):
    arity_min, arity_max = isa.ARITY[mnemonic]

    if not arity_min <= len(args) <= arity_max:
        if arity_min == arity_max:
            expected = str(arity_min)
        else:
            expected = "{} to {}".format(arity_min, arity_max)

        raise InvalidInstructionError(
            "{} expects {} operands, received {}".format(mnemonic, expected, len(args))
        )


def encode(line_tokens):
    mnemonic, args = line_tokens
    validate_args(mnemonic, args)
    operands = [tokens.classify_operand(arg) for arg in args]

    for instruction in isa.forms(mnemonic):
        if isa.accepts(instruction, operands):
            return isa.encode(instruction, [operand.value for operand in operands])

    raise InvalidInstructionError(
        "No form of {} takes operands {}".format(mnemonic, ", ".join(operand.text for operand in operands))
    )


class Assembler:
    def __init__(self, source):
        if not isinstance(source, str):
            raise IllegalArgumentError("Unexpected input: {}, expected str".format(type(source).__name__))

        self.lines = source.split("\n")
        self.opcodes = []

        # A newline at the very end of the file does not start another instruction
        if len(self.lines) > 1 and not self.lines[-1].strip():
            self.lines.pop()

    def print_context(self, index):
        context = []

        if index > 0:
            context.append("    {}".format(self.lines[index - 1]))

        context.append("    {} <-- @here".format(self.lines[index]))

        if index + 1 < len(self.lines):
            context.append("    {}".format(self.lines[index + 1]))

        return "\n".join(context)

    def assemble_line(self, index):
        line = self.lines[index]

        try:
            return encode(tokenize(line))
        except CodecError as e:
            context = self.print_context(index)
            e.attach_context(index + 1, context)
            log.error("Received %s on line %d:\n%s", e.kind, index + 1, context)
            raise

    def assemble(self):
        self.opcodes = []
        rom = bytearray()

        for index in range(len(self.lines)):
            opcode = self.assemble_line(index)
            self.opcodes.append(opcode)
            rom += opcode.to_bytes(2, "big")

        log.info("Assembled %d instructions (%d bytes)", len(self.opcodes), len(rom))
        return bytes(rom)
