#!/usr/bin/env python3

"""
Toolchain Errors

Every assembler and disassembler failure is a CodecError.  The 'kind' names
the failure class so callers (and log lines) can report it without caring
about the Python type.  Once the assembler knows which source line failed, it
attaches the line number and the surrounding lines before re-raising.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class CodecError(Exception):
    kind = "CodecError"

    def __init__(self, message):
        super().__init__(message)
        self.message = message
        self.line_number = None
        self.context = None

    def attach_context(self, line_number, context):
        self.line_number = line_number
        self.context = context

    def __str__(self):
        if self.line_number is None:
            return "{}: {}".format(self.kind, self.message)

        return "{} on line {}: {}".format(self.kind, self.line_number, self.message)


class IllegalArgumentError(CodecError):
    kind = "IllegalArgument"


class UnknownMnemonicError(CodecError):
    kind = "UnknownMnemonic"


class InvalidInstructionError(CodecError):
    kind = "InvalidInstruction"


class MalformedOpcodeError(CodecError):
    kind = "MalformedOpcode"
