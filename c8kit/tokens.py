#!/usr/bin/env python3

"""
Assembly Token Grammar

Defines what a line of assembly may look like, and how its pieces are read
and written.

Numbers
-------
    2A, 2AH, 0x2A   hexadecimal (the default radix)
    42D             decimal
    52O, 52Q        octal
    101010B         binary

Without a '0x' prefix, a trailing B or D is always taken as the radix, so a
hex value ending in one of those digits must carry the H suffix (1BH rather
than 1B).  The disassembler always writes the H suffix, so its output reads
back unchanged.

Registers and keywords
----------------------
    $0 - $F     general registers V0 - VF
    I           index register
    DT, ST      delay and sound timers
    K           key wait
    F           font sprite location
    B           BCD store

F and B are also hex digits.  Where an instruction expects a number rather
than a keyword (DRW $0, $1, F), they read as 0xF and 0xB.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import re
from collections import namedtuple
from .constants import PROGRAM_START
from .errors import IllegalArgumentError

# Operand kinds, as produced by classify_operand
REGISTER = "register"
NUMBER = "number"
INDEX = "I"
DT = "DT"
ST = "ST"
KEY = "K"
FONT = "F"
BCD = "B"
KEYWORDS = (INDEX, DT, ST, KEY, FONT, BCD)
HEX_KEYWORDS = (FONT, BCD)  # Keywords that are also valid hex numbers

RADICES = {"H": 16, "D": 10, "O": 8, "Q": 8, "B": 2}
DEFAULT_RADIX = 16

ADDR_DELIMITER = ":"
COMMENT_DELIMITER = ";"
REGISTER_PREFIX = "$"

NUMBER_REGEX = r"(?:0X[0-9A-F]+H?|[0-9A-F]+[HDOQB]?)"
REGISTER_REGEX = r"\$[0-9A-F]"
OPERAND_REGEX = r"(?:{}|{}|{})".format(REGISTER_REGEX, NUMBER_REGEX, "|".join(KEYWORDS))

NumberMatcher = re.compile(
    r"^(?:0X(?P<prefixed>[0-9A-F]+)H?|(?P<digits>[0-9A-F]+?)(?P<radix>[HDOQB])?)$", re.IGNORECASE
)
RegisterMatcher = re.compile(r"^\$(?P<register>[0-9A-F])$", re.IGNORECASE)
ArgumentForm = re.compile(
    r"^(?P<mnemonic>[A-Z]+)(?:\s+{0}(?:\s*,\s*{0}){{0,2}})?$".format(OPERAND_REGEX), re.IGNORECASE
)

Operand = namedtuple("Operand", ["kind", "value", "text"])


def parse_number(text):
    match = NumberMatcher.match(text.strip())

    if match is None:
        raise IllegalArgumentError("Invalid number as string: {}".format(text))

    if match.group("prefixed") is not None:
        return int(match.group("prefixed"), 16)

    radix = RADICES[match.group("radix").upper()] if match.group("radix") else DEFAULT_RADIX

    try:
        return int(match.group("digits"), radix)
    except ValueError:
        raise IllegalArgumentError("Invalid base {} number: {}".format(radix, text)) from None


def parse_register(text):
    match = RegisterMatcher.match(text.strip())

    if match is None:
        raise IllegalArgumentError("Invalid register as string: {}".format(text))

    return int(match.group("register"), 16)


def classify_operand(text):
    # Decide once what an operand token is.  Only malformed tokens raise.
    token = text.strip()
    keyword = token.upper()

    if keyword in HEX_KEYWORDS:
        return Operand(keyword, parse_number(token), token)

    if keyword in KEYWORDS:
        return Operand(keyword, None, token)

    if token.startswith(REGISTER_PREFIX):
        return Operand(REGISTER, parse_register(token), token)

    return Operand(NUMBER, parse_number(token), token)


def is_valid_argument_form(line):
    return ArgumentForm.match(line) is not None


def to_hex_string(number):
    return "{:X}H".format(number)


def to_register_string(register):
    return "{}{:X}".format(REGISTER_PREFIX, register)


def format_assembly(mnemonic, *operands):
    if not operands:
        return mnemonic

    return "{}\t{}".format(mnemonic, ", ".join(operands))


def address_of(index):
    return PROGRAM_START + index * 2


def prepend_address(line, index):
    return "0x{:04X}{}\t{}".format(address_of(index), ADDR_DELIMITER, line or "")
