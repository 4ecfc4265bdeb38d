#!/usr/bin/env python3

"""
Instruction Set Table

The one place the CHIP-8 opcode layout is written down.  The CPU executes
through it, the disassembler renders through it, and the assembler encodes
through it, so the three can never disagree about what a bit pattern means.

Each instruction form records the mask and match value identifying it, plus
an ordered list of operand kinds.  An operand kind says both where the value
lives in the opcode and what it looks like in assembly text:

    x, y    register number in bits 8-11 / 4-7, written $X
    v0      register V0, implied by the opcode, written $0
    addr    12-bit address in bits 0-11, written NNNH
    byte    8-bit immediate in bits 0-7, written NNH
    nibble  4-bit immediate in bits 0-3, written NH
    I, DT, ST, K, F, B
            keywords with no bits of their own

Decoding is two-level.  The high nibble picks a family, and the family says
which masks must be tried (in order) to pick out the exact form.  Families
0x0, 0x5, 0x8, 0x9, 0xE and 0xF are ambiguous on the high nibble alone.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple
from . import tokens
from .errors import InvalidInstructionError, MalformedOpcodeError

Instruction = namedtuple("Instruction", ["name", "mnemonic", "mask", "match", "operands"])

# Operand kinds backed by opcode bits: (shift, field mask)
FIELDS = {
    "x": (8, 0xF),
    "y": (4, 0xF),
    "addr": (0, 0xFFF),
    "byte": (0, 0xFF),
    "nibble": (0, 0xF),
}

# What each operand kind must look like in assembly text.  Keywords are their own shape.
SHAPES = {
    "x": tokens.REGISTER,
    "y": tokens.REGISTER,
    "v0": tokens.REGISTER,
    "addr": tokens.NUMBER,
    "byte": tokens.NUMBER,
    "nibble": tokens.NUMBER,
}

OP_0000 = Instruction("0000", "NOOP", 0xFFFF, 0x0000, ())
OP_00E0 = Instruction("00E0", "CLS", 0xFFFF, 0x00E0, ())
OP_00EE = Instruction("00EE", "RET", 0xFFFF, 0x00EE, ())
OP_0NNN = Instruction("0NNN", "SYS", 0xF000, 0x0000, ("addr",))
OP_1NNN = Instruction("1NNN", "JP", 0xF000, 0x1000, ("addr",))
OP_2NNN = Instruction("2NNN", "CALL", 0xF000, 0x2000, ("addr",))
OP_3XNN = Instruction("3XNN", "SE", 0xF000, 0x3000, ("x", "byte"))
OP_4XNN = Instruction("4XNN", "SNE", 0xF000, 0x4000, ("x", "byte"))
OP_5XY0 = Instruction("5XY0", "SE", 0xF00F, 0x5000, ("x", "y"))
OP_6XNN = Instruction("6XNN", "LD", 0xF000, 0x6000, ("x", "byte"))
OP_7XNN = Instruction("7XNN", "ADD", 0xF000, 0x7000, ("x", "byte"))
OP_8XY0 = Instruction("8XY0", "LD", 0xF00F, 0x8000, ("x", "y"))
OP_8XY1 = Instruction("8XY1", "OR", 0xF00F, 0x8001, ("x", "y"))
OP_8XY2 = Instruction("8XY2", "AND", 0xF00F, 0x8002, ("x", "y"))
OP_8XY3 = Instruction("8XY3", "XOR", 0xF00F, 0x8003, ("x", "y"))
OP_8XY4 = Instruction("8XY4", "ADD", 0xF00F, 0x8004, ("x", "y"))
OP_8XY5 = Instruction("8XY5", "SUB", 0xF00F, 0x8005, ("x", "y"))
OP_8XY6 = Instruction("8XY6", "SHR", 0xF00F, 0x8006, ("x",))
OP_8XY7 = Instruction("8XY7", "SUBN", 0xF00F, 0x8007, ("x", "y"))
OP_8XYE = Instruction("8XYE", "SHL", 0xF00F, 0x800E, ("x",))
OP_9XY0 = Instruction("9XY0", "SNE", 0xF00F, 0x9000, ("x", "y"))
OP_ANNN = Instruction("ANNN", "LD", 0xF000, 0xA000, ("I", "addr"))
OP_BNNN = Instruction("BNNN", "JP", 0xF000, 0xB000, ("v0", "addr"))
OP_CXNN = Instruction("CXNN", "RND", 0xF000, 0xC000, ("x", "byte"))
OP_DXYN = Instruction("DXYN", "DRW", 0xF000, 0xD000, ("x", "y", "nibble"))
OP_EX9E = Instruction("EX9E", "SKP", 0xF0FF, 0xE09E, ("x",))
OP_EXA1 = Instruction("EXA1", "SKNP", 0xF0FF, 0xE0A1, ("x",))
OP_FX07 = Instruction("FX07", "LD", 0xF0FF, 0xF007, ("x", "DT"))
OP_FX0A = Instruction("FX0A", "LD", 0xF0FF, 0xF00A, ("x", "K"))
OP_FX15 = Instruction("FX15", "LD", 0xF0FF, 0xF015, ("DT", "x"))
OP_FX18 = Instruction("FX18", "LD", 0xF0FF, 0xF018, ("ST", "x"))
OP_FX1E = Instruction("FX1E", "ADD", 0xF0FF, 0xF01E, ("I", "x"))
OP_FX29 = Instruction("FX29", "LD", 0xF0FF, 0xF029, ("F", "x"))
OP_FX33 = Instruction("FX33", "LD", 0xF0FF, 0xF033, ("B", "x"))
OP_FX55 = Instruction("FX55", "LD", 0xF0FF, 0xF055, ("I", "v0", "x"))
OP_FX65 = Instruction("FX65", "LD", 0xF0FF, 0xF065, ("v0", "x", "I"))

INSTRUCTIONS = (
    OP_0000, OP_00E0, OP_00EE, OP_0NNN, OP_1NNN, OP_2NNN, OP_3XNN, OP_4XNN, OP_5XY0, OP_6XNN, OP_7XNN,
    OP_8XY0, OP_8XY1, OP_8XY2, OP_8XY3, OP_8XY4, OP_8XY5, OP_8XY6, OP_8XY7, OP_8XYE, OP_9XY0,
    OP_ANNN, OP_BNNN, OP_CXNN, OP_DXYN, OP_EX9E, OP_EXA1,
    OP_FX07, OP_FX0A, OP_FX15, OP_FX18, OP_FX1E, OP_FX29, OP_FX33, OP_FX55, OP_FX65
)

# Second-level masks to try for each family, most specific first
FAMILY_MASKS = {
    0x0: (0xFFFF, 0xF000),  # Exact matches first, anything else is a legacy machine call
    0x5: (0xF00F,),
    0x8: (0xF00F,),
    0x9: (0xF00F,),
    0xE: (0xF0FF,),
    0xF: (0xF0FF,),
}
DEFAULT_FAMILY_MASKS = (0xF000,)

DISPATCH = {(instruction.mask, instruction.match): instruction for instruction in INSTRUCTIONS}

FORMS = {}

for _instruction in INSTRUCTIONS:
    FORMS.setdefault(_instruction.mnemonic, []).append(_instruction)

MNEMONICS = frozenset(FORMS)

# Smallest and largest operand count accepted by each mnemonic
ARITY = {
    mnemonic: (min(len(form.operands) for form in forms), max(len(form.operands) for form in forms))
    for mnemonic, forms in FORMS.items()
}


def decode(opcode):
    # Returns None for opcodes outside the instruction set
    for mask in FAMILY_MASKS.get((opcode & 0xF000) >> 12, DEFAULT_FAMILY_MASKS):
        instruction = DISPATCH.get((mask, opcode & mask))

        if instruction is not None:
            return instruction

    return None


def forms(mnemonic):
    return FORMS.get(mnemonic.upper(), [])


def fields(instruction, opcode):
    values = []

    for kind in instruction.operands:
        if kind in FIELDS:
            shift, mask = FIELDS[kind]
            values.append((opcode >> shift) & mask)
        elif kind == "v0":
            values.append(0)
        else:
            values.append(None)

    return values


def render(instruction, opcode):
    texts = []

    for kind, value in zip(instruction.operands, fields(instruction, opcode)):
        if SHAPES.get(kind) == tokens.REGISTER:
            texts.append(tokens.to_register_string(value))
        elif SHAPES.get(kind) == tokens.NUMBER:
            texts.append(tokens.to_hex_string(value))
        else:
            texts.append(kind)

    return tokens.format_assembly(instruction.mnemonic, *texts)


def accepts(instruction, operands):
    # True if the classified operands have exactly the shape this form expects
    if len(operands) != len(instruction.operands):
        return False

    for kind, operand in zip(instruction.operands, operands):
        shape = SHAPES.get(kind, kind)

        if shape == tokens.NUMBER and operand.kind in tokens.HEX_KEYWORDS:
            continue

        if shape != operand.kind:
            return False

        if kind == "v0" and operand.value != 0:
            return False

    return True


def encode(instruction, values):
    opcode = instruction.match

    for kind, value in zip(instruction.operands, values):
        if kind not in FIELDS:
            continue

        shift, mask = FIELDS[kind]

        if value < 0 or value > mask:
            raise MalformedOpcodeError(
                "Operand 0x{:x} does not fit the {} field of {}".format(value, kind, instruction.name)
            )

        opcode |= value << shift

    if opcode < 0 or opcode > 0xFFFF:
        raise MalformedOpcodeError("0x{:x} is not a valid opcode".format(opcode))

    # SYS E0 would otherwise come out as CLS
    decoded = decode(opcode)

    if decoded is not instruction:
        raise InvalidInstructionError(
            "0x{:04X} decodes as {}, not {}".format(opcode, decoded.mnemonic, instruction.mnemonic)
        )

    return opcode
