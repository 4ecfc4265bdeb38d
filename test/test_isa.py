#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from c8kit import isa, tokens
from c8kit.errors import InvalidInstructionError, MalformedOpcodeError


class TestDecode(unittest.TestCase):
    def test_decode_every_form_from_its_own_match(self):
        for instruction in isa.INSTRUCTIONS:
            self.assertIs(instruction, isa.decode(instruction.match), instruction.name)

    def test_decode_ambiguous_families(self):
        self.assertIs(isa.OP_0000, isa.decode(0x0000))
        self.assertIs(isa.OP_00E0, isa.decode(0x00E0))
        self.assertIs(isa.OP_00EE, isa.decode(0x00EE))
        self.assertIs(isa.OP_0NNN, isa.decode(0x0123))
        self.assertIs(isa.OP_8XY4, isa.decode(0x8124))
        self.assertIs(isa.OP_8XYE, isa.decode(0x8ABE))
        self.assertIs(isa.OP_EX9E, isa.decode(0xE59E))
        self.assertIs(isa.OP_FX1E, isa.decode(0xF31E))
        self.assertIs(isa.OP_FX65, isa.decode(0xFF65))

    def test_decode_with_fields(self):
        self.assertIs(isa.OP_DXYN, isa.decode(0xD12F))
        self.assertIs(isa.OP_3XNN, isa.decode(0x3FFF))
        self.assertIs(isa.OP_BNNN, isa.decode(0xB000))

    def test_decode_unknown(self):
        for opcode in 0x5001, 0x8008, 0x800F, 0x9001, 0xE09F, 0xE0A2, 0xF100, 0xFFFF:
            self.assertIsNone(isa.decode(opcode), hex(opcode))

    def test_dispatch_is_unambiguous(self):
        # Every (mask, match) pair names exactly one form
        self.assertEqual(len(isa.INSTRUCTIONS), len(isa.DISPATCH))


class TestForms(unittest.TestCase):
    def test_forms(self):
        self.assertEqual([isa.OP_3XNN, isa.OP_5XY0], isa.forms("SE"))
        self.assertEqual([isa.OP_3XNN, isa.OP_5XY0], isa.forms("se"))
        self.assertEqual([], isa.forms("BOGUS"))
        self.assertEqual(11, len(isa.forms("LD")))

    def test_arity(self):
        self.assertEqual((0, 0), isa.ARITY["CLS"])
        self.assertEqual((1, 2), isa.ARITY["JP"])
        self.assertEqual((2, 3), isa.ARITY["LD"])
        self.assertEqual((3, 3), isa.ARITY["DRW"])

    def test_fields(self):
        self.assertEqual([0x1, 0x2, 0xF], isa.fields(isa.OP_DXYN, 0xD12F))
        self.assertEqual([0, 0x345], isa.fields(isa.OP_BNNN, 0xB345))
        self.assertEqual([None, 0x7], isa.fields(isa.OP_FX29, 0xF729))


class TestRender(unittest.TestCase):
    def _render(self, opcode):
        return isa.render(isa.decode(opcode), opcode)

    def test_render(self):
        self.assertEqual("NOOP", self._render(0x0000))
        self.assertEqual("CLS", self._render(0x00E0))
        self.assertEqual("SYS\t123H", self._render(0x0123))
        self.assertEqual("LD\t$3, 2AH", self._render(0x632A))
        self.assertEqual("ADD\t$1, $2", self._render(0x8124))
        self.assertEqual("SHL\t$A", self._render(0x8ABE))
        self.assertEqual("JP\t$0, 345H", self._render(0xB345))
        self.assertEqual("DRW\t$1, $2, FH", self._render(0xD12F))
        self.assertEqual("LD\t$4, K", self._render(0xF40A))
        self.assertEqual("ADD\tI, $3", self._render(0xF31E))
        self.assertEqual("LD\tB, $2", self._render(0xF233))
        self.assertEqual("LD\tI, $0, $5", self._render(0xF555))
        self.assertEqual("LD\t$0, $5, I", self._render(0xF565))


class TestEncode(unittest.TestCase):
    def _operands(self, *texts):
        return [tokens.classify_operand(text) for text in texts]

    def test_accepts_by_shape(self):
        self.assertTrue(isa.accepts(isa.OP_5XY0, self._operands("$1", "$2")))
        self.assertFalse(isa.accepts(isa.OP_5XY0, self._operands("$1", "12")))
        self.assertTrue(isa.accepts(isa.OP_3XNN, self._operands("$1", "12")))
        self.assertFalse(isa.accepts(isa.OP_3XNN, self._operands("$1")))
        self.assertTrue(isa.accepts(isa.OP_FX07, self._operands("$1", "DT")))
        self.assertFalse(isa.accepts(isa.OP_FX07, self._operands("$1", "ST")))

    def test_accepts_f_and_b_as_numbers(self):
        self.assertTrue(isa.accepts(isa.OP_DXYN, self._operands("$0", "$1", "F")))
        self.assertTrue(isa.accepts(isa.OP_6XNN, self._operands("$1", "B")))
        self.assertTrue(isa.accepts(isa.OP_FX29, self._operands("F", "$1")))
        self.assertFalse(isa.accepts(isa.OP_FX29, self._operands("B", "$1")))
        self.assertFalse(isa.accepts(isa.OP_FX29, self._operands("0F", "$1")))

    def test_accepts_v0_only(self):
        self.assertTrue(isa.accepts(isa.OP_BNNN, self._operands("$0", "300")))
        self.assertFalse(isa.accepts(isa.OP_BNNN, self._operands("$1", "300")))

    def test_encode(self):
        self.assertEqual(0x632A, isa.encode(isa.OP_6XNN, [0x3, 0x2A]))
        self.assertEqual(0x8124, isa.encode(isa.OP_8XY4, [0x1, 0x2]))
        self.assertEqual(0xD12F, isa.encode(isa.OP_DXYN, [0x1, 0x2, 0xF]))
        self.assertEqual(0xB345, isa.encode(isa.OP_BNNN, [0, 0x345]))
        self.assertEqual(0xF555, isa.encode(isa.OP_FX55, [None, 0, 0x5]))
        self.assertEqual(0x00E0, isa.encode(isa.OP_00E0, []))

    def test_encode_field_overflow(self):
        self.assertRaises(MalformedOpcodeError, isa.encode, isa.OP_6XNN, [0x3, 0x100])
        self.assertRaises(MalformedOpcodeError, isa.encode, isa.OP_1NNN, [0x1000])
        self.assertRaises(MalformedOpcodeError, isa.encode, isa.OP_DXYN, [0x1, 0x2, 0x10])

    def test_encode_sys_alias(self):
        self.assertRaises(InvalidInstructionError, isa.encode, isa.OP_0NNN, [0x0E0])
        self.assertRaises(InvalidInstructionError, isa.encode, isa.OP_0NNN, [0x0EE])

    def test_encode_decode_agree(self):
        # Encoding any form with the fields read back out of an opcode gives the same opcode
        for opcode in 0x0123, 0x2FFC, 0x4A12, 0x5AB0, 0x8AB7, 0xA123, 0xC3F0, 0xEBA1, 0xFC18:
            instruction = isa.decode(opcode)
            self.assertEqual(opcode, isa.encode(instruction, isa.fields(instruction, opcode)))
