#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import os
import tempfile
import unittest
from c8kit.hostio import Loader
from c8kit.toolchain import default_output_path, handle_instruction


class TestToolchain(unittest.TestCase):
    def setUp(self):
        self.loader = Loader()
        self.temp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.temp_dir.cleanup()

    def _path(self, filename):
        return os.path.join(self.temp_dir.name, filename)

    def _args(self, input_file, action, output_file=None):
        return {"input_file": input_file, "action": action, "output_file": output_file, "verbose": False}

    def test_default_output_path(self):
        self.assertEqual(
            os.path.join("roms", "pong.rom"), default_output_path(os.path.join("roms", "pong.chip8"), "assemble")
        )
        self.assertEqual("pong.chip8", default_output_path("pong.rom", "disassemble"))

    def test_assemble(self):
        self.loader.save_text(self._path("test.chip8"), "CLS\nLD $3, 2AH\n")

        with self.assertLogs("c8kit.toolchain", level="INFO"):
            self.assertEqual(0, handle_instruction(self._args(self._path("test.chip8"), "assemble")))

        self.assertEqual(b"\x00\xE0\x63\x2A", self.loader.load_binary(self._path("test.rom")))

    def test_disassemble(self):
        self.loader.save_binary(self._path("test.rom"), b"\x00\xE0\x63\x2A")

        with self.assertLogs("c8kit.toolchain", level="INFO"):
            self.assertEqual(
                0, handle_instruction(self._args(self._path("test.rom"), "disassemble", self._path("out.txt")))
            )

        self.assertEqual("0x0200:\tCLS\n0x0202:\tLD\t$3, 2AH\n", self.loader.load_text(self._path("out.txt")))

    def test_assemble_error(self):
        self.loader.save_text(self._path("bad.chip8"), "CLS\nBOGUS $1, 2\n")

        with self.assertLogs("c8kit", level="ERROR") as logs:
            self.assertEqual(1, handle_instruction(self._args(self._path("bad.chip8"), "assemble")))

        self.assertTrue(any("UnknownMnemonic on line 2" in line for line in logs.output))
        self.assertFalse(os.path.exists(self._path("bad.rom")))

    def test_unknown_action(self):
        with self.assertLogs("c8kit.toolchain", level="ERROR"):
            self.assertEqual(1, handle_instruction(self._args(self._path("test.chip8"), "compile")))

    def test_missing_file(self):
        with self.assertLogs("c8kit.toolchain", level="ERROR"):
            self.assertEqual(1, handle_instruction(self._args(self._path("missing.rom"), "disassemble")))
