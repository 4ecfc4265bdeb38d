#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading ROM binaries for later writing into RAM, and reading and
writing the files the assembler and disassembler work on.  Assembly source is
always treated as UTF-8 text.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

TEXT_ENCODING = "utf-8"


class Loader:
    def load_binary(self, filename):
        with open(filename, "rb") as f:
            return f.read()

    def load_text(self, filename):
        with open(filename, "r", encoding=TEXT_ENCODING) as f:
            return f.read()

    def save_binary(self, filename, data):
        with open(filename, "wb") as f:
            f.write(data)

    def save_text(self, filename, text):
        with open(filename, "w", encoding=TEXT_ENCODING) as f:
            f.write(text)
