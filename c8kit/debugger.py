#!/usr/bin/env python3

"""
CPU Debugger

If enabled, this will output information before each instruction executed:
    * All 16 of the [V] registers, starting with most significant (Vf) and
      reducing to least significant (V0)
    * I  - Index register
    * DT - Delay timer
    * ST - Sound timer
    * PC - Program counter
    * OP - OpCode number
    * IN - Decoded instruction, as the disassembler would write it

If a crash occurs, all of the above will be outputted, with the addition of:
    * Stack - Stack contents
    * Fault - What halted the machine
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from . import isa


class Debugger:
    def __init__(self):
        self.live = False

    def debug(self, cpu, verbose=False):
        instruction = isa.decode(cpu.opcode)
        instruction_str = "(Unknown)" if instruction is None else isa.render(instruction, cpu.opcode)

        # A program counter that failed its checks may not even be a number
        pc_str = "0x{:03x}".format(cpu.debug_pc) if isinstance(cpu.debug_pc, int) else repr(cpu.debug_pc)

        debug_str = (
            "V: 0x" + ("{:02x}" * 16) + " I: 0x{:04x} DT: 0x{:02x} ST: 0x{:02x} PC: {} OP: 0x{:04x} IN: {}"
        ).format(
            *[cpu.v[reg_num] for reg_num in range(15, -1, -1)] +
            [cpu.i, cpu.dt, cpu.st, pc_str, cpu.opcode, instruction_str.replace("\t", " ")]
        )

        if verbose:
            stack_items = cpu.stack.get_items()
            stack_str = (" 0x{:03x}" * len(stack_items)).format(*stack_items)
            debug_str += ("\nStack:{}").format(stack_str or " (Empty)")

            if cpu.fault is not None:
                debug_str += "\nFault: {} after {} steps - {}".format(cpu.fault.kind, cpu.fault.steps, cpu.fault.message)

        return debug_str

    def set_live(self, enabled):
        self.live = enabled

    def is_live(self):
        return self.live

    def output(self, cpu):
        print(self.debug(cpu))
