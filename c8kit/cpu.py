#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.

The CPU never runs on its own clock.  Whoever owns it calls step() to execute
one instruction and tick() at 60Hz to count the timers down, and decides how
many steps go in each tick.  run() is the frontend's version of that loop.

There are three states:

    RUNNING          steps execute normally
    WAITING_FOR_KEY  an Fx0A is waiting for the next key press.  Steps do
                     nothing, but ticks still run the timers
    HALTED           a fault (or halt()) stopped the machine for good

Faults never escape step().  Unknown opcodes, a bad program counter, memory
accesses out of range (including writes over the font set) and call stack
overflow/underflow all halt the machine and are handed back as a CpuFault
record.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple
from random import randint
from time import perf_counter, sleep
from . import isa
from .constants import (
    MEM_SIZE, PROGRAM_START, FONT_START, FONT_CHAR_SIZE, REG_COUNT, SYSTEM_FONT, TIMER_FREQ, DEFAULT_CLOCK_SPEED
)
from .ram import RAMError
from .stack import StackOverflowError, StackUnderflowError

CPU_ENDIAN = "big"  # CHIP-8 is big-endian
TICK_INTERVAL = 1.0 / TIMER_FREQ

STATE_RUNNING = "running"
STATE_WAITING_FOR_KEY = "waiting_for_key"
STATE_HALTED = "halted"

FAULT_UNKNOWN_OPCODE = "UnknownOpcode"
FAULT_PC_OUT_OF_RANGE = "PCOutOfRange"
FAULT_INVALID_PC = "InvalidPC"
FAULT_STACK_OVERFLOW = "StackOverflow"
FAULT_STACK_UNDERFLOW = "StackUnderflow"
FAULT_MEMORY_OUT_OF_RANGE = "MemoryOutOfRange"

CpuFault = namedtuple("CpuFault", ["kind", "opcode", "pc", "steps", "message"])


class CPUError(Exception):
    def __init__(self, kind, message):
        super().__init__(message)
        self.kind = kind


class CPU:
    def __init__(self, ram, stack, framebuffer, inputs, audio, debugger, clock_speed=None, shift_quirks=None):
        self.ram = ram
        self.stack = stack
        self.framebuffer = framebuffer
        self.inputs = inputs
        self.audio = audio
        self.debugger = debugger
        self.live_debug = self.debugger.is_live()

        self.clock_speed = DEFAULT_CLOCK_SPEED if clock_speed is None else clock_speed
        self.steps_per_tick = max(1, round(self.clock_speed / TIMER_FREQ))

        # Shift quirks: SHL stores the carried-out bit as 0/1 rather than the raw 0x80 bit
        self.shift_quirks = False if shift_quirks is None else shift_quirks

        # Instruction forms from the shared table, mapped to the code that executes them
        self.instructions = {
            isa.OP_0000: self._0000,
            isa.OP_00E0: self._00E0,
            isa.OP_00EE: self._00EE,
            isa.OP_0NNN: self._0nnn,
            isa.OP_1NNN: self._1nnn,
            isa.OP_2NNN: self._2nnn,
            isa.OP_3XNN: self._3xnn,
            isa.OP_4XNN: self._4xnn,
            isa.OP_5XY0: self._5xy0,
            isa.OP_6XNN: self._6xnn,
            isa.OP_7XNN: self._7xnn,
            isa.OP_8XY0: self._8xy0,
            isa.OP_8XY1: self._8xy1,
            isa.OP_8XY2: self._8xy2,
            isa.OP_8XY3: self._8xy3,
            isa.OP_8XY4: self._8xy4,
            isa.OP_8XY5: self._8xy5,
            isa.OP_8XY6: self._8xy6,
            isa.OP_8XY7: self._8xy7,
            isa.OP_8XYE: self._8xyE,
            isa.OP_9XY0: self._9xy0,
            isa.OP_ANNN: self._Annn,
            isa.OP_BNNN: self._Bnnn,
            isa.OP_CXNN: self._Cxnn,
            isa.OP_DXYN: self._Dxyn,
            isa.OP_EX9E: self._Ex9E,
            isa.OP_EXA1: self._ExA1,
            isa.OP_FX07: self._Fx07,
            isa.OP_FX0A: self._Fx0A,
            isa.OP_FX15: self._Fx15,
            isa.OP_FX18: self._Fx18,
            isa.OP_FX1E: self._Fx1E,
            isa.OP_FX29: self._Fx29,
            isa.OP_FX33: self._Fx33,
            isa.OP_FX55: self._Fx55,
            isa.OP_FX65: self._Fx65
        }

        self.v = memoryview(bytearray(REG_COUNT))  # Bytearrays are mutable, so this should be fast when a register is updated
        self.i = 0   # Index register
        self.dt = 0  # Delay timer
        self.st = 0  # Sound timer
        self.pc = PROGRAM_START
        self.debug_pc = PROGRAM_START
        self.opcode = 0
        self.steps = 0
        self.state = STATE_RUNNING
        self.fault = None
        self.draw_flag = False
        self.beep_flag = False

        # Performance-related vars
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.next_perf_report_time = 0

        self.initialize()

    def initialize(self):
        self.ram.resize(MEM_SIZE)
        self.ram.write_block(FONT_START, SYSTEM_FONT)
        self.stack.clear()
        self.framebuffer.clear_screen()
        self.inputs.request_next_keypress(None)  # Forget any key wait from a previous run

        for reg_num in range(REG_COUNT):
            self.v[reg_num] = 0

        self.i = 0
        self.dt = 0
        self.st = 0
        self.pc = PROGRAM_START
        self.debug_pc = PROGRAM_START
        self.opcode = 0
        self.steps = 0
        self.state = STATE_RUNNING
        self.fault = None
        self.draw_flag = False
        self.beep_flag = False

    def load_rom(self, data):
        self.ram.write_block(PROGRAM_START, data)

    def halt(self):
        self.state = STATE_HALTED

    def is_halted(self):
        return self.state == STATE_HALTED

    def run(self, start_location=PROGRAM_START):
        # Host loop: each 60Hz frame runs a batch of steps then one timer tick.  Returns the fault that halted the
        # machine, or None if the user quit.
        self.pc = start_location
        next_tick_time = perf_counter()

        while not self.is_halted():
            this_time = perf_counter()

            if this_time >= self.next_perf_report_time:
                self.next_perf_report_time = int(this_time) + 1.0
                self.framebuffer.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_ops = 0
                self.perf_counter_fps = 0

            if this_time < next_tick_time:
                sleep(next_tick_time - this_time)
                continue

            next_tick_time += TICK_INTERVAL

            if next_tick_time < this_time:
                # Fell behind (e.g. the host was suspended), so don't try to catch up
                next_tick_time = this_time + TICK_INTERVAL

            if self.inputs.process_messages():
                return None

            for _ in range(self.steps_per_tick):
                if self.state != STATE_RUNNING:
                    break

                self.step()
                self.perf_counter_ops += 1

            self.tick()
            self.perf_counter_fps += 1

        return self.fault

    def step(self):
        # Execute one instruction.  Returns a CpuFault if this step halted the machine, otherwise None.
        if self.state != STATE_RUNNING:
            return None

        self.steps += 1
        self.debug_pc = self.pc  # Keep track of the program counter before altering it, for fault reports

        try:
            self.check_pc()
            self.opcode = self.fetch()
            instruction = isa.decode(self.opcode)

            if instruction is None:
                raise CPUError(
                    FAULT_UNKNOWN_OPCODE,
                    "Opcode 0x{:04x} at address 0x{:03x} is not part of the instruction set".format(
                        self.opcode, self.debug_pc
                    )
                )

            if self.live_debug:
                self.debugger.output(self)

            self.inc_pc()  # Program counter updates after fetch, before execute
            self.instructions[instruction]()
        except CPUError as e:
            return self._halt_with_fault(e.kind, str(e))
        except RAMError as e:
            return self._halt_with_fault(FAULT_MEMORY_OUT_OF_RANGE, str(e))
        except StackOverflowError as e:
            return self._halt_with_fault(FAULT_STACK_OVERFLOW, str(e))
        except StackUnderflowError as e:
            return self._halt_with_fault(FAULT_STACK_UNDERFLOW, str(e))

        return None

    def tick(self):
        # 60Hz update: count the timers down and hand the draw and beep requests to the collaborators
        if self.is_halted():
            return

        if self.dt > 0:
            self.dt -= 1

        if self.st > 0:
            self.st -= 1

        self.beep_flag = self.st > 0
        self.audio.update(self.beep_flag)
        self.framebuffer.update(self.draw_flag)
        self.draw_flag = False

    def _halt_with_fault(self, kind, message):
        self.fault = CpuFault(kind, self.opcode, self.debug_pc, self.steps, message)
        self.state = STATE_HALTED
        return self.fault

    def check_pc(self):
        pc = self.pc

        if not isinstance(pc, int):
            raise CPUError(FAULT_INVALID_PC, "Program counter {!r} is not an address".format(pc))

        if pc < 0 or pc > MEM_SIZE - 2:
            raise CPUError(FAULT_PC_OUT_OF_RANGE, "Program counter 0x{:x} is outside memory".format(pc))

    def fetch(self):
        return int.from_bytes(self.ram.read_block(self.pc, 2), CPU_ENDIAN, signed=False)

    def inc_pc(self):
        self.pc += 2

    def store(self, location, byte):
        # Programs may read the font set but never write over it
        if FONT_START <= location < FONT_START + len(SYSTEM_FONT):
            raise CPUError(
                FAULT_MEMORY_OUT_OF_RANGE, "Write to font area at 0x{:04x} is not allowed".format(location)
            )

        self.ram.write(location, byte)

    # References to Vx, Vy, byte and addr are always in the same opcode position throughout all instructions
    @property
    def vx(self):
        return (self.opcode & 0xF00) >> 8

    @property
    def vy(self):
        return (self.opcode & 0xF0) >> 4

    @property
    def addr(self):
        return self.opcode & 0xFFF

    @property
    def byte(self):
        return self.opcode & 0xFF

    @property
    def nibble(self):
        return self.opcode & 0xF

    def _0000(self):  # NOOP
        pass

    def _0nnn(self):  # SYS addr
        # Calls into the host machine's own code on the original hardware.  Not emulated.
        pass

    def _00E0(self):  # CLS
        self.framebuffer.clear_screen()
        self.draw_flag = True

    def _00EE(self):  # RET
        # The stack holds the address of the CALL itself
        self.pc = self.stack.pop() + 2

    def _1nnn(self):  # JP addr
        self.pc = self.addr

    def _2nnn(self):  # CALL addr
        self.stack.push(self.debug_pc)
        self.pc = self.addr

    def _3xnn(self):  # SE Vx, byte
        if self.v[self.vx] == self.byte:
            self.inc_pc()

    def _4xnn(self):  # SNE Vx, byte
        if self.v[self.vx] != self.byte:
            self.inc_pc()

    def _5xy0(self):  # SE Vx, Vy
        if self.v[self.vx] == self.v[self.vy]:
            self.inc_pc()

    def _6xnn(self):  # LD Vx, byte
        self.v[self.vx] = self.byte

    def _7xnn(self):  # ADD Vx, byte
        vx = self.vx
        self.v[vx] = (self.v[vx] + self.byte) & 0xFF  # Vf is not affected

    def _8xy0(self):  # LD Vx, Vy
        self.v[self.vx] = self.v[self.vy]

    def _8xy1(self):  # OR Vx, Vy
        self.v[self.vx] |= self.v[self.vy]

    def _8xy2(self):  # AND Vx, Vy
        self.v[self.vx] &= self.v[self.vy]

    def _8xy3(self):  # XOR Vx, Vy
        self.v[self.vx] ^= self.v[self.vy]

    def _8xy4(self):  # ADD Vx, Vy
        vx = self.vx
        val = self.v[vx] + self.v[self.vy]
        self.v[vx] = val & 0xFF
        self.v[0xF] = int(val > 0xFF)  # Vf is set when carrying

    def _post_8xy5_8xy7(self, val):  # Post-SUB/SUBN
        self.v[self.vx] = val & 0xFF
        # Vf is set when NOT borrowing, and this should happen AFTER Vx is set, as sometimes VF is specified in the
        # parameters.
        self.v[0xF] = int(val >= 0)

    def _8xy5(self):  # SUB Vx, Vy
        self._post_8xy5_8xy7(self.v[self.vx] - self.v[self.vy])

    def _8xy6(self):  # SHR Vx
        vx = self.vx
        val = self.v[vx]
        self.v[vx] = val >> 1
        self.v[0xF] = val & 0x1

    def _8xy7(self):  # SUBN Vx, Vy
        self._post_8xy5_8xy7(self.v[self.vy] - self.v[self.vx])

    def _8xyE(self):  # SHL Vx
        vx = self.vx
        val = self.v[vx]
        self.v[vx] = (val << 1) & 0xFF
        # Unless quirks are on, the flag is the masked top bit itself (0x80), not 1
        self.v[0xF] = (val >> 7) if self.shift_quirks else (val & 0x80)

    def _9xy0(self):  # SNE Vx, Vy
        if self.v[self.vx] != self.v[self.vy]:
            self.inc_pc()

    def _Annn(self):  # LD I, addr
        self.i = self.addr

    def _Bnnn(self):  # JP V0, addr
        # Not masked.  A target past the top of memory halts the machine on the next step.
        self.pc = self.v[0] + self.addr

    def _Cxnn(self):  # RND Vx, byte
        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[self.vx] = randint(0, 0xFF) & self.byte

    def _Dxyn(self):  # DRW Vx, Vy, nibble
        height = self.nibble
        vid_width, vid_height = self.framebuffer.get_vid_size()

        # The sprite's start wraps, but anything running off the right or bottom edge is clipped
        vx_pos = self.v[self.vx] % vid_width
        vy_pos = self.v[self.vy] % vid_height
        collided = False
        sprite = self.ram.read_block(self.i, height) if height else ()

        for y, spr_data in enumerate(sprite):
            for x in range(8):
                if spr_data & (0x80 >> x) and self.framebuffer.xor_pixel(vx_pos + x, vy_pos + y):
                    # Don't stop drawing.  Set the flag, and never unset it for this sprite.
                    collided = True

        self.v[0xF] = int(collided)
        self.draw_flag = True

    def _Ex9E(self):  # SKP Vx
        if self.inputs.is_key_down(self.v[self.vx]):
            self.inc_pc()

    def _ExA1(self):  # SKNP Vx
        if not self.inputs.is_key_down(self.v[self.vx]):
            self.inc_pc()

    def _Fx07(self):  # LD Vx, DT
        self.v[self.vx] = self.dt

    def _Fx0A(self):  # LD Vx, K
        # Steps are suspended until the inputs report the next press, but the timers keep running.  The program
        # counter already points past this instruction.
        vx = self.vx
        self.state = STATE_WAITING_FOR_KEY
        self.inputs.request_next_keypress(lambda key: self._keypress_received(vx, key))

    def _keypress_received(self, vx, key):
        if self.state != STATE_WAITING_FOR_KEY:
            return

        self.v[vx] = key
        self.state = STATE_RUNNING

    def _Fx15(self):  # LD DT, Vx
        self.dt = self.v[self.vx]

    def _Fx18(self):  # LD ST, Vx
        self.st = self.v[self.vx]

    def _Fx1E(self):  # ADD I, Vx
        val = self.i + self.v[self.vx]
        self.v[0xF] = int(val > 0xFFF)  # Range overflow flag
        self.i = val & 0xFFFF

    def _Fx29(self):  # LD F, Vx
        self.i = FONT_START + FONT_CHAR_SIZE * self.v[self.vx]

    def _Fx33(self):  # LD B, Vx
        val = self.v[self.vx]
        i = self.i
        self.store(i, val // 100)             # Most-significant digit
        self.store(i + 1, (val // 10) % 10)  # Middle digit
        self.store(i + 2, val % 10)          # Least-significant digit

    def _Fx55(self):  # LD [I], Vx
        i = self.i

        for reg in range(self.vx + 1):
            self.store(i + reg, self.v[reg])

    def _Fx65(self):  # LD Vx, [I]
        i = self.i

        for reg in range(self.vx + 1):
            self.v[reg] = self.ram.read(i + reg)
