"""
Jump-table interpreter.

The program is sanitized and its loops are resolved once, before a tape is
allocated. Execution is a flat dispatch loop over the instruction sequence;
both bracket directions are resolved through the precomputed LoopTable.
"""

import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional, Tuple, Union

import numpy as np

from .errors import OutputError, StepLimitExceeded
from .instructions import Instruction, sanitize
from .loops import LoopTable, resolve_loops

logger = logging.getLogger(__name__)

TAPE_SIZE = 30000
CELL_MODULUS = 256


class Tape:
    """Circular memory of TAPE_SIZE unsigned byte cells plus the data pointer."""

    def __init__(self, size: int = TAPE_SIZE):
        self.cells = np.zeros(size, dtype=np.uint8)
        self.pointer = 0

    def __len__(self):
        return len(self.cells)

    def move_right(self):
        self.pointer += 1
        if self.pointer >= len(self.cells):
            self.pointer = 0

    def move_left(self):
        self.pointer -= 1
        if self.pointer < 0:
            self.pointer = len(self.cells) - 1

    # Arithmetic goes through int so numpy never sees a uint8 overflow.
    def increment(self):
        self.cells[self.pointer] = (int(self.cells[self.pointer]) + 1) % CELL_MODULUS

    def decrement(self):
        self.cells[self.pointer] = (int(self.cells[self.pointer]) - 1) % CELL_MODULUS

    def read(self) -> int:
        return int(self.cells[self.pointer])

    def write(self, value: int):
        self.cells[self.pointer] = value % CELL_MODULUS

    def snapshot(self, start: int = 0, stop: Optional[int] = None) -> bytes:
        return self.cells[start:stop].tobytes()


@dataclass(frozen=True)
class Program:
    instructions: Tuple[Instruction, ...]
    loops: LoopTable

    @classmethod
    def from_source(cls, source: str) -> "Program":
        """Sanitize and resolve loops. Raises UnbalancedLoopError."""
        instructions = sanitize(source)
        loops = resolve_loops(instructions)
        logger.debug("Program: %d instructions, %d loops", len(instructions), len(loops))
        return cls(instructions, loops)

    def __len__(self):
        return len(self.instructions)


class Interpreter:
    def __init__(self, program: Program, stdin: BinaryIO, stdout: BinaryIO,
                 tape: Optional[Tape] = None, step_limit: Optional[int] = None):
        self.program = program
        self.stdin = stdin
        self.stdout = stdout
        self.tape = tape if tape is not None else Tape()
        self.step_limit = step_limit or None
        self.instruction_pointer = 0
        self.steps = 0

    def run(self) -> Tape:
        """Execute until the instruction pointer runs off the end of the program."""
        code = self.program.instructions
        close_of = self.program.loops.close_of
        open_of = self.program.loops.open_of
        tape = self.tape
        ip = self.instruction_pointer

        try:
            while ip < len(code):
                if self.step_limit is not None and self.steps >= self.step_limit:
                    self._flush()
                    raise StepLimitExceeded(self.steps)
                self.steps += 1
                op = code[ip]

                if op is Instruction.RIGHT:
                    tape.move_right()
                elif op is Instruction.LEFT:
                    tape.move_left()
                elif op is Instruction.INCREMENT:
                    tape.increment()
                elif op is Instruction.DECREMENT:
                    tape.decrement()
                elif op is Instruction.OUTPUT:
                    self._output(tape.read())
                elif op is Instruction.INPUT:
                    tape.write(self._input())
                elif op is Instruction.LOOP_OPEN:
                    if tape.read() == 0:
                        ip = close_of[ip] + 1
                        continue
                elif op is Instruction.LOOP_CLOSE:
                    if tape.read() != 0:
                        ip = open_of[ip] + 1
                        continue
                else:
                    raise RuntimeError(f"Invalid instruction {op!r} at {ip} in sanitized program")

                ip += 1
        finally:
            self.instruction_pointer = ip

        self._flush()
        logger.debug("Terminated after %d steps", self.steps)
        return tape

    def _output(self, value: int):
        try:
            self.stdout.write(bytes((value,)))
        except OSError as e:
            raise OutputError(f"Failed to write to output: {e}") from e

    def _flush(self):
        try:
            self.stdout.flush()
        except OSError as e:
            raise OutputError(f"Failed to flush output: {e}") from e

    def _input(self) -> int:
        """One byte from stdin; end-of-stream or a read error yields 0."""
        self._flush()
        try:
            data = self.stdin.read(1)
        except (OSError, ValueError) as e:
            logger.debug("Input read failed, substituting 0: %s", e)
            return 0
        if not data:
            return 0
        return data[0]


def run_program(source: str, input_data: Union[bytes, str] = b"",
                step_limit: Optional[int] = None) -> bytes:
    """Execute source with input_data as stdin and return everything it wrote."""
    if isinstance(input_data, str):
        input_data = input_data.encode('latin-1')
    program = Program.from_source(source)
    stdout = io.BytesIO()
    Interpreter(program, io.BytesIO(input_data), stdout, step_limit=step_limit).run()
    return stdout.getvalue()
