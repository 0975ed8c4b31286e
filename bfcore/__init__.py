"""Interpreter for the eight-instruction byte language on a circular 30,000-cell tape."""

from .engine import CELL_MODULUS, TAPE_SIZE, Interpreter, Program, Tape, run_program
from .errors import BrainfuckError, OutputError, StepLimitExceeded, UnbalancedLoopError
from .instructions import Instruction, sanitize, to_source
from .loops import LoopTable, find_matching_close, resolve_loops

__version__ = "0.1.0"
