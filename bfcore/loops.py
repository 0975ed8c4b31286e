"""Bracket matching for the two loop instructions."""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from .errors import UnbalancedLoopError
from .instructions import Instruction

NO_MATCH = -1


@dataclass(frozen=True)
class LoopTable:
    """Open/close correspondence stored as two parallel position arrays.

    close_of[i] is the matching ']' for a '[' at i, open_of[j] the matching '['
    for a ']' at j. Every other slot holds NO_MATCH.
    """
    close_of: Tuple[int, ...]
    open_of: Tuple[int, ...]

    def match_close(self, position: int) -> int:
        target = self.close_of[position]
        if target == NO_MATCH:
            raise KeyError(position)
        return target

    def match_open(self, position: int) -> int:
        target = self.open_of[position]
        if target == NO_MATCH:
            raise KeyError(position)
        return target

    def pairs(self) -> Iterator[Tuple[int, int]]:
        for start, end in enumerate(self.close_of):
            if end != NO_MATCH:
                yield start, end

    def __len__(self):
        return sum(1 for _ in self.pairs())


def resolve_loops(instructions: Sequence[Instruction]) -> LoopTable:
    """Build the jump table in one pass with a stack of open positions.

    Raises UnbalancedLoopError for a ']' with nothing to close, or, after the
    scan, for the earliest '[' left open.
    """
    close_of: List[int] = [NO_MATCH] * len(instructions)
    open_of: List[int] = [NO_MATCH] * len(instructions)
    stack: List[int] = []

    for i, op in enumerate(instructions):
        if op is Instruction.LOOP_OPEN:
            stack.append(i)
        elif op is Instruction.LOOP_CLOSE:
            if not stack:
                raise UnbalancedLoopError(i, kind="close")
            start = stack.pop()
            close_of[start] = i
            open_of[i] = start

    if stack:
        raise UnbalancedLoopError(stack[0], kind="open")

    return LoopTable(tuple(close_of), tuple(open_of))


def find_matching_close(instructions: Sequence[Instruction], index: int,
                        end: Optional[int] = None) -> Optional[int]:
    """Scan forward from the '[' at index for its ']', counting nested loops.

    Returns None when the scan reaches end (default: the program length)
    without closing the loop.
    """
    if end is None:
        end = len(instructions)
    depth = 0
    for i in range(index + 1, end):
        op = instructions[i]
        if op is Instruction.LOOP_OPEN:
            depth += 1
        elif op is Instruction.LOOP_CLOSE:
            if depth == 0:
                return i
            depth -= 1
    return None
