"""
The instruction alphabet and the source sanitizer.

Only eight characters mean anything:
    >   Move the pointer to the right
    <   Move the pointer to the left
    +   Increment the memory cell at the pointer
    -   Decrement the memory cell at the pointer
    .   Output the byte in the cell at the pointer
    ,   Read a byte into the cell at the pointer
    [   Jump past the matching ] if the cell at the pointer is 0
    ]   Jump back to the matching [ if the cell at the pointer is nonzero

All other characters are treated as comments and ignored.
"""

from enum import Enum
from typing import Iterable, Optional, Tuple


class Instruction(Enum):
    RIGHT = '>'
    LEFT = '<'
    INCREMENT = '+'
    DECREMENT = '-'
    OUTPUT = '.'
    INPUT = ','
    LOOP_OPEN = '['
    LOOP_CLOSE = ']'

    @classmethod
    def from_char(cls, char: str) -> Optional["Instruction"]:
        return _BY_CHAR.get(char)

    def __str__(self):
        return self.value


_BY_CHAR = {member.value: member for member in Instruction}


def sanitize(source: str) -> Tuple[Instruction, ...]:
    """Translate source text to instructions, dropping every comment character."""
    return tuple(_BY_CHAR[c] for c in source if c in _BY_CHAR)


def to_source(instructions: Iterable[Instruction]) -> str:
    return ''.join(op.value for op in instructions)
