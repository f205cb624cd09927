"""Command tree data model.

A parsed program is a tuple of frozen command dataclasses.  ``Group`` is
the only node with children; everything else is a leaf.  Commands are
immutable and hashable, so one tree can be shared by every pixel
evaluation (and every worker thread) without copying.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, NamedTuple, Union

CANVAS_SIZE = 256
FRAME_COUNT = 256
MAX_STACK_DEPTH = 8
MAX_NESTING = 8
MAX_MODE = 2
CHANNEL_MAX = 255


class Colour(NamedTuple):
    red: int
    green: int
    blue: int


BLACK = Colour(0, 0, 0)
RED = Colour(255, 0, 0)


# ---------------------------------------------------------------------------
# Operator enums (value = source character)
# ---------------------------------------------------------------------------


class Axis(Enum):
    X = "X"
    Y = "Y"
    T = "T"


class ArithmeticOp(Enum):
    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    DIVIDE = "/"
    MODULUS = "%"


class ComparisonOp(Enum):
    EQUALS = "="
    LESS_THAN = "<"
    GREATER_THAN = ">"


class BitwiseOp(Enum):
    XOR = "^"
    AND = "&"
    OR = "|"


class StackOperation(Enum):
    DUPLICATE = "D"
    POP = "P"
    SWAP = "S"
    ROTATE = "R"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Coordinate:
    """Push x, y or t."""

    axis: Axis


@dataclass(frozen=True)
class Literal:
    """``N``: start a new integer literal by pushing 0."""


@dataclass(frozen=True)
class Digit:
    """Append a decimal digit to the literal on top of the stack."""

    value: int


@dataclass(frozen=True)
class Arithmetic:
    op: ArithmeticOp


@dataclass(frozen=True)
class ModeIncrement:
    """``M``: bump the divide-by-zero policy register."""


@dataclass(frozen=True)
class Comparison:
    op: ComparisonOp


@dataclass(frozen=True)
class Invert:
    """``!``: logical not."""


@dataclass(frozen=True)
class Bitwise:
    op: BitwiseOp


@dataclass(frozen=True)
class Clamp:
    """``C``: clip the top value to [0, 255]."""


@dataclass(frozen=True)
class StackOp:
    op: StackOperation


@dataclass(frozen=True)
class Group:
    """A bracketed sub-sequence sharing the enclosing stack and mode."""

    children: tuple[Command, ...]


@dataclass(frozen=True)
class FrameInterval:
    """``F``: report the top of the stack as the frame display interval."""


@dataclass(frozen=True)
class DebugHalt:
    """``W``: dump the machine state and stop the program."""


Command = Union[
    Coordinate,
    Literal,
    Digit,
    Arithmetic,
    ModeIncrement,
    Comparison,
    Invert,
    Bitwise,
    Clamp,
    StackOp,
    Group,
    FrameInterval,
    DebugHalt,
]

Program = tuple[Command, ...]


# ---------------------------------------------------------------------------
# Tree queries
# ---------------------------------------------------------------------------


def iter_commands(commands: Program) -> Iterator[Command]:
    """Yield every leaf command in source order, descending into groups."""
    for command in commands:
        if isinstance(command, Group):
            yield from iter_commands(command.children)
        else:
            yield command


def command_count(commands: Program) -> int:
    """Number of leaf commands; group brackets are not counted."""
    return sum(1 for _ in iter_commands(commands))


def group_count(commands: Program) -> int:
    total = 0
    for command in commands:
        if isinstance(command, Group):
            total += 1 + group_count(command.children)
    return total


def max_nesting(commands: Program) -> int:
    """Deepest group nesting in the tree (0 for a flat program)."""
    depths = [
        1 + max_nesting(command.children)
        for command in commands
        if isinstance(command, Group)
    ]
    return max(depths, default=0)


def uses_time(commands: Program) -> bool:
    """True if the program reads the time axis anywhere."""
    return any(
        isinstance(command, Coordinate) and command.axis is Axis.T
        for command in iter_commands(commands)
    )
