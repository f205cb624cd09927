"""Program text -> command tree.

A single left-to-right scan.  ``[`` recurses into a nested sequence one
level deeper; the recursive call reports how many characters it consumed
so the outer scan resumes just past the matching ``]``.
"""

from __future__ import annotations

import logging

from fxyt.lang.commands import (
    MAX_NESTING,
    Arithmetic,
    ArithmeticOp,
    Axis,
    Bitwise,
    BitwiseOp,
    Clamp,
    Command,
    Comparison,
    ComparisonOp,
    Coordinate,
    DebugHalt,
    Digit,
    FrameInterval,
    Group,
    Invert,
    Literal,
    ModeIncrement,
    Program,
    StackOp,
    StackOperation,
    command_count,
)
from fxyt.lang.errors import BracketMismatchError, InvalidCharacterError, LoopNestingError

logger = logging.getLogger(__name__)

OPEN_GROUP = "["
CLOSE_GROUP = "]"

# Single-character commands, keyed by upper-cased source character.
COMMAND_TABLE: dict[str, Command] = {
    "N": Literal(),
    "M": ModeIncrement(),
    "!": Invert(),
    "C": Clamp(),
    "F": FrameInterval(),
    "W": DebugHalt(),
}
COMMAND_TABLE.update({axis.value: Coordinate(axis) for axis in Axis})
COMMAND_TABLE.update({op.value: Arithmetic(op) for op in ArithmeticOp})
COMMAND_TABLE.update({op.value: Comparison(op) for op in ComparisonOp})
COMMAND_TABLE.update({op.value: Bitwise(op) for op in BitwiseOp})
COMMAND_TABLE.update({op.value: StackOp(op) for op in StackOperation})
COMMAND_TABLE.update({str(d): Digit(d) for d in range(10)})


def parse(text: str, *, depth: int = 0) -> Program:
    """Compile *text* into a command tree.

    *depth* is the nesting level the text is parsed at; a program parsed
    at depth ``d`` may open at most ``MAX_NESTING - d`` further levels.

    Raises
    ------
    InvalidCharacterError
        Unknown or non-ASCII character (including whitespace).
    BracketMismatchError
        Stray ``]`` at the top level or ``[`` never closed.
    LoopNestingError
        More than ``MAX_NESTING`` levels of brackets.
    """
    commands, consumed = _parse_sequence(text, 0, depth)
    if consumed < len(text):
        # Only a ``]`` stops the scan early; at the top level it has no partner.
        raise BracketMismatchError(consumed)
    logger.debug("Parsed %d commands from %d characters", command_count(commands), len(text))
    return commands


def _parse_sequence(text: str, start: int, depth: int) -> tuple[Program, int]:
    """Parse from *start* until end of input or a closing bracket.

    Returns the parsed commands and the index of the character that
    stopped the scan (``len(text)`` at end of input, otherwise the index
    of the ``]``).
    """
    parsed: list[Command] = []
    index = start
    while index < len(text):
        char = text[index]
        if not char.isascii():
            raise InvalidCharacterError(index)

        if char == CLOSE_GROUP:
            if depth == 0:
                raise BracketMismatchError(index)
            return tuple(parsed), index

        if char == OPEN_GROUP:
            if depth + 1 > MAX_NESTING:
                raise LoopNestingError(index)
            children, close = _parse_sequence(text, index + 1, depth + 1)
            if close >= len(text):
                raise BracketMismatchError(index)
            parsed.append(Group(children))
            index = close + 1
            continue

        command = COMMAND_TABLE.get(char.upper())
        if command is None:
            raise InvalidCharacterError(index)
        parsed.append(command)
        index += 1

    return tuple(parsed), index
