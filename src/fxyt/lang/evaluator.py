"""Per-pixel stack machine.

Every ``(x, y, t)`` evaluation gets a fresh :class:`Machine`; the command
tree is only read.  Groups run against the same machine as their parent,
so the stack and mode register flow through brackets unchanged.

Divide-by-zero under mode 1 or 2 ends the pixel early with a fixed colour.
The sequence runner returns that colour (or ``None`` to carry on), and
every caller checks it, so the short-circuit crosses any number of
enclosing groups.
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass, field
from typing import Callable

from fxyt.lang.commands import (
    BLACK,
    CHANNEL_MAX,
    MAX_MODE,
    MAX_STACK_DEPTH,
    RED,
    Arithmetic,
    ArithmeticOp,
    Axis,
    Bitwise,
    BitwiseOp,
    Clamp,
    Colour,
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
)
from fxyt.lang.errors import (
    DebugHaltError,
    DivideByZeroError,
    ModeOutOfRangeError,
    RgbOutOfRangeError,
    StackEmptyError,
    StackOverflowError,
)

logger = logging.getLogger(__name__)

# Colour a pixel terminates with on a zero divisor, indexed by mode.
# Mode 0 raises instead.
DIVIDE_BY_ZERO_COLOURS: dict[int, Colour] = {1: BLACK, 2: RED}


def _trunc_div(left: int, right: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def _trunc_mod(left: int, right: int) -> int:
    """Remainder carrying the sign of the dividend."""
    return left - right * _trunc_div(left, right)


ARITHMETIC: dict[ArithmeticOp, Callable[[int, int], int]] = {
    ArithmeticOp.PLUS: operator.add,
    ArithmeticOp.MINUS: operator.sub,
    ArithmeticOp.TIMES: operator.mul,
    ArithmeticOp.DIVIDE: _trunc_div,
    ArithmeticOp.MODULUS: _trunc_mod,
}

COMPARISONS: dict[ComparisonOp, Callable[[int, int], bool]] = {
    ComparisonOp.EQUALS: operator.eq,
    ComparisonOp.LESS_THAN: operator.lt,
    ComparisonOp.GREATER_THAN: operator.gt,
}

BITWISE: dict[BitwiseOp, Callable[[int, int], int]] = {
    BitwiseOp.XOR: operator.xor,
    BitwiseOp.AND: operator.and_,
    BitwiseOp.OR: operator.or_,
}


# ---------------------------------------------------------------------------
# Machine state
# ---------------------------------------------------------------------------


@dataclass
class Machine:
    """Mutable state for one pixel evaluation."""

    x: int
    y: int
    t: int = 0
    stack: list[int] = field(default_factory=list)
    mode: int = 0
    interval: int | None = None
    """Frame-interval hint recorded by ``F`` (last one wins)."""

    def push(self, value: int) -> None:
        self.stack.append(value)

    def pop(self) -> int:
        if not self.stack:
            raise StackEmptyError()
        return self.stack.pop()

    def peek(self) -> int:
        if not self.stack:
            raise StackEmptyError()
        return self.stack[-1]

    def require(self, n: int) -> None:
        if len(self.stack) < n:
            raise StackEmptyError()


@dataclass(frozen=True)
class PixelResult:
    """Outcome of one pixel evaluation."""

    colour: Colour
    interval: int | None = None
    short_circuited: bool = False


# ---------------------------------------------------------------------------
# Command execution
# ---------------------------------------------------------------------------


def _stack_op(machine: Machine, op: StackOperation) -> None:
    if op is StackOperation.DUPLICATE:
        value = machine.pop()
        machine.push(value)
        machine.push(value)
    elif op is StackOperation.POP:
        machine.pop()
    elif op is StackOperation.SWAP:
        machine.require(2)
        stack = machine.stack
        stack[-1], stack[-2] = stack[-2], stack[-1]
    elif op is StackOperation.ROTATE:
        machine.require(3)
        # ..., a, b, c  ->  ..., b, c, a
        machine.stack.append(machine.stack.pop(-3))


def _execute(machine: Machine, command: Command) -> Colour | None:
    """Run one command; return a colour to terminate the pixel early."""
    if isinstance(command, Coordinate):
        if command.axis is Axis.X:
            machine.push(machine.x)
        elif command.axis is Axis.Y:
            machine.push(machine.y)
        else:
            machine.push(machine.t)

    elif isinstance(command, Literal):
        machine.push(0)

    elif isinstance(command, Digit):
        if machine.stack:
            machine.push(machine.pop() * 10 + command.value)
        else:
            machine.push(command.value)

    elif isinstance(command, Arithmetic):
        right = machine.pop()
        left = machine.pop()
        if right == 0 and command.op in (ArithmeticOp.DIVIDE, ArithmeticOp.MODULUS):
            if machine.mode == 0:
                raise DivideByZeroError()
            return DIVIDE_BY_ZERO_COLOURS[machine.mode]
        machine.push(ARITHMETIC[command.op](left, right))

    elif isinstance(command, ModeIncrement):
        machine.mode += 1
        if machine.mode > MAX_MODE:
            raise ModeOutOfRangeError()

    elif isinstance(command, Comparison):
        right = machine.pop()
        left = machine.pop()
        machine.push(int(COMPARISONS[command.op](left, right)))

    elif isinstance(command, Invert):
        machine.push(1 if machine.pop() == 0 else 0)

    elif isinstance(command, Bitwise):
        right = machine.pop()
        left = machine.pop()
        machine.push(BITWISE[command.op](left, right))

    elif isinstance(command, Clamp):
        machine.push(min(max(machine.pop(), 0), CHANNEL_MAX))

    elif isinstance(command, StackOp):
        _stack_op(machine, command.op)

    elif isinstance(command, Group):
        return run_sequence(machine, command.children)

    elif isinstance(command, FrameInterval):
        machine.interval = machine.peek()

    elif isinstance(command, DebugHalt):
        logger.warning(
            "Debug halt at (x=%d, y=%d, t=%d) mode=%d stack=%s",
            machine.x, machine.y, machine.t, machine.mode, machine.stack,
        )
        raise DebugHaltError(machine.x, machine.y, machine.t, list(machine.stack))

    else:
        raise TypeError(f"Unknown command: {command!r}")

    return None


def run_sequence(machine: Machine, commands: Program) -> Colour | None:
    """Execute *commands* in order against *machine*.

    Returns ``None`` when the sequence ran to completion, or the terminal
    colour if a command ended the pixel early.
    """
    for command in commands:
        terminal = _execute(machine, command)
        if len(machine.stack) > MAX_STACK_DEPTH:
            raise StackOverflowError()
        if terminal is not None:
            return terminal
    return None


def read_colour(stack: list[int]) -> Colour:
    """Pop blue, green, red off *stack*; missing channels default to 0."""
    blue = stack.pop() if stack else 0
    green = stack.pop() if stack else 0
    red = stack.pop() if stack else 0
    if not all(0 <= c <= CHANNEL_MAX for c in (red, green, blue)):
        raise RgbOutOfRangeError(red, green, blue)
    return Colour(red, green, blue)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def evaluate_pixel(commands: Program, x: int, y: int, t: int = 0) -> PixelResult:
    """Evaluate one pixel, returning the colour and any frame-interval hint."""
    machine = Machine(x=x, y=y, t=t)
    terminal = run_sequence(machine, commands)
    if terminal is not None:
        return PixelResult(colour=terminal, interval=machine.interval, short_circuited=True)
    return PixelResult(colour=read_colour(machine.stack), interval=machine.interval)


def evaluate(commands: Program, x: int, y: int, t: int = 0) -> Colour:
    """Evaluate one pixel and return its colour.

    Raises an :class:`~fxyt.lang.errors.EvaluationError` subclass on
    failure.
    """
    return evaluate_pixel(commands, x, y, t).colour
