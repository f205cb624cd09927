"""Error taxonomy for the FXYT language.

Parse errors abort compilation of the whole program.  Evaluation errors
abort a single pixel evaluation; the renderer decides whether that also
aborts the render (see ``fxyt.render.renderer``).
"""

from __future__ import annotations


class FxytError(Exception):
    """Base class for everything the interpreter raises."""


# ---------------------------------------------------------------------------
# Parse errors
# ---------------------------------------------------------------------------


class ParseError(FxytError):
    """Program text could not be compiled into a command tree."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(message)
        self.position = position


class InvalidCharacterError(ParseError):
    def __init__(self, position: int) -> None:
        super().__init__(
            f"Found character that is not a valid FXYT command at position `{position}`",
            position,
        )


class BracketMismatchError(InvalidCharacterError):
    """A ``]`` with no open group, or a ``[`` that is never closed."""

    def __init__(self, position: int) -> None:
        ParseError.__init__(
            self, f"Found a bracket with no partner at position `{position}`", position,
        )


class LoopNestingError(ParseError):
    def __init__(self, position: int) -> None:
        super().__init__(
            f"Attempt to enter a loop more than 8 levels deep at position `{position}`",
            position,
        )


# ---------------------------------------------------------------------------
# Evaluation errors
# ---------------------------------------------------------------------------


class EvaluationError(FxytError):
    """A single pixel evaluation failed."""

    message = "Evaluation failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class StackEmptyError(EvaluationError):
    message = "Attempt to read from an empty stack"


class StackOverflowError(EvaluationError):
    message = "Attempt to push more than 8 values to the stack"


class DivideByZeroError(EvaluationError):
    message = "Attempt to divide by zero in mode 0"


class ModeOutOfRangeError(EvaluationError):
    message = "Attempt to increment mode beyond 2"


class RgbOutOfRangeError(EvaluationError):
    message = "RGB value greater than 255 or less than 0"

    def __init__(self, red: int, green: int, blue: int) -> None:
        super().__init__(f"{self.message}: ({red}, {green}, {blue})")
        self.channels = (red, green, blue)


class DebugHaltError(EvaluationError):
    """Raised by the ``W`` command; halts the whole program, not just a pixel."""

    def __init__(self, x: int, y: int, t: int, stack: list[int]) -> None:
        super().__init__(f"Debug halt at x={x} y={y} t={t} stack={stack}")
        self.x = x
        self.y = y
        self.t = t
        self.stack = stack
