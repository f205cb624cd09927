"""FXYT language core.

The parser turns program text into an immutable command tree; the
evaluator runs that tree as a stack machine once per pixel.
"""

from __future__ import annotations

from fxyt.lang.commands import Colour, Program
from fxyt.lang.errors import EvaluationError, FxytError, ParseError
from fxyt.lang.evaluator import PixelResult, evaluate, evaluate_pixel
from fxyt.lang.parser import parse

__all__ = [
    "Colour",
    "EvaluationError",
    "FxytError",
    "ParseError",
    "PixelResult",
    "Program",
    "evaluate",
    "evaluate_pixel",
    "parse",
]
