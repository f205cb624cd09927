"""FXYT — a stack-based, coordinate-driven pixel-shading language.

Programs are parsed once into a command tree and evaluated per pixel of a
256×256 canvas, optionally over 256 time steps, producing RGB frames.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
