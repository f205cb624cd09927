"""Frame buffers.

A frame is a ``(256, 256, 3)`` ``uint8`` numpy array, row-major.  The
vertical axis is flipped: scanline ``y`` lives in row ``255 - y``, so
row 0 is the top of the image and holds the largest ``y``.
"""

from __future__ import annotations

import hashlib

import numpy as np

from fxyt.lang.commands import CANVAS_SIZE, Colour

FrameBuffer = np.ndarray  # (CANVAS_SIZE, CANVAS_SIZE, 3) uint8


def new_frame_buffer(fill: Colour | None = None) -> FrameBuffer:
    """Allocate a black (or *fill*-coloured) frame buffer."""
    buffer = np.zeros((CANVAS_SIZE, CANVAS_SIZE, 3), dtype=np.uint8)
    if fill is not None:
        buffer[:, :] = fill
    return buffer


def row_index(y: int) -> int:
    """Array row holding scanline *y*."""
    return CANVAS_SIZE - 1 - y


def put_pixel(buffer: FrameBuffer, x: int, y: int, colour: Colour) -> None:
    buffer[row_index(y), x] = colour


def put_scanline(buffer: FrameBuffer, y: int, colours: list[Colour]) -> None:
    """Write a full scanline (``colours[x]`` for x = 0..255)."""
    buffer[row_index(y)] = np.asarray(colours, dtype=np.uint8)


def pixel_at(buffer: FrameBuffer, x: int, y: int) -> Colour:
    """Read back the colour at canvas coordinate ``(x, y)``."""
    r, g, b = buffer[row_index(y), x].tolist()
    return Colour(r, g, b)


def frame_hash(buffer: FrameBuffer) -> str:
    """Stable digest of a frame for deduplication and tests."""
    return hashlib.sha256(buffer.tobytes()).hexdigest()
