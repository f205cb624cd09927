"""Tests for frame buffer helpers."""

from __future__ import annotations

import numpy as np

from fxyt.lang.commands import Colour
from fxyt.render.canvas import (
    frame_hash,
    new_frame_buffer,
    pixel_at,
    put_pixel,
    put_scanline,
    row_index,
)


class TestFrameBuffer:
    def test_shape_and_dtype(self) -> None:
        buffer = new_frame_buffer()
        assert buffer.shape == (256, 256, 3)
        assert buffer.dtype == np.uint8
        assert not buffer.any()

    def test_fill(self) -> None:
        buffer = new_frame_buffer(Colour(1, 2, 3))
        assert buffer[10, 20].tolist() == [1, 2, 3]


class TestVerticalFlip:
    def test_row_index(self) -> None:
        assert row_index(0) == 255
        assert row_index(255) == 0

    def test_put_pixel_flips_rows(self) -> None:
        buffer = new_frame_buffer()
        put_pixel(buffer, 3, 0, Colour(9, 8, 7))
        assert buffer[255, 3].tolist() == [9, 8, 7]
        assert pixel_at(buffer, 3, 0) == Colour(9, 8, 7)

    def test_put_scanline(self) -> None:
        buffer = new_frame_buffer()
        put_scanline(buffer, 255, [Colour(x, 0, 0) for x in range(256)])
        assert buffer[0, 100].tolist() == [100, 0, 0]


class TestFrameHash:
    def test_same_frame_same_hash(self) -> None:
        assert frame_hash(new_frame_buffer()) == frame_hash(new_frame_buffer())

    def test_different_frame_different_hash(self) -> None:
        other = new_frame_buffer()
        put_pixel(other, 0, 0, Colour(1, 1, 1))
        assert frame_hash(new_frame_buffer()) != frame_hash(other)
