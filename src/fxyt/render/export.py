"""Animated GIF export via Pillow."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import IO

from PIL import Image

from fxyt.render.renderer import Animation, Frame

logger = logging.getLogger(__name__)

# GIF frame delays are stored in centiseconds, as an unsigned 16-bit value.
GIF_TICK_MS = 10
GIF_MAX_DELAY_MS = 0xFFFF * GIF_TICK_MS


def frame_duration(frame: Frame, default_interval_ms: int) -> int:
    """Display time for *frame* in milliseconds, as the GIF will store it."""
    interval = default_interval_ms if frame.interval is None else frame.interval
    interval = min(max(interval, 0), GIF_MAX_DELAY_MS)
    return interval - interval % GIF_TICK_MS


def to_images(animation: Animation) -> list[Image.Image]:
    """Convert every frame buffer to an RGB Pillow image."""
    return [Image.fromarray(frame.image) for frame in animation.frames]


def _save(animation: Animation, target: Path | IO[bytes], default_interval_ms: int) -> None:
    if not animation.frames:
        raise ValueError("Animation has no frames to export.")
    images = to_images(animation)
    durations = [frame_duration(f, default_interval_ms) for f in animation.frames]
    images[0].save(
        target,
        format="GIF",
        save_all=True,
        append_images=images[1:],
        duration=durations,
        loop=0,
    )


def write_gif(animation: Animation, path: Path, default_interval_ms: int = 100) -> Path:
    """Encode *animation* as a GIF at *path* and return the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    _save(animation, path, default_interval_ms)
    logger.info("Wrote %d frame(s) to %s", len(animation.frames), path)
    return path


def encode_gif(animation: Animation, default_interval_ms: int = 100) -> bytes:
    """Encode *animation* as GIF bytes in memory."""
    buffer = io.BytesIO()
    _save(animation, buffer, default_interval_ms)
    return buffer.getvalue()
