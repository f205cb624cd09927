"""Rendering driver.

Parses a program once, then evaluates every ``(x, y)`` of every frame.
Programs that never read ``T`` produce a single frame at ``t = 0``;
otherwise one frame is rendered for each ``t`` in ``0..255``.

Pixel evaluations are independent, so scanlines may be spread over a
thread pool.  The command tree is shared read-only.  Evaluation is pure
Python, so the GIL keeps threads from running it in parallel.

Error policy
------------
``strict``
    The first evaluation error aborts the render with :class:`RenderError`.
``lenient``
    A failing pixel is painted with the sentinel colour and counted.  Only
    the earliest failure of the whole render (by t, then y, then x) is
    logged, once the last frame is done.
A debug halt (``W``) always aborts, whatever the policy.
"""

from __future__ import annotations

import concurrent.futures
import logging
import time
from dataclasses import dataclass, field

from fxyt.config.settings import Settings, get_settings
from fxyt.lang.commands import CANVAS_SIZE, FRAME_COUNT, Colour, Program, uses_time
from fxyt.lang.errors import DebugHaltError, EvaluationError, FxytError
from fxyt.lang.evaluator import evaluate_pixel
from fxyt.lang.parser import parse
from fxyt.render.canvas import FrameBuffer, new_frame_buffer, put_scanline

logger = logging.getLogger(__name__)


class RenderError(FxytError):
    """An evaluation error that aborted the whole render."""

    def __init__(self, cause: EvaluationError, x: int, y: int, t: int) -> None:
        super().__init__(f"{cause} (at x={x}, y={y}, t={t})")
        self.cause = cause
        self.x = x
        self.y = y
        self.t = t


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PixelFailure:
    """Where and why a pixel fell back to the sentinel colour."""

    x: int
    y: int
    t: int
    error: EvaluationError


@dataclass
class Frame:
    """One rendered time step."""

    t: int
    image: FrameBuffer
    interval: int | None = None
    """Display-interval hint in milliseconds from the origin pixel's ``F``,
    uninterpreted here."""
    first_failure: PixelFailure | None = None
    """Earliest failing pixel in scanline order (lenient policy only)."""


@dataclass
class Animation:
    """Every frame of a render plus bookkeeping."""

    frames: list[Frame] = field(default_factory=list)
    failures: int = 0
    """Pixels replaced by the sentinel colour (lenient policy only)."""
    render_time_ms: float = 0.0

    @property
    def animated(self) -> bool:
        return len(self.frames) > 1


@dataclass
class _Scanline:
    colours: list[Colour]
    interval: int | None = None
    failures: int = 0
    first_failure: PixelFailure | None = None


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _render_scanline(
    commands: Program, y: int, t: int, policy: str, sentinel: Colour,
) -> _Scanline:
    line = _Scanline(colours=[])
    for x in range(CANVAS_SIZE):
        try:
            result = evaluate_pixel(commands, x, y, t)
        except DebugHaltError:
            raise
        except EvaluationError as exc:
            if policy == "strict":
                raise RenderError(exc, x, y, t) from exc
            if line.first_failure is None:
                line.first_failure = PixelFailure(x, y, t, exc)
            line.failures += 1
            line.colours.append(sentinel)
            continue
        if x == 0:
            line.interval = result.interval
        line.colours.append(result.colour)
    return line


def render_frame(
    commands: Program,
    t: int = 0,
    settings: Settings | None = None,
    pool: concurrent.futures.Executor | None = None,
) -> tuple[Frame, int]:
    """Render a single frame; returns the frame and its failure count."""
    settings = settings or get_settings()
    sentinel = Colour(*settings.sentinel_colour)
    buffer = new_frame_buffer()
    args = (settings.error_policy, sentinel)

    if pool is None:
        lines = [_render_scanline(commands, y, t, *args) for y in range(CANVAS_SIZE)]
    else:
        futures = [
            pool.submit(_render_scanline, commands, y, t, *args)
            for y in range(CANVAS_SIZE)
        ]
        lines = [future.result() for future in futures]

    failures = 0
    first_failure: PixelFailure | None = None
    for y, line in enumerate(lines):
        put_scanline(buffer, y, line.colours)
        failures += line.failures
        if first_failure is None:
            first_failure = line.first_failure

    frame = Frame(
        t=t, image=buffer, interval=lines[0].interval, first_failure=first_failure,
    )
    return frame, failures


def render_commands(commands: Program, settings: Settings | None = None) -> Animation:
    """Render an already-parsed program."""
    settings = settings or get_settings()
    times = range(FRAME_COUNT) if uses_time(commands) else range(1)
    animation = Animation()
    t0 = time.perf_counter()

    pool: concurrent.futures.ThreadPoolExecutor | None = None
    if settings.workers > 1:
        pool = concurrent.futures.ThreadPoolExecutor(max_workers=settings.workers)
    try:
        for t in times:
            frame, failures = render_frame(commands, t, settings, pool)
            animation.frames.append(frame)
            animation.failures += failures
            logger.debug("Rendered frame t=%d (%d failures)", t, failures)
    finally:
        if pool is not None:
            pool.shutdown(wait=True, cancel_futures=True)

    animation.render_time_ms = (time.perf_counter() - t0) * 1000
    first = next(
        (f.first_failure for f in animation.frames if f.first_failure is not None), None,
    )
    if first is not None:
        logger.warning(
            "Pixel (%d, %d, %d) failed: %s", first.x, first.y, first.t, first.error,
        )
    logger.info(
        "Rendered %d frame(s) in %.1fs (%d failed pixels)",
        len(animation.frames),
        animation.render_time_ms / 1000,
        animation.failures,
    )
    return animation


def render(program: str, settings: Settings | None = None) -> Animation:
    """Parse and render *program*.

    Raises
    ------
    ParseError
        The program text is invalid; nothing is rendered.
    RenderError
        A pixel failed under the strict policy.
    DebugHaltError
        The program executed ``W``.
    """
    return render_commands(parse(program), settings)
