"""FXYT CLI — Typer-based entry point.

Commands
--------
render      Render a program to an animated GIF.
check       Parse a program and report on its structure.
pixel       Evaluate a single pixel and print its colour.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer

from fxyt.config.settings import get_settings
from fxyt.lang.commands import command_count, max_nesting, uses_time
from fxyt.lang.errors import FxytError
from fxyt.lang.evaluator import evaluate_pixel
from fxyt.lang.parser import parse

app = typer.Typer(
    name="fxyt",
    help="FXYT — a stack-based, coordinate-driven pixel-shading language.",
    add_completion=False,
)


def _setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, get_settings().log_level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(name)-26s  %(levelname)-7s  %(message)s",
    )


def _fail(exc: Exception) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def render(
    program: str = typer.Argument(..., help='FXYT program text, e.g. "XY^".'),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="GIF file to write."),
    policy: Optional[str] = typer.Option(
        None, "--policy", help="Pixel error policy: strict or lenient.",
    ),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Render threads."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Render PROGRAM and write it as an animated GIF."""
    _setup_logging(verbose)
    from fxyt.render.export import write_gif
    from fxyt.render.renderer import render_commands

    settings = get_settings()
    overrides: dict[str, object] = {}
    if policy is not None:
        if policy not in ("strict", "lenient"):
            _fail(ValueError(f"Unknown policy: {policy}"))
        overrides["error_policy"] = policy
    if workers is not None:
        overrides["workers"] = workers
    if overrides:
        settings = settings.model_copy(update=overrides)

    try:
        animation = render_commands(parse(program), settings)
    except FxytError as exc:
        _fail(exc)

    path = write_gif(animation, output or settings.output_path, settings.frame_interval_ms)
    typer.echo(f"Wrote {len(animation.frames)} frame(s) to {path}")
    if animation.failures:
        typer.echo(f"{animation.failures} pixel(s) failed and were painted with the sentinel colour.")


@app.command()
def check(
    program: str = typer.Argument(..., help="FXYT program text."),
) -> None:
    """Parse PROGRAM without rendering it."""
    _setup_logging()
    try:
        commands = parse(program)
    except FxytError as exc:
        _fail(exc)

    typer.echo(f"Commands: {command_count(commands)}")
    typer.echo(f"Nesting:  {max_nesting(commands)}")
    typer.echo(f"Animated: {'yes' if uses_time(commands) else 'no'}")


@app.command()
def pixel(
    program: str = typer.Argument(..., help="FXYT program text."),
    x: int = typer.Argument(..., min=0, max=255),
    y: int = typer.Argument(..., min=0, max=255),
    t: int = typer.Option(0, "--t", "-t", min=0, max=255, help="Time step."),
) -> None:
    """Evaluate PROGRAM at a single (x, y, t) and print the colour."""
    _setup_logging()
    try:
        result = evaluate_pixel(parse(program), x, y, t)
    except FxytError as exc:
        _fail(exc)

    red, green, blue = result.colour
    typer.echo(f"({red}, {green}, {blue})")
    if result.interval is not None:
        typer.echo(f"interval: {result.interval}")


def main() -> int:
    """Entry point for the ``fxyt`` console script."""
    app()
    return 0
