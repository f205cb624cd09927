"""Environment-driven renderer settings.

All values are loaded from environment variables (prefix ``FXYT_``) or a
``.env`` file in the working directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Rendering and output configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FXYT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    error_policy: Literal["strict", "lenient"] = "strict"
    """``strict`` aborts the render on the first pixel error; ``lenient``
    paints ``sentinel_colour`` and keeps going."""
    sentinel_colour: tuple[int, int, int] = (255, 0, 255)
    workers: int = Field(default=1, ge=1, le=64)
    """Threads used to evaluate rows of a frame.  Pixel evaluation is pure
    Python and holds the GIL, so extra threads do not speed up a render."""
    frame_interval_ms: int = Field(default=100, ge=0, le=655350)
    """Display time for frames that carry no ``F`` hint."""
    output_path: Path = Path("output.gif")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("sentinel_colour")
    @classmethod
    def _channels_in_range(cls, value: tuple[int, int, int]) -> tuple[int, int, int]:
        if not all(0 <= c <= 255 for c in value):
            raise ValueError("sentinel_colour channels must be within 0-255")
        return value


# Module-level singleton — import and use directly.
settings = Settings()


def get_settings() -> Settings:
    """Return the module-level Settings singleton."""
    return settings
