"""Shared test fixtures for FXYT.

Provides pre-built settings objects so rendering tests do not depend on
the caller's environment or a stray ``.env`` file.
"""

from __future__ import annotations

import pytest

from fxyt.config.settings import Settings


@pytest.fixture()
def strict_settings() -> Settings:
    """Default strict-policy settings, single-threaded."""
    return Settings(_env_file=None, error_policy="strict", workers=1)


@pytest.fixture()
def lenient_settings() -> Settings:
    """Lenient policy with a recognisable sentinel colour."""
    return Settings(
        _env_file=None,
        error_policy="lenient",
        sentinel_colour=(1, 2, 3),
        workers=1,
    )


@pytest.fixture()
def threaded_settings() -> Settings:
    return Settings(_env_file=None, error_policy="strict", workers=4)
