"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from reviewkit.core.settings import load_settings


@pytest.fixture(autouse=True)  # type: ignore[misc]
def _fresh_settings() -> Iterator[None]:
    """Drop cached settings after each test so env overrides never leak."""
    yield
    load_settings.cache_clear()
