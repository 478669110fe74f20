"""
Smoke tests for package structure and availability.

Scope
-----
These tests strictly verify that the package is installed correctly in the
environment and that top-level modules are importable.
"""

from __future__ import annotations

import importlib

from reviewkit import __version__


def test_package_importable() -> None:
    """Ensure the top-level package can be imported."""
    mod = importlib.import_module("reviewkit")
    assert mod is not None


def test_version_is_set() -> None:
    """Ensure the package exposes a valid version string."""
    assert isinstance(__version__, str)
    assert len(__version__) > 0


def test_core_modules_importable() -> None:
    """Every engine module imports without side effects beyond settings."""
    for name in (
        "reviewkit.core.contracts",
        "reviewkit.core.scoring.model",
        "reviewkit.core.scoring.schemes",
        "reviewkit.core.workflow.gate",
        "reviewkit.core.workflow.machine",
        "reviewkit.core.query.engine",
        "reviewkit.core.query.export",
        "reviewkit.core.analytics.dashboard",
        "reviewkit.core.store.memory",
        "reviewkit.core.store.storage",
    ):
        assert importlib.import_module(name) is not None


def test_cli_module_exposes_app() -> None:
    """
    Ensure the CLI module exposes the Typer 'app' object.

    The presence of 'app' is required for the console script entry point
    (`reviewkit.cli:app`).
    """
    cli = importlib.import_module("reviewkit.cli")
    assert hasattr(cli, "app"), "reviewkit.cli must expose an 'app' Typer object."
