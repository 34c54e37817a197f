"""Global test configuration and shared fixtures."""

from __future__ import annotations

import logging
import typing as t

import pytest

from stepwright.context import Context

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from stepwright.runner import Scenario

pytest_plugins = ("stepwright.pytest_plugin", "pytester")


@pytest.fixture(autouse=True)
def debug_logging(caplog: pytest.LogCaptureFixture) -> None:
    """Capture stepwright debug logs so failures show registry activity."""
    caplog.set_level(logging.DEBUG, logger="stepwright")


@pytest.fixture
def world() -> Context:
    """Provide the context shared by step lines run within one test."""
    return Context()


@pytest.fixture
def hook_log() -> list[str]:
    """Provide the log hooks write to."""
    return []


@pytest.fixture
def queued_scenarios() -> list[Scenario]:
    """Provide the scenarios queued for the next suite run."""
    return []
