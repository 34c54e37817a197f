"""Behavioural tests for scenario execution using pytest-bdd."""

from __future__ import annotations

from pathlib import Path

from pytest_bdd import scenario

from tests.steps import *  # noqa: F403

FEATURES_DIR = Path(__file__).resolve().parent.parent / "features"
FEATURE = str(FEATURES_DIR / "scenario_outcomes.feature")


@scenario(FEATURE, "steps share one context")
def test_shared_context() -> None:
    """Mutations by one step are visible to the next."""


@scenario(FEATURE, "a pending step makes the scenario pending")
def test_pending_scenario() -> None:
    """A pending step skips the rest and leaves the scenario pending."""


@scenario(FEATURE, "pending scenarios fail a strict run")
def test_strict_run() -> None:
    """Strict runs treat pending scenarios as failures."""


@scenario(FEATURE, "a failure stays inside its scenario")
def test_failure_isolated() -> None:
    """A failing scenario does not affect its neighbours."""


@scenario(FEATURE, "an undefined step leaves the scenario pending")
def test_undefined_scenario() -> None:
    """Undefined steps are reported without crashing."""


@scenario(FEATURE, "closures loaded from a definition file")
def test_definition_file() -> None:
    """Definition files populate the registry through injected handles."""
