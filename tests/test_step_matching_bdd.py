"""Behavioural tests for step matching and invocation using pytest-bdd."""

from __future__ import annotations

from pathlib import Path

from pytest_bdd import scenario

from tests.steps import *  # noqa: F403

FEATURES_DIR = Path(__file__).resolve().parent.parent / "features"
FEATURE = str(FEATURES_DIR / "step_matching.feature")


@scenario(FEATURE, "a unique definition receives its captured argument")
def test_unique_match() -> None:
    """A single match is invoked with its captured argument."""


@scenario(FEATURE, "overlapping patterns are reported as ambiguous")
def test_ambiguous_match() -> None:
    """Overlapping patterns are reported rather than resolved."""


@scenario(FEATURE, "a line without any definition is undefined")
def test_undefined_step() -> None:
    """Lines without a definition are reported as undefined."""


@scenario(FEATURE, "a malformed pattern is rejected when it is registered")
def test_malformed_pattern() -> None:
    """Malformed patterns fail at registration time."""
