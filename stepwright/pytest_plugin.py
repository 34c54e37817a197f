"""Pytest plugin providing stepwright registry and runner fixtures."""

from __future__ import annotations

import logging
import typing as t

import pytest

from .config import RunnerConfig
from .registry import DefinitionRegistry
from .runner import Runner

logger = logging.getLogger(__name__)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line and ini options for the plugin."""
    group = parser.getgroup("stepwright")
    group.addoption(
        "--stepwright-strict",
        action="store_true",
        dest="stepwright_strict",
        default=None,
        help=(
            "Fail runs containing scenarios with pending or undefined steps. "
            "Overrides the pytest.ini setting."
        ),
    )
    group.addoption(
        "--no-stepwright-strict",
        action="store_false",
        dest="stepwright_strict",
        default=None,
        help="Tolerate pending or undefined steps. Overrides pytest.ini.",
    )
    parser.addini(
        "stepwright_strict",
        "Fail runs containing scenarios with pending or undefined steps.",
        type="bool",
        default=None,
    )
    parser.addini(
        "stepwright_stop_hooks_on_failure",
        "Stop running hooks at a lifecycle point after the first failure.",
        type="bool",
        default=None,
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register plugin-specific markers."""
    config.addinivalue_line(
        "markers",
        (
            "stepwright(strict: bool = False, stop_hooks_on_failure: bool = False): "
            "override the stepwright runner configuration for a single test."
        ),
    )


def _marker_overrides(request: pytest.FixtureRequest) -> dict[str, bool]:
    """Return configuration overrides from the ``stepwright`` marker."""
    marker = request.node.get_closest_marker("stepwright")
    if marker is None:
        return {}
    unknown = set(marker.kwargs) - {"strict", "stop_hooks_on_failure"}
    if unknown:
        msg = f"Unknown stepwright marker argument(s): {sorted(unknown)}"
        raise TypeError(msg)
    return {key: bool(value) for key, value in marker.kwargs.items()}


def _resolve_config(request: pytest.FixtureRequest) -> RunnerConfig:
    # Priority order: marker > CLI option > INI setting > environment
    config = RunnerConfig.from_env()
    pytest_config = request.config

    ini_values: dict[str, bool] = {}
    for name, field in (
        ("stepwright_strict", "strict"),
        ("stepwright_stop_hooks_on_failure", "stop_hooks_on_failure"),
    ):
        value = pytest_config.getini(name)
        if isinstance(value, bool):
            ini_values[field] = bool(value)
    config = config.with_overrides(**ini_values)

    cli_value = pytest_config.getoption("stepwright_strict")
    if cli_value is not None:
        config = config.with_overrides(strict=bool(cli_value))

    return config.with_overrides(**_marker_overrides(request))


@pytest.fixture
def stepwright_config(request: pytest.FixtureRequest) -> RunnerConfig:
    """Provide the :class:`RunnerConfig` resolved for the current test."""
    return _resolve_config(request)


@pytest.fixture
def stepwright_registry() -> DefinitionRegistry:
    """Provide an empty, unfrozen :class:`DefinitionRegistry`."""
    return DefinitionRegistry()


@pytest.fixture
def stepwright_runner(
    stepwright_registry: DefinitionRegistry, stepwright_config: RunnerConfig
) -> t.Generator[Runner, None, None]:
    """Provide a :class:`Runner` over ``stepwright_registry``.

    The registry is frozen as soon as the runner is created, so register
    definitions before requesting this fixture.
    """
    try:
        yield Runner(stepwright_registry, stepwright_config)
    except Exception:
        logger.exception("Error during stepwright test execution")
        raise
