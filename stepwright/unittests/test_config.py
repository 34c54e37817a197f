"""Unit tests for :mod:`stepwright.config`."""

from __future__ import annotations

import pytest

from stepwright.config import STOP_HOOKS_ENV, STRICT_ENV, RunnerConfig, parse_bool


def test_defaults() -> None:
    """Without overrides the runner is lenient and runs every hook."""
    config = RunnerConfig.from_env({})
    assert config == RunnerConfig(strict=False, stop_hooks_on_failure=False)


@pytest.mark.parametrize("raw", ["1", "true", "YES", " on "])
def test_truthy_environment_values(raw: str) -> None:
    """Common truthy spellings enable a flag."""
    config = RunnerConfig.from_env({STRICT_ENV: raw, STOP_HOOKS_ENV: raw})
    assert config.strict
    assert config.stop_hooks_on_failure


@pytest.mark.parametrize("raw", ["0", "false", "No", "off", ""])
def test_falsy_environment_values(raw: str) -> None:
    """Common falsy spellings disable a flag."""
    assert not RunnerConfig.from_env({STRICT_ENV: raw}).strict


def test_invalid_environment_value() -> None:
    """Unrecognised values raise a descriptive error."""
    with pytest.raises(ValueError, match=STRICT_ENV):
        RunnerConfig.from_env({STRICT_ENV: "maybe"})


def test_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """``os.environ`` is used when no mapping is given."""
    monkeypatch.setenv(STRICT_ENV, "1")
    monkeypatch.delenv(STOP_HOOKS_ENV, raising=False)
    assert RunnerConfig.from_env() == RunnerConfig(strict=True)


def test_with_overrides_returns_copy() -> None:
    """Overrides never mutate the original configuration."""
    base = RunnerConfig()
    changed = base.with_overrides(strict=True)
    assert changed.strict
    assert not base.strict
    assert parse_bool("true", name="x")
