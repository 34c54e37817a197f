"""Runner configuration and environment overrides."""

from __future__ import annotations

import dataclasses as dc
import os
import typing as t

STRICT_ENV: t.Final[str] = "STEPWRIGHT_STRICT"
STOP_HOOKS_ENV: t.Final[str] = "STEPWRIGHT_STOP_HOOKS_ON_FAILURE"

_TRUTHY: t.Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSY: t.Final[frozenset[str]] = frozenset({"0", "false", "no", "off", ""})


def parse_bool(value: str, *, name: str) -> bool:
    """Interpret an environment value as a boolean flag."""
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    msg = (
        f"{name} must be a boolean flag (1/0, true/false, yes/no, on/off), "
        f"got {value!r}"
    )
    raise ValueError(msg)


@dc.dataclass(frozen=True, slots=True)
class RunnerConfig:
    """Policy knobs applied by :class:`stepwright.runner.Runner`.

    Attributes
    ----------
    strict:
        Treat pending scenarios, including those with undefined steps, as run
        failures.
    stop_hooks_on_failure:
        Stop running the remaining hooks at a lifecycle point once one of them
        fails. By default every hook runs and failures are only recorded.
    """

    strict: bool = False
    stop_hooks_on_failure: bool = False

    @classmethod
    def from_env(cls, environ: t.Mapping[str, str] | None = None) -> RunnerConfig:
        """Build a configuration from ``STEPWRIGHT_*`` environment variables."""
        env = os.environ if environ is None else environ
        values: dict[str, bool] = {}
        if (raw := env.get(STRICT_ENV)) is not None:
            values["strict"] = parse_bool(raw, name=STRICT_ENV)
        if (raw := env.get(STOP_HOOKS_ENV)) is not None:
            values["stop_hooks_on_failure"] = parse_bool(raw, name=STOP_HOOKS_ENV)
        return cls(**values)

    def with_overrides(self, **changes: bool) -> RunnerConfig:
        """Return a copy with *changes* applied."""
        return dc.replace(self, **changes)


__all__ = ["STOP_HOOKS_ENV", "STRICT_ENV", "RunnerConfig", "parse_bool"]
