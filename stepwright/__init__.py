"""Closure-based step and hook definitions for behaviour-driven tests.

Definitions are registered against a :class:`DefinitionRegistry`, matched
against keyword-stripped step lines and invoked with one shared
:class:`Context` per scenario.
"""

from __future__ import annotations

from .config import RunnerConfig
from .context import Context, SubContext
from .definitions import HookDefinition, HookKind, MatchResult, StepDefinition
from .errors import (
    AmbiguousMatchError,
    InvalidPatternError,
    InvalidTagFilterError,
    LifecycleError,
    PendingSignal,
    ResourceLoadError,
    StepwrightError,
    UndefinedStepError,
    pending,
)
from .hooks import HookDispatcher
from .invoker import DefinitionInvoker, Outcome, Status
from .loader import discover, load_definitions, load_resource
from .patterns import CompiledPattern, PatternMatcher, compile_pattern
from .registry import DefinitionRegistry, HooksHandle, StepsHandle
from .runner import (
    Feature,
    Runner,
    Scenario,
    ScenarioResult,
    ScenarioState,
    Step,
    SuiteResult,
)
from .tags import TagFilter

__all__ = [
    "AmbiguousMatchError",
    "CompiledPattern",
    "Context",
    "DefinitionInvoker",
    "DefinitionRegistry",
    "Feature",
    "HookDefinition",
    "HookDispatcher",
    "HookKind",
    "HooksHandle",
    "InvalidPatternError",
    "InvalidTagFilterError",
    "LifecycleError",
    "MatchResult",
    "Outcome",
    "PatternMatcher",
    "PendingSignal",
    "ResourceLoadError",
    "Runner",
    "RunnerConfig",
    "Scenario",
    "ScenarioResult",
    "ScenarioState",
    "Status",
    "Step",
    "StepDefinition",
    "StepsHandle",
    "StepwrightError",
    "SubContext",
    "SuiteResult",
    "TagFilter",
    "UndefinedStepError",
    "compile_pattern",
    "discover",
    "load_definitions",
    "load_resource",
    "pending",
]
