"""pytest-bdd steps that register step and hook definitions."""

from __future__ import annotations

import textwrap
import typing as t

from pytest_bdd import given, parsers, when

from stepwright.errors import InvalidPatternError, pending
from stepwright.loader import load_definitions

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from pathlib import Path

    from stepwright.context import Context
    from stepwright.registry import DefinitionRegistry

_DEFINITION_FILE = """
    @steps.Then(r"^breakfast is served$")
    def served(world):
        world.served = True

    @hooks.before_scenario("{tag}")
    def greet(event):
        event.context.greeting = "good morning"
"""


def _store_as(field: str) -> t.Callable[..., None]:
    """Return an action storing its first captured argument as *field*."""

    def action(world: Context, *args: str | None) -> None:
        setattr(world, field, args[0] if args else True)

    return action


def _logging_hook(log: list[str], name: str) -> t.Callable[..., None]:
    def hook(*payload: object) -> None:
        log.append(f"{name}:start")
        log.append(f"{name}:end")

    return hook


@given(
    parsers.re(
        r"the step pattern '(?P<pattern>[^']+)' stores its argument as "
        r'"(?P<field>[^"]+)"'
    )
)
def register_storing_step(
    stepwright_registry: DefinitionRegistry, pattern: str, field: str
) -> None:
    """Register *pattern* with an action storing its capture on the context."""
    stepwright_registry.register_step(pattern, _store_as(field))


@when(
    parsers.re(r"the step pattern '(?P<pattern>[^']+)' is registered"),
    target_fixture="registration_error",
)
def register_pattern(
    stepwright_registry: DefinitionRegistry, pattern: str
) -> InvalidPatternError | None:
    """Attempt to register *pattern*, returning any validation error."""
    try:
        stepwright_registry.register_step(pattern, _store_as("unused"))
    except InvalidPatternError as exc:
        return exc
    return None


@given(
    parsers.re(
        r'a "(?P<kind>[^"]+)" hook named "(?P<name>[^"]+)" '
        r'(?:filtered by "(?P<tag_filter>[^"]*)" )?writing to the log'
    )
)
def register_logging_hook(
    stepwright_registry: DefinitionRegistry,
    hook_log: list[str],
    kind: str,
    name: str,
    tag_filter: str | None,
) -> None:
    """Register a hook that records its start and end in ``hook_log``."""
    stepwright_registry.register_hook(kind, tag_filter, _logging_hook(hook_log, name))


@given(parsers.re(r'a "(?P<kind>[^"]+)" hook named "(?P<name>[^"]+)" that fails'))
def register_failing_hook(
    stepwright_registry: DefinitionRegistry, kind: str, name: str
) -> None:
    """Register a hook that always raises."""

    def hook(*payload: object) -> None:
        msg = f"hook {name} failed"
        raise RuntimeError(msg)

    stepwright_registry.register_hook(kind, None, hook)


@given("the coffee machine definitions")
def coffee_machine(stepwright_registry: DefinitionRegistry) -> None:
    """Register the vocabulary used by scenario outcome features."""
    steps = stepwright_registry.steps_handle()

    def remember(world: Context) -> None:
        world.seen = [*world.get("seen", []), id(world)]

    @steps.Given(r"^I order (\w+)$")
    def order(world: Context, drink: str) -> None:
        remember(world)
        world.drink = drink

    @steps.When(r"^the machine brews$")
    def brew(world: Context) -> None:
        remember(world)
        world.brewed = world.drink

    @steps.When(r"^the machine jams$")
    def jam(world: Context) -> None:
        msg = "the machine jammed"
        raise RuntimeError(msg)

    @steps.Then(r"^the recipe is unfinished$")
    def unfinished(world: Context) -> None:
        pending("recipe not written yet")

    @steps.Then(r"^the cup is served$")
    def served(world: Context) -> None:
        remember(world)
        world.served = True


@given(
    parsers.re(
        r'a definition file registering a "served" step for "(?P<tag>[^"]+)" '
        r"scenarios"
    ),
    target_fixture="definition_file",
)
def definition_file(tmp_path: Path, tag: str) -> Path:
    """Write a closure-style definition file using ``steps`` and ``hooks``."""
    path = tmp_path / "breakfast_definitions.py"
    path.write_text(textwrap.dedent(_DEFINITION_FILE).replace("{tag}", tag))
    return path


@given("the definition file is loaded")
def load_definition_file(
    stepwright_registry: DefinitionRegistry, definition_file: Path
) -> None:
    """Load the definition file without freezing the registry."""
    load_definitions(stepwright_registry, [definition_file], freeze=False)
    assert stepwright_registry.steps, "definition file registered no steps"

