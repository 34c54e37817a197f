"""Load closure-style definition files into a registry.

Definition files are plain Python modules executed with two names injected
into their global scope: ``steps`` (a :class:`~stepwright.registry.StepsHandle`)
and ``hooks`` (a :class:`~stepwright.registry.HooksHandle`). A step file might
read::

    steps.Given(r'^I have ordered hot "([^"]*)"$',
                lambda world, drink: setattr(world, "drink", drink))

    @steps.Then(r'^I should be served "([^"]*)"$')
    def served(world, drink):
        assert world.drink == drink
"""

from __future__ import annotations

import logging
import runpy
import typing as t
from pathlib import Path

from .errors import ResourceLoadError, StepwrightError

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .registry import DefinitionRegistry

logger = logging.getLogger(__name__)

PathLike = str | Path


def discover(paths: t.Iterable[PathLike], pattern: str = "*.py") -> list[Path]:
    """Expand *paths* into an ordered list of definition files.

    Files are kept in the order given; directories are searched recursively
    for *pattern* and their contents sorted so loading order is stable.
    """
    found: list[Path] = []
    for entry in paths:
        path = Path(entry)
        if path.is_dir():
            found.extend(sorted(p for p in path.rglob(pattern) if p.is_file()))
        else:
            found.append(path)
    return found


def load_resource(registry: DefinitionRegistry, path: PathLike) -> None:
    """Execute one definition file against *registry*.

    Raises
    ------
    ResourceLoadError
        If *path* does not exist or raises while it is executed.
    InvalidPatternError, InvalidTagFilterError, LifecycleError
        If the file registers a malformed pattern or tag filter, or registers
        into a frozen registry. These propagate unwrapped and abort loading.
    """
    resource = Path(path)
    if not resource.is_file():
        msg = f"Definition resource not found: {resource}"
        raise ResourceLoadError(msg)
    scope = {"steps": registry.steps_handle(), "hooks": registry.hooks_handle()}
    try:
        runpy.run_path(str(resource), init_globals=scope)
    except StepwrightError:
        raise
    except Exception as exc:
        msg = f"Failed to load definition resource {resource}: {exc}"
        raise ResourceLoadError(msg) from exc
    logger.debug("Loaded definitions from %s", resource)


def load_definitions(
    registry: DefinitionRegistry,
    step_paths: t.Iterable[PathLike] = (),
    hook_paths: t.Iterable[PathLike] = (),
    *,
    freeze: bool = True,
) -> DefinitionRegistry:
    """Load step resources, then hook resources, into *registry*.

    The registry is frozen afterwards unless *freeze* is ``False``.
    """
    for path in discover(step_paths):
        load_resource(registry, path)
    for path in discover(hook_paths):
        load_resource(registry, path)
    if freeze:
        registry.freeze()
    logger.debug(
        "Loaded %d step(s) and %d hook(s)", len(registry.steps), len(registry.hooks)
    )
    return registry


__all__ = ["discover", "load_definitions", "load_resource"]
