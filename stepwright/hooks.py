"""Dispatch lifecycle events to registered hooks."""

from __future__ import annotations

import logging
import typing as t

from .definitions import HookKind
from .invoker import Outcome, call_action

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .definitions import HookDefinition
    from .registry import DefinitionRegistry

logger = logging.getLogger(__name__)


class HookDispatcher:
    """Run every hook matching a lifecycle event, in registration order.

    Parameters
    ----------
    registry:
        Registry to query for hooks.
    stop_on_failure:
        When ``True`` the first failed hook prevents the remaining hooks at the
        same lifecycle point from running. By default all hooks run and each
        failure is recorded in the returned outcomes.
    """

    def __init__(
        self, registry: DefinitionRegistry, *, stop_on_failure: bool = False
    ) -> None:
        self._registry = registry
        self._stop_on_failure = stop_on_failure

    def dispatch(
        self,
        kind: HookKind | str,
        active_tags: t.Iterable[str] = (),
        payload: object = None,
    ) -> list[Outcome]:
        """Invoke the hooks for *kind* and return one outcome per hook run."""
        kind = HookKind(kind)
        tags = tuple(active_tags)
        hooks = self._registry.find_matching_hooks(kind, tags)
        logger.debug("Dispatching %s to %d hook(s)", kind, len(hooks))
        outcomes: list[Outcome] = []
        for hook in hooks:
            outcome = self._invoke(hook, payload)
            outcomes.append(outcome)
            if outcome.is_failure:
                logger.warning(
                    "%s hook at %s failed: %s",
                    kind,
                    hook.location or "<unknown>",
                    outcome.error,
                )
                if self._stop_on_failure:
                    break
        return outcomes

    @staticmethod
    def _invoke(hook: HookDefinition, payload: object) -> Outcome:
        if hook.kind.is_suite_level:
            return call_action(hook.action)
        return call_action(hook.action, payload)


__all__ = ["HookDispatcher"]
