"""Per-scenario context objects shared by step definitions.

Every step definition receives the scenario's :class:`Context` as its first
argument. Steps communicate by assigning attributes on it::

    @steps.Given(r'^I have ordered hot "([^"]*)"$')
    def ordered(world, drink):
        world.drink = drink

Attributes are stored in an explicit mapping, so the set of values a scenario
has accumulated can be inspected with :meth:`Context.as_dict`.
"""

from __future__ import annotations

import typing as t
import weakref

from .errors import LifecycleError

_MISSING = object()


class Context:
    """Mutable state shared by all definitions within one scenario.

    Parameters
    ----------
    scenario:
        Reference to the scenario being executed, if any. The context never
        owns the scenario.
    **values:
        Initial attribute values.
    """

    __slots__ = ("__weakref__", "_values", "scenario")

    def __init__(self, scenario: object | None = None, **values: object) -> None:
        object.__setattr__(self, "scenario", scenario)
        object.__setattr__(self, "_values", dict(values))

    def __getattr__(self, name: str) -> t.Any:  # noqa: ANN401 - dynamic attributes
        values: dict[str, object] = object.__getattribute__(self, "_values")
        try:
            return values[name]
        except KeyError:
            msg = f"{type(self).__name__!s} has no attribute {name!r}"
            raise AttributeError(msg) from None

    def __setattr__(self, name: str, value: object) -> None:
        if name in Context.__slots__:
            object.__setattr__(self, name, value)
            return
        self._values[name] = value

    def __delattr__(self, name: str) -> None:
        try:
            del self._values[name]
        except KeyError:
            raise AttributeError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def get(self, name: str, default: object = None) -> object:
        """Return attribute *name*, or *default* when it was never set."""
        return self._values.get(name, default)

    def as_dict(self) -> dict[str, object]:
        """Return a shallow copy of the attributes assigned so far."""
        return dict(self._values)

    def subcontext(self, **values: object) -> SubContext:
        """Create a :class:`SubContext` referring back to this context."""
        return SubContext(self, **values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"


class SubContext(Context):
    """A helper context holding a non-owning reference to its main context.

    The back-reference is weak: the sub-context never keeps the main context
    alive and accessing :attr:`main` after the scenario released it raises
    :class:`LifecycleError`.
    """

    __slots__ = ("_main",)

    def __init__(self, main: Context, **values: object) -> None:
        super().__init__(main.scenario, **values)
        object.__setattr__(self, "_main", weakref.ref(main))

    def __setattr__(self, name: str, value: object) -> None:
        if name == "_main":
            object.__setattr__(self, name, value)
            return
        super().__setattr__(name, value)

    @property
    def main(self) -> Context:
        """Return the main context this sub-context was created from."""
        main = self._main()
        if main is None:
            msg = "Main context is no longer alive"
            raise LifecycleError(msg)
        return main

    def lookup(self, name: str, default: object = _MISSING) -> object:
        """Return *name* from this sub-context, falling back to the main one."""
        if name in self:
            return self._values[name]
        main = self.main
        if name in main:
            return main.get(name)
        if default is _MISSING:
            raise AttributeError(name)
        return default


__all__ = ["Context", "SubContext"]
