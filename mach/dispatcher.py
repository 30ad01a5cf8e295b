"""Per-stand-in adapter between intercepted calls and the engine."""

from __future__ import annotations

import typing as t

from .invocation import Invocation, MethodDescriptor

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import collections.abc as cabc

    from .engine import MockEngine


class MockDispatcher:
    """Turn calls made on one stand-in into :class:`Invocation` objects.

    The dispatcher is the identity that invocations carry as their target, so
    two stand-ins of the same capability never match each other's patterns.
    Wildcards are never attached here; only the engine's declaration API does
    that.
    """

    def __init__(self, engine: MockEngine, capability: type, name: str) -> None:
        self.engine = engine
        self.capability = capability
        self.name = name
        self.stand_in: object | None = None

    @property
    def display(self) -> str:
        """Return ``name:capability@token`` identifying this dispatcher."""
        return f"{self.name}:{self.capability}@{id(self)}"

    def equals(self, other: object) -> bool:
        """Return ``True`` if *other* is this dispatcher or its stand-in."""
        if other is self:
            return True
        return self.stand_in is not None and other is self.stand_in

    def handle(
        self,
        method: MethodDescriptor,
        args: cabc.Sequence[object],
    ) -> object:
        """Forward a call to the engine and return its answer."""
        result = self.engine.dispatch(Invocation(self, method, tuple(args)))
        if method.returns_none:
            return None
        return result

    def __repr__(self) -> str:
        """Return the display string."""
        return self.display
