"""Terse helpers for scripting stand-ins inline.

``Mocks`` wraps a :class:`~mach.engine.MockEngine` with the short vocabulary
used to write a scenario on a handful of lines::

    m = Mocks()
    rocket = m.mock(Rocket)
    m._("Launch"); rocket.check_console()
    m.no(); m.wild(0); rocket.throttle(0)
    m.go(); Pilot(rocket).act()
    m.verify(); rocket.check_console()
"""

from __future__ import annotations

import inspect
import types
import typing as t

from .engine import MockEngine
from .stand_in import intercepted_methods

_T = t.TypeVar("_T")


class Mocks:
    """Forward the terse scenario vocabulary to one engine."""

    def __init__(self, engine: MockEngine | None = None) -> None:
        self.engine = engine if engine is not None else MockEngine()

    def mock(self, capability: type[_T], name: str | None = None) -> _T:
        """Return a stand-in for *capability*."""
        return self.engine.mock(capability, name)

    def _(self, value: object = None) -> None:
        """Stub the next call so that it returns *value*."""
        self.engine.begin_stub()
        self.engine.set_next_return(value)

    def wild(self, *markers: object) -> None:
        """Mark every argument equal to its marker in the next call as wild."""
        self.engine.set_next_wildcards(markers)

    def no(self) -> None:
        """Forbid the following calls."""
        self.engine.begin_forbid()

    def go(self) -> None:
        """Start replaying."""
        self.engine.begin_replay()

    def verify(self) -> None:
        """Start verifying."""
        self.engine.begin_verification()

    def arg(self, index: int | None = None) -> object:
        """Return an argument captured by the last replayed or verified call."""
        return self.engine.last_captured_argument(index)

    def init(self, owner: object) -> list[str]:
        """Fill the unset annotated attributes of *owner* with stand-ins.

        Only annotations naming a class with methods to intercept are
        considered. Each stand-in is named after its attribute. Returns the
        attribute names that were filled.
        """
        filled: list[str] = []
        for name, annotation in t.get_type_hints(type(owner)).items():
            hint = _strip_optional(annotation)
            if not _is_capability(hint) or getattr(owner, name, None) is not None:
                continue
            setattr(owner, name, self.engine.mock(hint, name))
            filled.append(name)
        return filled


def _strip_optional(hint: object) -> object:
    """Return ``X`` for ``X | None``, otherwise *hint* unchanged."""
    if t.get_origin(hint) not in (t.Union, types.UnionType):
        return hint
    members = [arg for arg in t.get_args(hint) if arg is not type(None)]
    return members[0] if len(members) == 1 else hint


def _is_capability(hint: object) -> bool:
    if not inspect.isclass(hint) or hint.__module__ == "builtins":
        return False
    return bool(intercepted_methods(hint))


__all__ = ["Mocks"]
