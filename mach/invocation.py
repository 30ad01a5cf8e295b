"""Invocation values and the wildcard-aware matching predicate.

Matching is deliberately *not* an equivalence relation: a pattern carrying a
wildcard matches two concrete calls that do not match each other. For that
reason :class:`Invocation` does not implement ``__eq__`` or ``__hash__`` over
its fields; stores of invocations are ordered lists scanned with
:meth:`Invocation.matches`.
"""

from __future__ import annotations

import dataclasses as dc
import inspect
import typing as t

from .errors import WildcardArityError

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import collections.abc as cabc


@dc.dataclass(frozen=True, slots=True)
class MethodDescriptor:
    """Identify one method of a capability class."""

    owner: type
    name: str
    signature: inspect.Signature = dc.field(compare=False, repr=False)

    @classmethod
    def from_function(
        cls, owner: type, func: t.Callable[..., t.Any]
    ) -> MethodDescriptor:
        """Describe *func* as declared on *owner*."""
        return cls(owner, func.__name__, inspect.signature(func))

    @property
    def returns_none(self) -> bool:
        """Return ``True`` when the method is annotated to return ``None``."""
        return self.signature.return_annotation in (None, "None")

    def bind(
        self,
        instance: object,
        args: cabc.Sequence[object],
        kwargs: cabc.Mapping[str, object],
    ) -> tuple[object, ...]:
        """Return the call's argument values in declaration order.

        Keyword arguments are folded into their positional slots and omitted
        defaults are filled in, so ``m(1)`` and ``m(x=1)`` produce the same
        values. A call the real method would reject raises :class:`TypeError`.
        """
        bound = self.signature.bind(instance, *args, **kwargs)
        bound.apply_defaults()
        return tuple(bound.arguments.values())[1:]

    def __str__(self) -> str:
        """Return ``Owner.name(signature)``."""
        return f"{self.owner.__qualname__}.{self.name}{self.signature}"


@dc.dataclass(frozen=True, slots=True, eq=False)
class Invocation:
    """A single call routed to a stand-in, or a pattern describing one.

    ``target`` is the dispatcher that owns the stand-in and is compared by
    identity. Position ``i`` is *wild* when ``wildcards`` is present and
    ``wildcards[i] == args[i]``: a pattern author marks a slot wild by passing
    the same sentinel as both the argument and its wildcard.
    """

    target: object
    method: MethodDescriptor
    args: tuple[object, ...] = ()
    wildcards: tuple[object, ...] | None = None

    def __post_init__(self) -> None:
        """Normalize sequences and validate wildcard arity."""
        object.__setattr__(self, "args", tuple(self.args))
        if not self.wildcards:
            object.__setattr__(self, "wildcards", None)
            return
        wildcards = tuple(self.wildcards)
        if len(wildcards) != len(self.args):
            raise WildcardArityError(len(self.args), len(wildcards))
        object.__setattr__(self, "wildcards", wildcards)

    def with_wildcards(self, wildcards: cabc.Sequence[object] | None) -> Invocation:
        """Return a copy of this invocation carrying *wildcards*."""
        return Invocation(self.target, self.method, self.args, tuple(wildcards or ()))

    def is_wild(self, index: int) -> bool:
        """Return ``True`` when position *index* matches any value."""
        if self.wildcards is None or index >= len(self.wildcards):
            return False
        return self.wildcards[index] == self.args[index]

    def wild_positions(self) -> list[int]:
        """Return the indexes of every wild position."""
        return [index for index in range(len(self.args)) if self.is_wild(index)]

    def matches(self, other: Invocation) -> bool:
        """Return ``True`` if *other* describes the same call as this one.

        Symmetric, but not transitive once wildcards are involved.
        """
        return (
            self.target is other.target
            and self.method == other.method
            and len(self.args) == len(other.args)
            and self._args_match(other)
        )

    def _args_match(self, other: Invocation) -> bool:
        pairs = zip(self.args, other.args, strict=True)
        for index, (mine, theirs) in enumerate(pairs):
            if self.is_wild(index) or other.is_wild(index):
                continue
            if mine != theirs:
                return False
        return True

    def __str__(self) -> str:
        """Return the method, then the arguments, then the wildcards."""
        return f"{self.method}{list(self.args)!r}{list(self.wildcards or ())!r}"


__all__ = ["Invocation", "MethodDescriptor"]
