"""Exception hierarchy raised by the mocking engine."""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .invocation import Invocation, MethodDescriptor


class MachError(Exception):
    """Base class for all errors raised by :mod:`mach`."""


class LifecycleError(MachError, RuntimeError):
    """Raised when a declaration is made in the wrong phase."""


class CaptureError(MachError, LookupError):
    """Raised when no captured argument can be returned."""


class PendingValueUnconsumedError(MachError, RuntimeError):
    """Raised when a second return value is declared before the first is bound."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Return value [{value}] hasn't been mapped, yet.")


class WildcardArityError(MachError, ValueError):
    """Raised when wildcards and arguments differ in length."""

    def __init__(self, arg_count: int, wildcard_count: int) -> None:
        self.arg_count = arg_count
        self.wildcard_count = wildcard_count
        msg = (
            "Must have the same number of arguments and wildcards "
            f"({arg_count} arguments, {wildcard_count} wildcards)"
        )
        super().__init__(msg)


class InvalidPhaseError(MachError, RuntimeError):
    """Raised when a call is dispatched while the phase is unset or unknown."""

    def __init__(self, phase: object) -> None:
        self.phase = phase
        super().__init__(f"Invalid phase : {phase}")


class UndefinedBehaviorError(MachError, NotImplementedError):
    """Raised when a replayed method was never stubbed."""

    def __init__(self, method: MethodDescriptor, display: str) -> None:
        self.method = method
        self.display = display
        super().__init__(f"[{method}] is not defined for [{display}]")


class VerificationError(MachError, AssertionError):
    """Base class for failures that point at the code under test."""


class ArgumentMismatchError(VerificationError):
    """Raised when a replayed call matches a stubbed method but not its arguments.

    ``expected`` and ``actual`` hold display strings so assertion rewriting and
    diff tooling can compare them directly.
    """

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        msg = f"Argument mismatch\nexpected: {expected}\nactual:   {actual}"
        super().__init__(msg)


class UnwantedInvocationError(VerificationError):
    """Raised when a replayed call matches a forbidden pattern."""

    def __init__(self, invocation: Invocation) -> None:
        self.invocation = invocation
        super().__init__(f"Unwanted invocation {invocation}")


class MissingInvocationError(VerificationError):
    """Raised when a verified call never happened during replay."""

    def __init__(self, invocation: Invocation) -> None:
        self.invocation = invocation
        super().__init__(f"Missing invocation {invocation}")


__all__ = [
    "ArgumentMismatchError",
    "CaptureError",
    "InvalidPhaseError",
    "LifecycleError",
    "MachError",
    "MissingInvocationError",
    "PendingValueUnconsumedError",
    "UndefinedBehaviorError",
    "UnwantedInvocationError",
    "VerificationError",
    "WildcardArityError",
]
