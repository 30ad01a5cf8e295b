"""Record-replay-verify test doubles for Python interfaces.

A :class:`MockEngine` hands out stand-ins for capability classes. Calls made on
a stand-in are recorded as stubs or forbidden patterns, answered during
replay, and asserted during verification, depending on the engine's
:class:`Phase`.
"""

from __future__ import annotations

from .dispatcher import MockDispatcher
from .dsl import Mocks
from .engine import ForbiddenEntry, LogEntry, MockEngine, StubEntry
from .errors import (
    ArgumentMismatchError,
    CaptureError,
    InvalidPhaseError,
    LifecycleError,
    MachError,
    MissingInvocationError,
    PendingValueUnconsumedError,
    UndefinedBehaviorError,
    UnwantedInvocationError,
    VerificationError,
    WildcardArityError,
)
from .invocation import Invocation, MethodDescriptor
from .phase import Phase
from .stand_in import create_stand_in, dispatcher_of, is_stand_in

__all__ = [
    "ArgumentMismatchError",
    "CaptureError",
    "ForbiddenEntry",
    "InvalidPhaseError",
    "Invocation",
    "LifecycleError",
    "LogEntry",
    "MachError",
    "MethodDescriptor",
    "MissingInvocationError",
    "MockDispatcher",
    "MockEngine",
    "Mocks",
    "PendingValueUnconsumedError",
    "Phase",
    "StubEntry",
    "UndefinedBehaviorError",
    "UnwantedInvocationError",
    "VerificationError",
    "WildcardArityError",
    "create_stand_in",
    "dispatcher_of",
    "is_stand_in",
]
