"""The mocking engine: declaration API and phase-dependent dispatch."""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as t

from .dispatcher import MockDispatcher
from .errors import (
    ArgumentMismatchError,
    CaptureError,
    InvalidPhaseError,
    LifecycleError,
    MissingInvocationError,
    PendingValueUnconsumedError,
    UndefinedBehaviorError,
    UnwantedInvocationError,
)
from .phase import Phase
from .stand_in import create_stand_in

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import collections.abc as cabc

    from .invocation import Invocation

logger = logging.getLogger(__name__)

_T = t.TypeVar("_T")


class _Unset:
    """Marker for an empty pending-value slot."""

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        """Return a debug representation."""
        return "<unset>"


_UNSET: t.Final = _Unset()


@dc.dataclass(frozen=True, slots=True, eq=False)
class StubEntry:
    """A pattern and the value returned when a replayed call matches it."""

    pattern: Invocation
    value: object


@dc.dataclass(frozen=True, slots=True, eq=False)
class ForbiddenEntry:
    """A pattern that must not be matched during replay."""

    pattern: Invocation


@dc.dataclass(frozen=True, slots=True, eq=False)
class LogEntry:
    """A call received during replay and the value it was answered with."""

    invocation: Invocation
    value: object


@dc.dataclass(frozen=True, slots=True, eq=False)
class _Capture:
    entry: LogEntry
    pattern: Invocation


class MockEngine:
    """Own the scripted behaviour of a scenario and answer calls on stand-ins.

    An engine holds its phase, stub table, forbidden patterns and replay log
    as plain instance state with no locking. Use one engine per scenario and
    never share an engine between concurrently running tests; a fresh engine
    is the only reset.
    """

    def __init__(self) -> None:
        """Create an engine in :attr:`Phase.STUB` with empty tables."""
        self._phase: Phase | None = Phase.STUB
        self.stubs: list[StubEntry] = []
        self.forbidden: list[ForbiddenEntry] = []
        self.log: list[LogEntry] = []
        self.dispatchers: list[MockDispatcher] = []
        self._pending_value: object = _UNSET
        self._pending_wildcards: tuple[object, ...] | None = None
        self._capture: _Capture | None = None
        self._handlers: dict[Phase, t.Callable[[Invocation], object]] = {
            Phase.STUB: self._record_stub,
            Phase.FORBID: self._record_forbidden,
            Phase.REPLAY: self._replay,
            Phase.VERIFY: self._verify,
        }

    # ------------------------------------------------------------------
    # Stand-ins
    # ------------------------------------------------------------------
    def mock(self, capability: type[_T], name: str | None = None) -> _T:
        """Return a stand-in for *capability* backed by a fresh dispatcher."""
        dispatcher = MockDispatcher(
            self, capability, capability.__name__ if name is None else name
        )
        stand_in = create_stand_in(capability, dispatcher)
        self.dispatchers.append(dispatcher)
        logger.debug("Created stand-in %s", dispatcher.display)
        return t.cast("_T", stand_in)

    # ------------------------------------------------------------------
    # Lifecycle state
    # ------------------------------------------------------------------
    @property
    def phase(self) -> Phase | None:
        """Return the current phase."""
        return self._phase

    def switch_phase(self, phase: Phase | None) -> None:
        """Make *phase* govern every following call until switched again."""
        logger.debug("Switching phase from %s to %s", self._phase, phase)
        self._phase = phase

    def begin_stub(self) -> None:
        """Record the following calls as stubs."""
        self.switch_phase(Phase.STUB)

    def begin_forbid(self) -> None:
        """Record the following calls as forbidden patterns."""
        self.switch_phase(Phase.FORBID)

    def begin_replay(self) -> None:
        """Answer the following calls from the stub table."""
        self.switch_phase(Phase.REPLAY)

    def begin_verification(self) -> None:
        """Check the following calls against the replay log."""
        self.switch_phase(Phase.VERIFY)

    @property
    def has_pending_value(self) -> bool:
        """Return ``True`` while a declared return value awaits its call."""
        return self._pending_value is not _UNSET

    def _require_phase(self, allowed: cabc.Container[Phase], action: str) -> None:
        """Ensure the current phase is one of *allowed* before *action*."""
        if self._phase not in allowed:
            msg = f"Cannot call {action}() during the {self._phase} phase"
            raise LifecycleError(msg)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------
    def set_next_return(self, value: object) -> None:
        """Make the next stubbed call return *value*.

        Raises
        ------
        PendingValueUnconsumedError
            When an earlier value has not been bound to a call yet.
        LifecycleError
            When the engine is not in :attr:`Phase.STUB`.
        """
        self._require_phase((Phase.STUB,), "set_next_return")
        if self._pending_value is not _UNSET:
            raise PendingValueUnconsumedError(self._pending_value)
        self._pending_value = value

    def set_next_wildcards(self, values: cabc.Iterable[object] | None) -> None:
        """Attach *values* as wildcard markers to the next recorded pattern.

        ``None`` means no wildcards. A position becomes wild when the call
        passes the same value as its marker.
        """
        self._require_phase(
            (Phase.STUB, Phase.FORBID, Phase.VERIFY), "set_next_wildcards"
        )
        self._pending_wildcards = () if values is None else tuple(values)

    def last_captured_argument(self, index: int | None = None) -> object:
        """Return an argument of the most recently matched replayed call.

        The capture is refreshed by every replayed call and by every
        successful verification, and always reads the value received during
        replay rather than a wildcard marker. Without *index* the sole
        argument is returned, or else the last position the match treated as
        wild.
        """
        capture = self._capture
        if capture is None:
            msg = "No invocation has been captured yet"
            raise CaptureError(msg)
        args = capture.entry.invocation.args
        if index is None:
            index = self._default_capture_index(capture)
        elif index < 0:
            msg = f"Argument index must not be negative, got {index}"
            raise CaptureError(msg)
        try:
            return args[index]
        except IndexError:
            msg = (
                f"Argument index {index} is out of range for "
                f"{capture.entry.invocation}"
            )
            raise CaptureError(msg) from None

    @staticmethod
    def _default_capture_index(capture: _Capture) -> int:
        if len(capture.entry.invocation.args) == 1:
            return 0
        wild = capture.pattern.wild_positions()
        if wild:
            return wild[-1]
        msg = (
            "Cannot choose an argument of "
            f"{capture.entry.invocation}; pass an explicit index"
        )
        raise CaptureError(msg)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def dispatch(self, call: Invocation) -> object:
        """Answer *call* according to the current phase."""
        phase = self._phase
        if not isinstance(phase, Phase):
            raise InvalidPhaseError(phase)
        return self._handlers[phase](call)

    def _pattern_for(self, call: Invocation) -> Invocation:
        """Consume the pending wildcards and attach them to *call*."""
        wildcards, self._pending_wildcards = self._pending_wildcards, None
        if not wildcards:
            return call
        return call.with_wildcards(wildcards)

    def _record_stub(self, call: Invocation) -> object:
        pattern = self._pattern_for(call)
        value = None if self._pending_value is _UNSET else self._pending_value
        self._pending_value = _UNSET
        self.stubs.append(StubEntry(pattern, value))
        logger.debug("Stubbed %s -> %r", pattern, value)
        return value

    def _record_forbidden(self, call: Invocation) -> None:
        pattern = self._pattern_for(call)
        self.forbidden.append(ForbiddenEntry(pattern))
        logger.debug("Forbade %s", pattern)

    def _replay(self, call: Invocation) -> object:
        for forbidden in self.forbidden:
            if forbidden.pattern.matches(call):
                raise UnwantedInvocationError(call)
        for stub in reversed(self.stubs):
            if stub.pattern.matches(call):
                entry = LogEntry(call, stub.value)
                self.log.append(entry)
                self._capture = _Capture(entry, stub.pattern)
                logger.debug("Replayed %s -> %r", call, stub.value)
                return stub.value
        self._raise_unanswered(call)

    def _raise_unanswered(self, call: Invocation) -> t.NoReturn:
        """Explain why no stub answered *call*."""
        for stub in reversed(self.stubs):
            if stub.pattern.method == call.method:
                raise ArgumentMismatchError(str(stub.pattern), str(call))
        display = getattr(call.target, "display", repr(call.target))
        raise UndefinedBehaviorError(call.method, display)

    def _verify(self, call: Invocation) -> object:
        pattern = self._pattern_for(call)
        for entry in reversed(self.log):
            if pattern.matches(entry.invocation):
                self._capture = _Capture(entry, pattern)
                logger.debug("Verified %s", pattern)
                return entry.value
        raise MissingInvocationError(pattern)


__all__ = ["ForbiddenEntry", "LogEntry", "MockEngine", "StubEntry"]
