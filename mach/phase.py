"""Lifecycle phases understood by :class:`~mach.engine.MockEngine`."""

from __future__ import annotations

import enum


class Phase(enum.StrEnum):
    """What a call on a stand-in means right now."""

    #: Calls record a stub pattern bound to the pending return value.
    STUB = "STUB"
    #: Calls record a pattern that must not occur during replay.
    FORBID = "FORBID"
    #: Calls are answered from the stub table and logged.
    REPLAY = "REPLAY"
    #: Calls assert that a matching call was logged during replay.
    VERIFY = "VERIFY"
