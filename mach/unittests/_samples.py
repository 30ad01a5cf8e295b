"""Capability classes shared by the unit tests."""

from __future__ import annotations

import abc
import typing as t


class Sample(abc.ABC):
    """Interface with a mix of arities and return types."""

    @abc.abstractmethod
    def method_with_no_args(self) -> str:
        """Return a string."""

    @abc.abstractmethod
    def method_with_one_arg(self, arg: str) -> str:
        """Return a string for *arg*."""

    @abc.abstractmethod
    def method_that_returns_boolean(self) -> bool:
        """Return a flag."""

    def method_with_two_args(self, first: object, second: object = "default") -> str:
        """Return a string for two arguments."""
        raise NotImplementedError

    def reset(self) -> None:
        """Return nothing."""
        raise NotImplementedError


class Greeter(t.Protocol):
    """Structural capability."""

    def greet(self, name: str) -> str:
        """Return a greeting."""
        ...


class Rocket(abc.ABC):
    """A rocket as seen by its pilot."""

    @abc.abstractmethod
    def throttle(self, value: int) -> None:
        """Set the throttle."""

    @abc.abstractmethod
    def open_airlock(self) -> None:
        """Open the airlock."""

    @abc.abstractmethod
    def check_console_for_instructions(self) -> str:
        """Return the current instructions."""

    @abc.abstractmethod
    def ask_mission_control(self, question: str) -> str:
        """Return mission control's answer."""


FULL_THROTTLE = 2**31 - 1


class Pilot:
    """Code under test driving a :class:`Rocket`."""

    def __init__(self, rocket: Rocket) -> None:
        self.rocket = rocket

    def act(self) -> None:
        """Follow the console instructions, then open the throttle."""
        instructions = self.rocket.check_console_for_instructions()
        if instructions == "Initiate EVA":
            self.rocket.ask_mission_control("Clear for EVA?")
            self.rocket.open_airlock()
        self.rocket.throttle(FULL_THROTTLE)
