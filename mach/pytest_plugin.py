"""Pytest plugin providing the ``mach_engine`` and ``mach`` fixtures."""

from __future__ import annotations

import logging
import typing as t

import pytest

from .dsl import Mocks
from .engine import MockEngine

logger = logging.getLogger(__name__)

_PACKAGE_LOGGER = "mach"
_ENGINE_ATTR = "_mach_engine"


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line and ini options for the plugin."""
    group = parser.getgroup("mach")
    group.addoption(
        "--mach-log-dispatch",
        action="store_true",
        dest="mach_log_dispatch",
        default=None,
        help=(
            "Log every recorded, replayed and verified call at DEBUG level. "
            "Overrides the pytest.ini setting."
        ),
    )
    group.addoption(
        "--no-mach-log-dispatch",
        action="store_false",
        dest="mach_log_dispatch",
        default=None,
        help="Disable dispatch logging. Overrides the pytest.ini setting.",
    )
    parser.addini(
        "mach_log_dispatch",
        "Log every recorded, replayed and verified call at DEBUG level.",
        type="bool",
        default=False,
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register plugin-specific markers."""
    config.addinivalue_line(
        "markers",
        (
            "mach(log_dispatch: bool = False): override dispatch logging for a "
            "single test."
        ),
    )


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(
    item: pytest.Item, call: pytest.CallInfo[t.Any]
) -> t.Generator[None, None, None]:
    """Log the engine state when a test using ``mach_engine`` fails."""
    outcome = yield
    rep = outcome.get_result()
    engine = getattr(item, _ENGINE_ATTR, None)
    if engine is None or rep.when != "call" or not rep.failed:
        return
    error = call.excinfo.exconly() if call.excinfo is not None else rep.longreprtext
    logger.error(
        "Error during mach scenario in phase %s with stand-ins [%s]: %s",
        engine.phase,
        ", ".join(dispatcher.display for dispatcher in engine.dispatchers),
        error,
    )


def _log_dispatch_enabled(request: pytest.FixtureRequest) -> bool:
    """Return whether engine dispatch should be logged for this test."""
    # Priority order: marker > CLI option > INI setting
    marker = request.node.get_closest_marker("mach")
    if marker is not None and "log_dispatch" in marker.kwargs:
        return bool(marker.kwargs["log_dispatch"])

    config = request.config
    cli_value = config.getoption("mach_log_dispatch")
    if cli_value is not None:
        return bool(cli_value)

    return bool(config.getini("mach_log_dispatch"))


@pytest.fixture
def mach_engine(request: pytest.FixtureRequest) -> t.Generator[MockEngine, None, None]:
    """Provide a fresh :class:`MockEngine` for the test."""
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    previous_level = package_logger.level
    if _log_dispatch_enabled(request):
        package_logger.setLevel(logging.DEBUG)
    engine = MockEngine()
    setattr(request.node, _ENGINE_ATTR, engine)
    try:
        yield engine
    finally:
        package_logger.setLevel(previous_level)


@pytest.fixture
def mach(mach_engine: MockEngine) -> Mocks:
    """Provide the terse :class:`~mach.dsl.Mocks` helpers bound to ``mach_engine``."""
    return Mocks(mach_engine)
