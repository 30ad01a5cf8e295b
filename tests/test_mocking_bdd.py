"""Behavioural tests for the mock engine using pytest-bdd."""

from __future__ import annotations

import abc
import typing as t
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenario, then, when

from mach import errors
from mach.engine import MockEngine

FEATURES_DIR = Path(__file__).resolve().parent.parent / "features"
FEATURE = str(FEATURES_DIR / "mocking.feature")

_ERROR_TYPES: dict[str, type[errors.MachError]] = {
    "ArgumentMismatchError": errors.ArgumentMismatchError,
    "MissingInvocationError": errors.MissingInvocationError,
    "UndefinedBehaviorError": errors.UndefinedBehaviorError,
    "UnwantedInvocationError": errors.UnwantedInvocationError,
}


class KeyValueStore(abc.ABC):
    """Capability mocked by the scenarios."""

    @abc.abstractmethod
    def get(self, key: str) -> str:
        """Return the value stored under *key*."""

    @abc.abstractmethod
    def put(self, key: str, value: str) -> None:
        """Store *value* under *key*."""

    @abc.abstractmethod
    def size(self) -> int:
        """Return the number of entries."""


class ScenarioState(t.TypedDict, total=False):
    """Mutable state shared between steps of one scenario."""

    error: errors.MachError


def _expect_error(error_name: str, action: t.Callable[[], object]) -> errors.MachError:
    error_type = _ERROR_TYPES.get(error_name)
    if error_type is None:  # pragma: no cover - invalid feature configuration
        msg = f"Unknown error type: {error_name}"
        raise ValueError(msg)
    with pytest.raises(error_type) as excinfo:
        action()
    return excinfo.value


@pytest.fixture
def state() -> ScenarioState:
    """Return empty per-scenario state."""
    return {}


@given("a mock engine", target_fixture="engine")
def create_engine() -> MockEngine:
    """Create a fresh engine."""
    return MockEngine()


@given(parsers.cfparse('a stand-in store named "{name}"'), target_fixture="store")
def create_store(engine: MockEngine, name: str) -> KeyValueStore:
    """Create a stand-in key-value store."""
    return engine.mock(KeyValueStore, name)


@given(parsers.cfparse('the store returns "{value}" for key "{key}"'))
def stub_get(engine: MockEngine, store: KeyValueStore, value: str, key: str) -> None:
    """Stub a read of *key*."""
    engine.begin_stub()
    engine.set_next_return(value)
    store.get(key)


@given(parsers.cfparse('the store returns "{value}" for any key'))
def stub_any_get(engine: MockEngine, store: KeyValueStore, value: str) -> None:
    """Stub every read through a wildcard."""
    engine.begin_stub()
    engine.set_next_return(value)
    engine.set_next_wildcards([None])
    store.get(None)  # type: ignore[arg-type]


@given("writes to the store are forbidden")
def forbid_put(engine: MockEngine, store: KeyValueStore) -> None:
    """Forbid any write."""
    engine.begin_forbid()
    engine.set_next_wildcards([None, None])
    store.put(None, None)  # type: ignore[arg-type]


@when("I replay the engine")
def replay(engine: MockEngine) -> None:
    """Switch to replay."""
    engine.begin_replay()


@when(parsers.cfparse('I read key "{key}"'))
def read_key(store: KeyValueStore, key: str) -> None:
    """Read *key* as the code under test would."""
    store.get(key)


@when("I begin verification")
def begin_verification(engine: MockEngine) -> None:
    """Switch to verification."""
    engine.begin_verification()


@then(parsers.cfparse('reading key "{key}" returns "{value}"'))
@then(parsers.cfparse('verifying a read of key "{key}" returns "{value}"'))
def check_read(store: KeyValueStore, key: str, value: str) -> None:
    """Assert that reading *key* yields *value*."""
    assert store.get(key) == value


@then(parsers.cfparse('verifying a read of any key returns "{value}"'))
def check_any_read(engine: MockEngine, store: KeyValueStore, value: str) -> None:
    """Verify some read happened, whatever its key."""
    engine.set_next_wildcards([None])
    assert store.get(None) == value  # type: ignore[arg-type]


@then(parsers.cfparse('the captured argument is "{value}"'))
def check_captured(engine: MockEngine, value: str) -> None:
    """Assert the last matched call received *value*."""
    assert engine.last_captured_argument() == value


@then(parsers.cfparse('reading key "{key}" fails with {error_name}'))
@then(parsers.cfparse('verifying a read of key "{key}" fails with {error_name}'))
def check_read_fails(
    store: KeyValueStore, state: ScenarioState, key: str, error_name: str
) -> None:
    """Assert that reading *key* raises *error_name*."""
    state["error"] = _expect_error(error_name, lambda: store.get(key))


@then(parsers.cfparse("counting entries fails with {error_name}"))
def check_size_fails(
    store: KeyValueStore, state: ScenarioState, error_name: str
) -> None:
    """Assert that ``size()`` raises *error_name*."""
    state["error"] = _expect_error(error_name, store.size)


@then(parsers.cfparse('writing "{value}" to key "{key}" fails with {error_name}'))
def check_write_fails(
    store: KeyValueStore,
    state: ScenarioState,
    value: str,
    key: str,
    error_name: str,
) -> None:
    """Assert that writing raises *error_name*."""
    state["error"] = _expect_error(error_name, lambda: store.put(key, value))


@then(parsers.cfparse('the error message should contain "{text}"'))
def error_contains(state: ScenarioState, text: str) -> None:
    """Assert the captured error mentions *text*."""
    assert text in str(state["error"])


@scenario(FEATURE, "stubbed value is replayed")
def test_stubbed_value_is_replayed() -> None:
    """Stubbed reads answer replayed reads."""


@scenario(FEATURE, "the last stub wins")
def test_last_stub_wins() -> None:
    """Later stubs shadow earlier ones."""


@scenario(FEATURE, "wildcard stub answers any key")
def test_wildcard_stub_answers_any_key() -> None:
    """Wildcard stubs match any argument."""


@scenario(FEATURE, "replaying an unstubbed method fails")
def test_replaying_unstubbed_method_fails() -> None:
    """Unstubbed methods raise during replay."""


@scenario(FEATURE, "replaying with the wrong arguments fails")
def test_replaying_wrong_arguments_fails() -> None:
    """Argument mismatches are reported with the expected pattern."""


@scenario(FEATURE, "forbidden writes are reported")
def test_forbidden_writes_are_reported() -> None:
    """Forbidden calls raise during replay."""


@scenario(FEATURE, "forbidden writes that never happen pass")
def test_forbidden_writes_never_made() -> None:
    """Forbidding a call does not require it to happen."""


@scenario(FEATURE, "verification checks the replay log")
def test_verification_checks_replay_log() -> None:
    """Verification succeeds only for replayed calls."""


@scenario(
    FEATURE, "verification through a wildcard captures the replayed argument"
)
def test_verification_captures_replayed_argument() -> None:
    """Wildcard verification captures what was really passed."""
