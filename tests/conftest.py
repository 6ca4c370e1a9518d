"""
Pytest fixtures for testmail-inbox tests.

This module provides a scripted stand-in for the testmail.app API, a
recording sleep and a manual clock so that polling runs instantly.
"""

import os
import sys
from typing import Any, Optional

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from testmail_inbox.config import TestmailSettings, get_settings  # noqa: E402
from testmail_inbox.helper import TestmailHelper  # noqa: E402
from testmail_inbox.models import InboxQueryResult  # noqa: E402


class FakeTransport:
    """Replays scripted inbox query results and records every call."""

    def __init__(self, responses: Optional[list[Any]] = None) -> None:
        self.responses = list(responses or [])
        self.calls: list[tuple[str, str, int]] = []
        self.closed = False

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    async def aquery_inbox(
        self, namespace: str, tag: str, timestamp_from: int
    ) -> InboxQueryResult:
        self.calls.append((namespace, tag, timestamp_from))
        # The last scripted response repeats once the script runs out
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return InboxQueryResult.model_validate(response)

    def close(self) -> None:
        self.closed = True


class RecordingSleep:
    """Async sleep replacement that only records the requested delays."""

    def __init__(self, clock: Optional["ManualClock"] = None) -> None:
        self.delays: list[float] = []
        self.clock = clock

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        if self.clock is not None:
            self.clock.advance(int(seconds * 1000))


class ManualClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def advance(self, ms: int) -> None:
        self.now += ms

    def __call__(self) -> int:
        return self.now


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch):
    """Hide real TESTMAIL_* variables and the settings cache from tests."""
    for name in list(os.environ):
        if name.startswith("TESTMAIL_"):
            monkeypatch.delenv(name)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> TestmailSettings:
    """Settings with the documented defaults and a dummy account."""
    return TestmailSettings(api_key="test-api-key", namespace="myns")


@pytest.fixture
def transport() -> FakeTransport:
    """Transport answering with an empty but successful inbox."""
    return FakeTransport([{"result": "success", "message": None, "emails": []}])


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def sleep(clock: ManualClock) -> RecordingSleep:
    return RecordingSleep(clock)


@pytest.fixture
def helper(
    settings: TestmailSettings,
    transport: FakeTransport,
    sleep: RecordingSleep,
    clock: ManualClock,
) -> TestmailHelper:
    """Helper wired to the fake transport, sleep and clock."""
    return TestmailHelper(settings, client=transport, sleep=sleep, clock=clock)
