"""
Tests for the fixed-interval email poller.
"""

import asyncio

import pytest

from testmail_inbox.exceptions import EmailTimeout, TransportError
from testmail_inbox.models import Inbox, InboxQueryResult
from testmail_inbox.polling import EmailPoller, PollPolicy, now_ms

from conftest import FakeTransport, ManualClock, RecordingSleep

EMPTY = {"result": "success", "message": None, "emails": []}


def make_poller(transport, policy, sleep, clock):
    async def fetch(inbox):
        return await transport.aquery_inbox(inbox.namespace, inbox.tag, inbox.watermark)

    return EmailPoller(policy, fetch, sleep=sleep, clock=clock)


class TestPollPolicy:
    """Tests for PollPolicy."""

    def test_from_seconds(self):
        """Test conversion from seconds to milliseconds."""
        policy = PollPolicy.from_seconds(interval=5, timeout=240)
        assert policy.interval_ms == 5000
        assert policy.timeout_ms == 240000

    def test_fractional_seconds(self):
        """Test that fractional seconds are kept."""
        policy = PollPolicy.from_seconds(interval=0.5, timeout=1.25)
        assert policy.interval_ms == 500
        assert policy.timeout_ms == 1250

    def test_sub_millisecond_values_round_up(self):
        """Test that tiny positive values still give a usable policy."""
        policy = PollPolicy.from_seconds(interval=0.0004, timeout=0.0002)
        assert policy.interval_ms == 1
        assert policy.timeout_ms == 1
        assert policy.max_attempts == 1

    def test_float_noise_is_not_rounded_up(self):
        """Test that 0.3 seconds stays 300 ms."""
        policy = PollPolicy.from_seconds(interval=0.3, timeout=0.7)
        assert policy.interval_ms == 300
        assert policy.timeout_ms == 700

    @pytest.mark.parametrize(
        "timeout_ms,expected",
        [(10000, 2), (12000, 3), (5000, 1), (1, 1), (0, 0), (-5000, 0)],
    )
    def test_max_attempts(self, timeout_ms, expected):
        """Test how many queries fit in the budget."""
        assert PollPolicy(interval_ms=5000, timeout_ms=timeout_ms).max_attempts == expected

    def test_rejects_non_positive_interval(self):
        """Test that a zero interval is refused."""
        with pytest.raises(ValueError):
            PollPolicy(interval_ms=0, timeout_ms=1000)


class TestEmailPoller:
    """Tests for EmailPoller.poll."""

    @pytest.mark.asyncio
    async def test_returns_emails_from_first_hit(self):
        """Test that the first non-empty success ends polling."""
        clock = ManualClock(start=1000)
        sleep = RecordingSleep(clock)
        transport = FakeTransport([EMPTY, {"result": "success", "emails": [{"from": "a"}, {"from": "b"}]}])
        inbox = Inbox(namespace="ns", tag="t", watermark=1000)

        poller = make_poller(transport, PollPolicy(5000, 60000), sleep, clock)
        emails = await poller.poll(inbox)

        assert emails == [{"from": "a"}, {"from": "b"}]
        assert sleep.delays == [5.0, 5.0]
        assert len(transport.calls) == 2
        assert inbox.watermark == 11000

    @pytest.mark.asyncio
    async def test_waits_before_first_query(self):
        """Test that each query is preceded by a full interval."""
        events = []
        inbox = Inbox(namespace="ns", tag="t", watermark=1)

        async def sleep(seconds):
            events.append(("sleep", seconds))

        async def fetch(_inbox):
            events.append(("fetch",))
            return InboxQueryResult(result="success", emails=[{"from": "a"}])

        poller = EmailPoller(PollPolicy(2000, 10000), fetch, sleep=sleep, clock=lambda: 5)
        await poller.poll(inbox)

        assert events == [("sleep", 2.0), ("fetch",)]

    @pytest.mark.asyncio
    async def test_timeout_after_exact_number_of_attempts(self):
        """Test that a budget of two intervals means two queries."""
        clock = ManualClock()
        sleep = RecordingSleep(clock)
        transport = FakeTransport([EMPTY])
        inbox = Inbox(namespace="ns", tag="t", watermark=clock())

        poller = make_poller(transport, PollPolicy(5000, 10000), sleep, clock)
        with pytest.raises(EmailTimeout) as exc_info:
            await poller.poll(inbox)

        assert len(transport.calls) == 2
        assert exc_info.value.attempts == 2
        assert exc_info.value.timeout_ms == 10000
        assert exc_info.value.address == "ns.t@inbox.testmail.app"

    @pytest.mark.asyncio
    async def test_partial_interval_still_polls(self):
        """Test that a budget left over below one interval earns a final query."""
        clock = ManualClock()
        transport = FakeTransport([EMPTY])
        inbox = Inbox(namespace="ns", tag="t", watermark=clock())

        poller = make_poller(transport, PollPolicy(5000, 12000), RecordingSleep(clock), clock)
        with pytest.raises(EmailTimeout):
            await poller.poll(inbox)

        assert len(transport.calls) == 3

    @pytest.mark.asyncio
    async def test_zero_budget_times_out_without_querying(self):
        """Test that an exhausted budget never queries."""
        transport = FakeTransport([EMPTY])
        inbox = Inbox(namespace="ns", tag="t", watermark=1)

        poller = make_poller(transport, PollPolicy(5000, 0), RecordingSleep(), ManualClock())
        with pytest.raises(EmailTimeout) as exc_info:
            await poller.poll(inbox)

        assert transport.calls == []
        assert exc_info.value.attempts == 0

    @pytest.mark.asyncio
    async def test_failed_results_are_retried(self):
        """Test that a service-reported failure counts as no email yet."""
        clock = ManualClock()
        transport = FakeTransport([
            {"result": "fail", "message": "internal error", "emails": None},
            {"result": "success", "emails": [{"from": "a"}]},
        ])
        inbox = Inbox(namespace="ns", tag="t", watermark=clock())

        poller = make_poller(transport, PollPolicy(5000, 60000), RecordingSleep(clock), clock)
        assert await poller.poll(inbox) == [{"from": "a"}]
        assert len(transport.calls) == 2

    @pytest.mark.asyncio
    async def test_transport_errors_propagate(self):
        """Test that HTTP level failures end polling at once."""
        clock = ManualClock()
        transport = FakeTransport([TransportError("boom", status_code=502)])
        inbox = Inbox(namespace="ns", tag="t", watermark=clock())

        poller = make_poller(transport, PollPolicy(5000, 60000), RecordingSleep(clock), clock)
        with pytest.raises(TransportError):
            await poller.poll(inbox)
        assert len(transport.calls) == 1

    @pytest.mark.asyncio
    async def test_watermark_unchanged_on_timeout(self):
        """Test that a timeout leaves the watermark alone."""
        clock = ManualClock(start=500)
        transport = FakeTransport([EMPTY])
        inbox = Inbox(namespace="ns", tag="t", watermark=500)

        poller = make_poller(transport, PollPolicy(5000, 5000), RecordingSleep(clock), clock)
        with pytest.raises(EmailTimeout):
            await poller.poll(inbox)
        assert inbox.watermark == 500

    @pytest.mark.asyncio
    async def test_waiting_lets_other_tasks_run(self):
        """Test that the wait between queries yields to the event loop."""
        transport = FakeTransport([EMPTY])
        inbox = Inbox(namespace="ns", tag="t", watermark=1)
        poller = make_poller(transport, PollPolicy(50, 100), asyncio.sleep, now_ms)

        task = asyncio.create_task(poller.poll(inbox))
        await asyncio.sleep(0.01)

        assert not task.done()
        with pytest.raises(EmailTimeout):
            await task
        assert len(transport.calls) == 2
