"""
Fixed-interval polling for new emails.

The poller waits one interval, queries the inbox, and repeats until the
inbox reports new emails or the time budget is spent. The budget is
charged one interval per attempt, so the time spent inside each query
comes on top of the nominal timeout.
"""

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

from .exceptions import EmailTimeout
from .models import Email, Inbox, InboxQueryResult

logger = logging.getLogger(__name__)

MS_IN_SECOND = 1000

FetchFunc = Callable[[Inbox], Awaitable[InboxQueryResult]]
SleepFunc = Callable[[float], Awaitable[None]]
ClockFunc = Callable[[], int]


def now_ms() -> int:
    """Return the current time in milliseconds since epoch."""
    return int(time.time() * MS_IN_SECOND)


def seconds_to_ms(seconds: float) -> int:
    """Convert seconds to whole milliseconds, rounding any fraction up."""
    # round() drops float noise such as 0.3 * 1000 == 300.00000000000006
    return math.ceil(round(seconds * MS_IN_SECOND, 6))


@dataclass(frozen=True)
class PollPolicy:
    """Interval and overall budget for one polling run, in milliseconds."""

    interval_ms: int
    timeout_ms: int

    def __post_init__(self) -> None:
        if self.interval_ms <= 0:
            raise ValueError(f"Poll interval must be positive, got {self.interval_ms}")

    @classmethod
    def from_seconds(cls, interval: float, timeout: float) -> "PollPolicy":
        """
        Build a policy from values given in seconds.

        Sub-millisecond values round up, so any positive interval or
        timeout yields at least one millisecond.
        """
        return cls(
            interval_ms=seconds_to_ms(interval),
            timeout_ms=seconds_to_ms(timeout),
        )

    @property
    def max_attempts(self) -> int:
        """Number of queries issued before the budget runs out."""
        if self.timeout_ms <= 0:
            return 0
        return math.ceil(self.timeout_ms / self.interval_ms)


class EmailPoller:
    """
    Poll an inbox until new emails show up.

    ``fetch``, ``sleep`` and ``clock`` are injected so that tests can run
    the loop without a network or real timers.
    """

    def __init__(
        self,
        policy: PollPolicy,
        fetch: FetchFunc,
        sleep: SleepFunc = asyncio.sleep,
        clock: ClockFunc = now_ms,
    ) -> None:
        self.policy = policy
        self._fetch = fetch
        self._sleep = sleep
        self._clock = clock

    async def poll(self, inbox: Inbox) -> list[Email]:
        """
        Wait for new emails in ``inbox``.

        On success the inbox watermark is moved to the current time so
        that the next call only sees later emails.

        Args:
            inbox: The inbox to poll.

        Returns:
            All new emails of the first non-empty successful response.

        Raises:
            EmailTimeout: If the budget ran out without new emails.
            TransportError: If a query fails at the HTTP or GraphQL level.
        """
        remaining = self.policy.timeout_ms
        attempts = 0

        while remaining > 0:
            await self._sleep(self.policy.interval_ms / MS_IN_SECOND)
            remaining -= self.policy.interval_ms
            attempts += 1

            result = await self._fetch(inbox)
            if result.has_emails:
                inbox.advance_watermark(self._clock())
                logger.info(
                    "Received %d email(s) for %s after %d attempt(s)",
                    len(result.emails),
                    inbox.address,
                    attempts,
                )
                return result.emails

            # A failed query counts as "nothing yet"
            logger.debug(
                "No new email for %s (attempt %d, result=%s, message=%s)",
                inbox.address,
                attempts,
                result.result,
                result.message,
            )

        logger.warning(
            "Gave up waiting for %s after %d attempt(s) (%d ms)",
            inbox.address,
            attempts,
            self.policy.timeout_ms,
        )
        raise EmailTimeout(
            address=inbox.address,
            timeout_ms=self.policy.timeout_ms,
            attempts=attempts,
        )
