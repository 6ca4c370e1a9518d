"""
Test helper for end-to-end email testing with testmail.app.

``TestmailHelper`` is what tests talk to: it creates inboxes and waits
for emails sent to them. Example::

    helper = TestmailHelper(TestmailSettings.from_dict({
        "apiKey": "<testmail.app API key>",
        "namespace": "<testmail.app namespace>",
    }))
    inbox = helper.have_inbox()
    # ... make the application send a mail to inbox.address ...
    email = await helper.receive_email()

The helper keeps the last created inbox as "current"; tests juggling
several inboxes should pass the handles explicitly instead.
"""

import asyncio
import logging
from typing import Any, Optional

from .address import parse_address
from .client import TestmailClient
from .config import TestmailSettings, get_settings
from .exceptions import NoInboxAvailable
from .models import Email, Inbox, InboxQueryResult
from .polling import ClockFunc, EmailPoller, PollPolicy, SleepFunc, now_ms
from .tags import generate_tag

logger = logging.getLogger(__name__)


class TestmailHelper:
    """
    Creates testmail.app inboxes and polls them for new emails.

    Two calls polling the same inbox at the same time share its
    watermark without any locking; give each concurrent task its own
    inbox.
    """

    __test__ = False

    def __init__(
        self,
        settings: Optional[TestmailSettings] = None,
        client: Optional[TestmailClient] = None,
        sleep: SleepFunc = asyncio.sleep,
        clock: ClockFunc = now_ms,
    ) -> None:
        """
        Initialize the helper.

        Args:
            settings: Settings to use; defaults to :func:`get_settings`.
            client: Optional pre-built API client.
            sleep: Awaitable used to wait between queries.
            clock: Millisecond clock used for watermarks.

        Raises:
            MissingConfigError: If the API key or namespace is not set.
        """
        self.settings = settings or get_settings()
        self.settings.validate_required()

        self.client = client or TestmailClient(
            api_key=self.settings.api_key,
            endpoint=self.settings.endpoint,
            timeout=self.settings.request_timeout,
        )
        self._sleep = sleep
        self._clock = clock
        self._current_inbox: Optional[Inbox] = None

    @property
    def current_inbox(self) -> Optional[Inbox]:
        """The inbox created by the last :meth:`have_inbox` call."""
        return self._current_inbox

    def have_inbox(self, email: Optional[str] = None) -> Inbox:
        """
        Create a new inbox and make it the current one.

        Without ``email`` a random tag is generated in the configured
        namespace. With ``email`` (``namespace.tag@inbox.testmail.app``)
        its namespace and tag are used. Either way only emails received
        from now on count as new.

        Args:
            email: Optional address to reuse.

        Returns:
            The new inbox.

        Raises:
            InvalidAddressFormat: If ``email`` is not a testmail.app address.
        """
        if email:
            namespace, tag = parse_address(email)
        else:
            namespace = self.settings.namespace
            tag = generate_tag(self.settings.tag_length)

        inbox = Inbox(namespace=namespace, tag=tag, watermark=self._clock())
        self._current_inbox = inbox
        logger.info("Using inbox %s", inbox.address)
        return inbox

    async def receive_emails(
        self,
        inbox: Optional[Inbox] = None,
        timeout: Optional[float] = None,
    ) -> list[Email]:
        """
        Wait for all emails received since the last successful call.

        Args:
            inbox: Inbox to poll; defaults to the current inbox.
            timeout: Seconds to wait; defaults to ``default_timeout``.

        Returns:
            The new emails, at least one.

        Raises:
            NoInboxAvailable: If there is no usable inbox.
            EmailTimeout: If nothing arrived in time.
            TransportError: If the API could not be queried.
        """
        if inbox is None:
            inbox = self._current_inbox
        if not isinstance(inbox, Inbox) or not inbox.is_complete:
            raise NoInboxAvailable()

        policy = PollPolicy.from_seconds(
            interval=self.settings.sleep_delay,
            timeout=timeout or self.settings.default_timeout,
        )
        poller = EmailPoller(
            policy, self._fetch, sleep=self._sleep, clock=self._clock
        )
        return await poller.poll(inbox)

    async def receive_email(
        self,
        inbox: Optional[Inbox] = None,
        timeout: Optional[float] = None,
    ) -> Email:
        """
        Wait for new emails and return the first one.

        Takes the same arguments and raises the same errors as
        :meth:`receive_emails`.
        """
        emails = await self.receive_emails(inbox, timeout)
        return emails[0]

    async def _fetch(self, inbox: Inbox) -> InboxQueryResult:
        return await self.client.aquery_inbox(
            inbox.namespace, inbox.tag, inbox.watermark
        )

    def close(self) -> None:
        """Release the HTTP session."""
        self.client.close()

    def __enter__(self) -> "TestmailHelper":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # Names used by the CodeceptJS helper this package mirrors.
    haveInbox = have_inbox
    receiveEmails = receive_emails
    receiveEmail = receive_email
