"""
GraphQL client for the testmail.app API.

This module sends the ``inbox`` query to testmail.app. Namespace, tag
and timestamp travel as GraphQL variables, never as part of the query
text.
"""

import asyncio
import logging
from typing import Any, Optional

import requests

from .config import DEFAULT_ENDPOINT
from .exceptions import TransportError
from .models import InboxQueryResult

logger = logging.getLogger(__name__)

INBOX_QUERY = """
query Inbox($namespace: String!, $tag: String, $timestampFrom: Float) {
    inbox(namespace: $namespace, tag: $tag, timestamp_from: $timestampFrom) {
        result
        message
        emails {
            from
            subject
            html
            text
            attachments {
                filename
                contentType
                downloadUrl
            }
        }
    }
}
"""


class TestmailClient:
    """
    Thin GraphQL client for testmail.app.

    The API key is sent as a bearer token on every request of the
    underlying ``requests.Session``.
    """

    __test__ = False

    DEFAULT_TIMEOUT = 30  # seconds

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            api_key: testmail.app API key.
            endpoint: GraphQL endpoint URL.
            timeout: Per-request timeout in seconds.
            session: Optional pre-built session, mainly for tests.
        """
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    def execute(self, query: str, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Run a GraphQL operation and return its ``data`` object.

        Args:
            query: GraphQL document.
            variables: Variables for the document.

        Returns:
            The ``data`` member of the response.

        Raises:
            TransportError: On network errors, non-2xx responses, bodies
                that are not JSON, or GraphQL errors.
        """
        payload = {"query": query, "variables": variables or {}}

        try:
            response = self._session.post(
                self.endpoint, json=payload, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise TransportError(f"Request to {self.endpoint} failed: {e}") from e

        if not response.ok:
            raise TransportError(
                f"testmail.app returned HTTP {response.status_code}",
                status_code=response.status_code,
                details={"body": response.text[:200]},
            )

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(
                "testmail.app returned a non-JSON response",
                status_code=response.status_code,
            ) from e

        if not isinstance(body, dict):
            raise TransportError(
                "testmail.app returned an unexpected response",
                status_code=response.status_code,
            )

        errors = body.get("errors")
        if errors:
            messages = [err.get("message", str(err)) for err in errors if isinstance(err, dict)]
            raise TransportError(
                f"GraphQL error: {'; '.join(messages) or errors}",
                status_code=response.status_code,
                details={"errors": errors},
            )

        data = body.get("data")
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise TransportError(
                "testmail.app returned an unexpected data object",
                status_code=response.status_code,
            )
        return data

    def query_inbox(
        self, namespace: str, tag: str, timestamp_from: int
    ) -> InboxQueryResult:
        """
        Fetch emails received by an inbox since a timestamp.

        Args:
            namespace: Account namespace.
            tag: Inbox tag.
            timestamp_from: Lower bound in milliseconds since epoch.

        Returns:
            The parsed query result. A response without an ``inbox``
            object is returned as an unsuccessful result.
        """
        logger.debug(
            "Querying inbox %s.%s from timestamp %d", namespace, tag, timestamp_from
        )
        data = self.execute(
            INBOX_QUERY,
            {
                "namespace": namespace,
                "tag": tag,
                "timestampFrom": timestamp_from,
            },
        )
        inbox = data.get("inbox")
        if not isinstance(inbox, dict):
            return InboxQueryResult(result=None, message="No inbox in response")
        return InboxQueryResult.model_validate(inbox)

    async def aquery_inbox(
        self, namespace: str, tag: str, timestamp_from: int
    ) -> InboxQueryResult:
        """Run :meth:`query_inbox` in a worker thread."""
        return await asyncio.to_thread(
            self.query_inbox, namespace, tag, timestamp_from
        )

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> "TestmailClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
