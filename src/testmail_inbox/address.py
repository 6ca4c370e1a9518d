"""
Address composition and parsing for testmail.app inboxes.

Every testmail.app inbox address has the form
``{namespace}.{tag}@inbox.testmail.app``.
"""

import re

from .exceptions import InvalidAddressFormat

INBOX_DOMAIN = "inbox.testmail.app"

ADDRESS_PATTERN = re.compile(
    r"([A-Za-z0-9]+)\.([A-Za-z0-9]+)@" + re.escape(INBOX_DOMAIN)
)


def compose_address(namespace: str, tag: str) -> str:
    """Build the inbox address for a namespace and tag."""
    return f"{namespace}.{tag}@{INBOX_DOMAIN}"


def parse_address(address: str) -> tuple[str, str]:
    """
    Split an inbox address into its namespace and tag.

    The whole string has to match; an address merely containing a valid
    inbox address (``a.b@inbox.testmail.app.evil.com``) is rejected.

    Args:
        address: The address to parse.

    Returns:
        Tuple of (namespace, tag).

    Raises:
        InvalidAddressFormat: If the address does not match.
    """
    if not isinstance(address, str):
        raise InvalidAddressFormat(address)

    match = ADDRESS_PATTERN.fullmatch(address)
    if match is None:
        raise InvalidAddressFormat(address)

    return match.group(1), match.group(2)
