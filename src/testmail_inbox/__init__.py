"""testmail-inbox - disposable testmail.app inboxes for end-to-end tests."""

from testmail_inbox.__version__ import (
    __author__,
    __copyright__,
    __description__,
    __license__,
    __title__,
    __version__,
    __version_info__,
    get_version,
)
from testmail_inbox.config import TestmailSettings, get_settings
from testmail_inbox.exceptions import (
    ConfigurationError,
    EmailTimeout,
    InvalidAddressFormat,
    NoInboxAvailable,
    TestmailError,
    TransportError,
)
from testmail_inbox.helper import TestmailHelper
from testmail_inbox.models import Inbox

__all__ = [
    "__version__",
    "__version_info__",
    "__title__",
    "__description__",
    "__author__",
    "__license__",
    "__copyright__",
    "get_version",
    "ConfigurationError",
    "EmailTimeout",
    "Inbox",
    "InvalidAddressFormat",
    "NoInboxAvailable",
    "TestmailError",
    "TestmailHelper",
    "TestmailSettings",
    "TransportError",
    "get_settings",
]
