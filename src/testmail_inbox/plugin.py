"""
pytest plugin exposing testmail.app inboxes as fixtures.

The plugin is registered through the ``pytest11`` entry point, so the
fixtures are available as soon as the package is installed::

    async def test_signup_sends_welcome_mail(testmail, inbox):
        await sign_up(inbox.address)
        email = await testmail.receive_email(inbox)
        assert "Welcome" in email["subject"]

Settings are read from the command line, then the ini file, then the
``TESTMAIL_*`` environment variables (see :mod:`testmail_inbox.config`).
"""

from typing import Any, Generator

import pytest

from .config import TestmailSettings, get_settings
from .exceptions import ConfigurationError
from .helper import TestmailHelper
from .models import Inbox

# ini key -> settings field
INI_OPTIONS = {
    "testmail_api_key": ("api_key", "testmail.app API key"),
    "testmail_namespace": ("namespace", "testmail.app namespace"),
    "testmail_sleep_delay": ("sleep_delay", "seconds between inbox queries"),
    "testmail_default_timeout": ("default_timeout", "seconds to wait for emails"),
    "testmail_tag_length": ("tag_length", "length of generated inbox tags"),
}


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("testmail", "testmail.app inboxes")
    group.addoption(
        "--testmail-namespace",
        action="store",
        default=None,
        help="testmail.app namespace for generated inboxes",
    )
    group.addoption(
        "--testmail-timeout",
        action="store",
        type=float,
        default=None,
        help="seconds to wait for emails (overrides testmail_default_timeout)",
    )
    for name, (_, help_text) in INI_OPTIONS.items():
        parser.addini(name, help=help_text, default=None)


def settings_from_config(config: Any) -> TestmailSettings:
    """
    Merge environment, ini and command line values into settings.

    Args:
        config: The pytest ``Config`` object.

    Returns:
        TestmailSettings instance.
    """
    values: dict[str, Any] = get_settings().model_dump()

    for name, (field, _) in INI_OPTIONS.items():
        value = config.getini(name)
        if value:
            values[field] = value

    namespace = config.getoption("testmail_namespace", default=None)
    if namespace:
        values["namespace"] = namespace
    timeout = config.getoption("testmail_timeout", default=None)
    if timeout:
        values["default_timeout"] = timeout

    return TestmailSettings.from_dict(values)


@pytest.fixture(scope="session")
def testmail_settings(pytestconfig: pytest.Config) -> TestmailSettings:
    """Settings used by the ``testmail`` fixture."""
    return settings_from_config(pytestconfig)


@pytest.fixture(scope="session")
def testmail(
    testmail_settings: TestmailSettings,
) -> Generator[TestmailHelper, None, None]:
    """
    Session-wide helper for creating and polling inboxes.

    Tests using it are skipped when the API key or namespace is missing.
    """
    try:
        helper = TestmailHelper(testmail_settings)
    except ConfigurationError as e:
        pytest.skip(f"testmail.app is not configured: {e}")

    yield helper
    helper.close()


@pytest.fixture
def inbox(testmail: TestmailHelper) -> Inbox:
    """A fresh inbox for the current test."""
    return testmail.have_inbox()
