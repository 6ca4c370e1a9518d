#!/usr/bin/env python3
"""
Command-line interface for testmail-inbox.

Handy for checking an account setup or for shell-driven tests.

Usage:
    testmail-inbox new [--address ADDRESS]
    testmail-inbox receive ADDRESS [--timeout SECONDS] [--first]

Options:
    --debug         Enable debug logging
    --version       Show version and exit
    --help          Show this message and exit
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Optional, Sequence

from testmail_inbox import __version__
from testmail_inbox.config import get_settings
from testmail_inbox.exceptions import (
    ConfigurationError,
    EmailTimeout,
    InvalidAddressFormat,
    TransportError,
)
from testmail_inbox.helper import TestmailHelper

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_TIMEOUT = 2


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for the command-line tool.

    Logs go to stderr so that stdout only carries addresses and JSON.

    Args:
        debug: Enable debug logging.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )

    if not debug:
        logging.getLogger("urllib3").setLevel(logging.WARNING)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="testmail-inbox",
        description="testmail-inbox - disposable testmail.app inboxes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Print a fresh inbox address:
        testmail-inbox new

    Wait up to a minute for mail and print the first one:
        testmail-inbox receive myns.abc123@inbox.testmail.app --timeout 60 --first

Environment Variables:
    TESTMAIL_API_KEY          testmail.app API key (required)
    TESTMAIL_NAMESPACE        testmail.app namespace (required)
    TESTMAIL_SLEEP_DELAY      Seconds between inbox queries (default: 5)
    TESTMAIL_DEFAULT_TIMEOUT  Seconds to wait for emails (default: 240)
    TESTMAIL_TAG_LENGTH       Length of generated tags (default: 8)
    TESTMAIL_CONFIG_FILE      TOML file with a [testmail] table
    TESTMAIL_DEBUG            Enable debug mode (true/false)
        """,
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"testmail-inbox {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    new_parser = subparsers.add_parser("new", help="Create an inbox and print its address")
    new_parser.add_argument(
        "--address",
        default=None,
        help="Reuse namespace and tag of an existing address",
    )

    receive_parser = subparsers.add_parser(
        "receive", help="Wait for new emails and print them as JSON"
    )
    receive_parser.add_argument("address", help="Inbox address to poll")
    receive_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait (default: TESTMAIL_DEFAULT_TIMEOUT)",
    )
    receive_parser.add_argument(
        "--first",
        action="store_true",
        help="Print only the first email",
    )

    return parser.parse_args(argv)


async def _receive(helper: TestmailHelper, args: argparse.Namespace) -> object:
    inbox = helper.have_inbox(args.address)
    if args.first:
        return await helper.receive_email(inbox, args.timeout)
    return await helper.receive_emails(inbox, args.timeout)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the testmail-inbox command.

    Returns:
        Exit code (0 for success, 2 on timeout, 1 for other failures).
    """
    args = parse_args(argv)

    if args.debug:
        debug = True
    else:
        debug = os.getenv("TESTMAIL_DEBUG", "").lower() in ("true", "1", "yes")

    setup_logging(debug)
    logger = logging.getLogger(__name__)

    try:
        with TestmailHelper(get_settings()) as helper:
            if args.command == "new":
                print(helper.have_inbox(args.address).address)
                return EXIT_OK

            emails = asyncio.run(_receive(helper, args))
            print(json.dumps(emails, indent=2))
            return EXIT_OK

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_ERROR

    except EmailTimeout as e:
        logger.error("%s (%s, %d attempts)", e, e.address, e.attempts)
        return EXIT_TIMEOUT

    except (ConfigurationError, InvalidAddressFormat, TransportError) as e:
        logger.error("%s", e)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
