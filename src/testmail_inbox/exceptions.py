"""
Custom exceptions for testmail-inbox.

This module defines all custom exceptions raised by the helper so that
tests can tell a misconfigured session from a mail that never arrived.
"""

from typing import Any, Optional


class TestmailError(Exception):
    """Base exception for all testmail-inbox errors."""

    # Keep pytest from collecting the exception classes as test classes.
    __test__ = False

    def __init__(self, message: str,
                 details: Optional[dict[str, Any]] = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


# Configuration Exceptions
class ConfigurationError(TestmailError):
    """Base exception for configuration-related errors."""


class MissingConfigError(ConfigurationError):
    """Raised when a required configuration value is missing."""

    def __init__(
        self, config_key: str, details: Optional[dict[str, Any]] = None
    ) -> None:
        """
        Initialize missing config error.

        Args:
            config_key: The missing configuration key.
            details: Optional dictionary with additional error details.
        """
        super().__init__(
            f"Missing required configuration: '{config_key}'", details)
        self.config_key = config_key


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value is invalid."""

    def __init__(
        self,
        config_key: str,
        value: Any,
        reason: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize invalid config error.

        Args:
            config_key: The configuration key with invalid value.
            value: The invalid value.
            reason: Optional reason why the value is invalid.
            details: Optional dictionary with additional error details.
        """
        message = f"Invalid configuration value for '{config_key}': {value}"
        if reason:
            message += f" - {reason}"
        super().__init__(message, details)
        self.config_key = config_key
        self.value = value
        self.reason = reason


# Inbox Exceptions
class InboxError(TestmailError):
    """Base exception for inbox-related errors."""


class InvalidAddressFormat(InboxError):
    """Raised when an address is not of the form namespace.tag@inbox.testmail.app."""

    def __init__(
        self, address: Any, details: Optional[dict[str, Any]] = None
    ) -> None:
        """
        Initialize invalid address error.

        Args:
            address: The address that failed to parse.
            details: Optional dictionary with additional error details.
        """
        super().__init__(
            "Invalid email format supplied "
            "(must be namespace.tag@inbox.testmail.app).",
            details,
        )
        self.address = address


class NoInboxAvailable(InboxError):
    """Raised when no inbox was passed and none has been opened yet."""

    def __init__(self, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            "No/invalid inbox argument supplied and no previous inbox "
            "has been opened.",
            details,
        )


class EmailTimeout(InboxError):
    """Raised when polling ran out of time without any new email."""

    def __init__(
        self,
        address: str,
        timeout_ms: int,
        attempts: int,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize email timeout error.

        Args:
            address: The inbox address that was polled.
            timeout_ms: The polling budget in milliseconds.
            attempts: Number of queries issued before giving up.
            details: Optional dictionary with additional error details.
        """
        super().__init__("Did not receive any new email message.", details)
        self.address = address
        self.timeout_ms = timeout_ms
        self.attempts = attempts


# Transport Exceptions
class TransportError(TestmailError):
    """Raised when the testmail.app API cannot be queried."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize transport error.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code, when a response was received.
            details: Optional dictionary with additional error details.
        """
        super().__init__(message, details)
        self.status_code = status_code
