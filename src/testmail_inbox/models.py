"""
Pydantic models for testmail-inbox.

This module defines the inbox handle that tests hold on to and the
shape of one answer from the testmail.app inbox query.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .address import compose_address

# Emails are returned exactly as the service sends them: from, subject,
# html, text and optional attachments (filename, contentType, downloadUrl).
Email = dict[str, Any]


class Inbox(BaseModel):
    """
    Handle identifying one logical testmail.app inbox.

    ``namespace`` and ``tag`` are fixed once the handle exists, and the
    address is always derived from them. ``watermark`` is the lower bound
    (ms since epoch) for what counts as a new email; it only moves forward.
    """

    model_config = ConfigDict(validate_assignment=True)

    namespace: str = Field(..., frozen=True, description="Account namespace")
    tag: str = Field(..., frozen=True, description="Inbox tag")
    watermark: int = Field(
        ..., ge=0, description="Timestamp (ms) new emails are counted from"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def address(self) -> str:
        """The email address of this inbox."""
        return compose_address(self.namespace, self.tag)

    @property
    def is_complete(self) -> bool:
        """Check whether the handle can be used to query the service."""
        return bool(self.namespace and self.tag and self.watermark)

    def advance_watermark(self, timestamp: int) -> None:
        """Move the watermark to ``timestamp`` unless it would go backwards."""
        if timestamp > self.watermark:
            self.watermark = timestamp

    def __str__(self) -> str:
        return self.address


class InboxQueryResult(BaseModel):
    """One response of the testmail.app ``inbox`` query."""

    model_config = ConfigDict(extra="ignore")

    result: Optional[str] = Field(None, description="'success' or an error code")
    message: Optional[str] = Field(None, description="Service message")
    emails: list[Email] = Field(default_factory=list, description="Matched emails")

    @field_validator("emails", mode="before")
    @classmethod
    def coerce_missing_emails(cls, v: Any) -> Any:
        """Treat a null email list as empty."""
        if v is None:
            return []
        return v

    @property
    def is_success(self) -> bool:
        """Check if the service reported success."""
        return self.result == "success"

    @property
    def has_emails(self) -> bool:
        """Check if this response carries at least one new email."""
        return self.is_success and len(self.emails) > 0
