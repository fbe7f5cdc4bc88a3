"""
Email Adapter Interface.

Transactional email (password reset). Production adapters (SMTP, SES)
implement the same send_email method as the dev adapter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class EmailStatus(Enum):
    """Email send result status."""

    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"  # Dev adapter or dry-run


@dataclass(frozen=True)
class EmailResult:
    status: EmailStatus
    message_id: str | None = None
    recipient: str | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.status in (EmailStatus.SENT, EmailStatus.SKIPPED)


class EmailPort(Protocol):
    def send_email(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str | None = None,
    ) -> EmailResult:
        ...
