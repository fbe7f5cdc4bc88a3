"""Public contact form: anonymous, write-only insert of a ContactMessage."""

from __future__ import annotations

import logging
import re
from typing import Any, Protocol
from uuid import UUID

from src.domain.errors import ValidationError

from .models import ContactSubmission

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ContactRepositoryPort(Protocol):
    def create(self, fields: dict[str, Any], owner_id: UUID | None) -> Any:
        ...


def submit_contact_message(
    submission: ContactSubmission, repo: ContactRepositoryPort
) -> None:
    """Store a visitor's message. Nothing is returned to the submitter.

    Raises:
        ValidationError: name, email or message missing, or email malformed.
    """
    fields = submission.to_fields()
    email = fields.get("email")
    if email and not _EMAIL_RE.match(email):
        raise ValidationError(invalid_fields=["email"])

    message = repo.create(fields, owner_id=None)
    logger.info("Contact message %s received", message.id)
