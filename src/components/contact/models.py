"""
Contact form models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

CONTACT_FIELDS = ("name", "email", "subject", "message")


@dataclass(frozen=True)
class ContactSubmission:
    name: str | None
    email: str | None
    message: str | None
    subject: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContactSubmission:
        return cls(**{k: data.get(k) for k in CONTACT_FIELDS})

    def to_fields(self) -> dict[str, Any]:
        fields = {
            "name": self.name,
            "email": self.email,
            "subject": self.subject,
            "message": self.message,
        }
        return {k: v.strip() if isinstance(v, str) else v for k, v in fields.items()}
