"""Public contact form."""

from .component import ContactRepositoryPort, submit_contact_message
from .models import CONTACT_FIELDS, ContactSubmission

__all__ = [
    "submit_contact_message",
    "ContactSubmission",
    "ContactRepositoryPort",
    "CONTACT_FIELDS",
]
