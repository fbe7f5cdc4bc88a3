# folio-sync ports (Protocol interfaces)
# Abstract interfaces for adapters; no implementations here

from src.core.ports.auth import (
    AccountExistsError,
    AuthError,
    AuthServicePort,
    AuthUnavailableError,
    SessionCallback,
)
from src.core.ports.changes import ChangeCallback, ChangeChannelPort, ChangePublisherPort
from src.core.ports.email import EmailPort, EmailResult, EmailStatus
from src.core.ports.storage import (
    KeyExistsError,
    KeyNotFoundError,
    ObjectStoragePort,
    StorageError,
    StoredObject,
)
from src.core.ports.store import OrderBy, Row, TableStorePort
from src.core.ports.time import TimePort

__all__ = [
    # Auth service
    "AccountExistsError",
    "AuthError",
    "AuthServicePort",
    "AuthUnavailableError",
    "SessionCallback",
    # Change notifications
    "ChangeCallback",
    "ChangeChannelPort",
    "ChangePublisherPort",
    # Email
    "EmailPort",
    "EmailResult",
    "EmailStatus",
    # Object storage
    "KeyExistsError",
    "KeyNotFoundError",
    "ObjectStoragePort",
    "StorageError",
    "StoredObject",
    # Table store
    "OrderBy",
    "Row",
    "TableStorePort",
    # Time
    "TimePort",
]
