"""
Error taxonomy shared by every portfolio component.

- ValidationError: missing/malformed input; the caller corrects and resubmits.
- AuthorizationError: caller is not the owner; never retried.
- StoreError: the persistent store failed or refused the call; retry is the caller's choice.
- AggregationError: one collection fetch failed while building the public view.
- UploadError: object storage refused or failed an upload.
"""

from __future__ import annotations

from collections.abc import Iterable


class PortfolioError(Exception):
    """Base class for portfolio errors."""


class ValidationError(PortfolioError):
    """Required fields missing or values malformed. Nothing was written."""

    def __init__(
        self,
        missing_fields: Iterable[str] = (),
        message: str | None = None,
        *,
        invalid_fields: Iterable[str] = (),
    ) -> None:
        self.missing_fields = tuple(missing_fields)
        self.invalid_fields = tuple(invalid_fields)
        if message is None:
            parts = []
            if self.missing_fields:
                parts.append(f"Missing required field(s): {', '.join(self.missing_fields)}")
            if self.invalid_fields:
                parts.append(f"Invalid field(s): {', '.join(self.invalid_fields)}")
            message = "; ".join(parts) or "Validation failed"
        self.message = message
        super().__init__(message)

    @property
    def fields(self) -> tuple[str, ...]:
        return self.missing_fields + self.invalid_fields


class AuthorizationError(PortfolioError):
    """Caller is not the site owner."""

    def __init__(self, message: str = "Owner session required") -> None:
        self.message = message
        super().__init__(message)


class StoreError(PortfolioError):
    """Persistent store failure (connectivity or access-control rejection)."""

    def __init__(
        self,
        message: str,
        *,
        table: str | None = None,
        permission_denied: bool = False,
    ) -> None:
        self.message = message
        self.table = table
        self.permission_denied = permission_denied
        super().__init__(message)


class AggregationError(PortfolioError):
    """Building the aggregated view failed; wraps the first failing fetch."""

    def __init__(self, cause: Exception, collection: str | None = None) -> None:
        self.cause = cause
        self.collection = collection
        where = f" ({collection})" if collection else ""
        super().__init__(f"Failed to build portfolio view{where}: {cause}")


class UploadError(PortfolioError):
    """Upload rejected or failed; no URL was produced."""

    def __init__(self, message: str, *, code: str = "upload_failed") -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(StoreError):
    """The targeted row does not exist."""
