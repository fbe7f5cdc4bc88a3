"""
Bootstrap component data models.

Frozen dataclasses for inputs, outputs, and validation errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.domain.entities import Session


@dataclass(frozen=True)
class OwnerStatus:
    """Whether the one owner account may still be created."""

    can_signup: bool
    user_count: int
    error: str | None = None

    @classmethod
    def fail_closed(cls, error: str) -> OwnerStatus:
        """Status reported when the account count could not be read."""
        return cls(can_signup=False, user_count=0, error=error)

    def to_dict(self) -> dict[str, bool | int]:
        return {"canSignup": self.can_signup, "userCount": self.user_count}


@dataclass(frozen=True)
class SignUpInput:
    email: str
    password: str
    confirm_password: str | None = None


@dataclass(frozen=True)
class SignInInput:
    email: str
    password: str


@dataclass(frozen=True)
class PasswordResetInput:
    email: str
    redirect_to: str


@dataclass(frozen=True)
class BootstrapInput:
    """Input parameters for headless bootstrap."""

    bootstrap_email: str | None
    bootstrap_password: str | None


@dataclass(frozen=True)
class BootstrapValidationError:
    """Validation error details."""

    code: str
    message: str
    field: str


@dataclass(frozen=True)
class BootstrapOutput:
    """Result of bootstrap operation."""

    session: Session | None
    created: bool
    skipped_reason: str | None
    errors: tuple[BootstrapValidationError, ...]
    success: bool

    @classmethod
    def skipped(cls, reason: str) -> BootstrapOutput:
        """Create a skipped result."""
        return cls(
            session=None,
            created=False,
            skipped_reason=reason,
            errors=(),
            success=True,
        )

    @classmethod
    def created_owner(cls, session: Session) -> BootstrapOutput:
        """Create a success result with the new owner's session."""
        return cls(
            session=session,
            created=True,
            skipped_reason=None,
            errors=(),
            success=True,
        )

    @classmethod
    def failed(cls, errors: tuple[BootstrapValidationError, ...]) -> BootstrapOutput:
        """Create a failure result."""
        return cls(
            session=None,
            created=False,
            skipped_reason=None,
            errors=errors,
            success=False,
        )
