"""
Authentication Service Interface.

Sign-up, password sign-in, password-reset email flow and session
observation. Sessions are issued by the service; callers never build them.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from src.domain.entities import Session

SessionCallback = Callable[[Session | None], None]


class AuthError(Exception):
    """Raised by auth services for rejected credentials or service failures."""


class AccountExistsError(AuthError):
    """Sign-up refused because an account already exists."""


class AuthUnavailableError(AuthError):
    """The account store could not be reached; not a judgement on credentials."""


class AuthServicePort(Protocol):
    def count_accounts(self) -> int:
        """Number of accounts that exist. Raises on service failure."""
        ...

    def sign_up(self, email: str, password: str) -> Session:
        """Create an account and return its session. Raises AuthError."""
        ...

    def sign_in(self, email: str, password: str) -> Session:
        """Password sign-in. Raises AuthError on bad credentials."""
        ...

    def sign_out(self) -> None:
        """Drop the current session."""
        ...

    def send_password_reset(self, email: str, redirect_to: str) -> None:
        """Email a password reset link pointing at redirect_to."""
        ...

    def get_current_session(self) -> Session | None:
        ...

    def verify_token(self, token: str) -> Session | None:
        """Resolve a bearer token to its session, or None if invalid/expired."""
        ...

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        """Register a session listener. Returns an unsubscribe function."""
        ...
