"""
Bootstrap component port definitions.

Protocol interfaces for external dependencies.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from src.core.ports.auth import SessionCallback
    from src.domain.entities import Session


class AuthAdapterPort(Protocol):
    """Subset of the auth service the gate relies on."""

    def count_accounts(self) -> int:
        """Number of existing accounts."""
        ...

    def sign_up(self, email: str, password: str) -> Session:
        ...

    def sign_in(self, email: str, password: str) -> Session:
        ...

    def send_password_reset(self, email: str, redirect_to: str) -> None:
        ...

    def complete_password_reset(self, token: str, new_password: str) -> None:
        ...


class SessionSourcePort(Protocol):
    """Where the authoritative current session comes from."""

    def get_current_session(self) -> Session | None:
        ...

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        ...
