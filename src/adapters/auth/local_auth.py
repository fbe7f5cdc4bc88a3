"""
Local authentication service backed by the SQLite `accounts` table.

Implements AuthServicePort for a single-process deployment:
- argon2 password hashes (passlib)
- signed JWT session and reset tokens (python-jose)
- password reset links delivered through the email port

The account insert is conditional on the table being empty, so two
concurrent sign-ups cannot both produce an account.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta
from urllib.parse import urlencode
from uuid import UUID, uuid4

from src.adapters.auth.crypto import TokenSigner, hash_password, verify_password
from src.adapters.sqlite.table_store import dict_factory
from src.core.ports.auth import (
    AccountExistsError,
    AuthError,
    AuthUnavailableError,
    SessionCallback,
)
from src.core.ports.email import EmailPort
from src.core.ports.time import TimePort
from src.domain.entities import Account, Session

logger = logging.getLogger(__name__)

SESSION_PURPOSE = "session"
RESET_PURPOSE = "password_reset"


class LocalAuthService:
    def __init__(
        self,
        db_path: str,
        signer: TokenSigner,
        time: TimePort,
        email: EmailPort | None = None,
        session_ttl_minutes: int = 60 * 24,
        reset_ttl_minutes: int = 60,
    ) -> None:
        self.db_path = db_path
        self._signer = signer
        self._time = time
        self._email = email
        self._session_ttl = timedelta(minutes=session_ttl_minutes)
        self._reset_ttl = timedelta(minutes=reset_ttl_minutes)
        self._lock = threading.Lock()
        self._current: Session | None = None
        self._listeners: dict[UUID, SessionCallback] = {}

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise AuthUnavailableError(f"Account store unavailable: {e}") from e
        conn.row_factory = dict_factory
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise AuthUnavailableError(f"Account store unavailable: {e}") from e
        finally:
            conn.close()

    # --- Accounts ---

    def count_accounts(self) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) AS n FROM accounts").fetchone()
        return int(row["n"])

    def get_account_by_email(self, email: str) -> Account | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM accounts WHERE lower(email) = lower(?)", (email.strip(),)
            ).fetchone()
        return Account.model_validate(row) if row else None

    def get_account(self, account_id: UUID) -> Account | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM accounts WHERE id = ?", (str(account_id),)
            ).fetchone()
        return Account.model_validate(row) if row else None

    # --- Sessions ---

    def _issue_session(self, account: Account) -> Session:
        now = self._time.now_utc()
        token, expires_at = self._signer.create(
            {"sub": str(account.id), "email": account.email, "purpose": SESSION_PURPOSE},
            self._session_ttl,
            now_utc=now,
        )
        return Session(
            access_token=token,
            account_id=account.id,
            email=account.email,
            expires_at=expires_at,
            created_at=now,
        )

    def _set_current(self, session: Session | None) -> None:
        with self._lock:
            self._current = session
            listeners = list(self._listeners.values())
        for callback in listeners:
            callback(session)

    def sign_up(self, email: str, password: str) -> Session:
        now = self._time.now_utc()
        account = Account(
            id=uuid4(),
            email=email.strip(),
            password_hash=hash_password(password),
            created_at=now,
            updated_at=now,
        )
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO accounts (id, email, password_hash, created_at, updated_at)
                SELECT ?, ?, ?, ?, ?
                WHERE NOT EXISTS (SELECT 1 FROM accounts)
                """,
                (
                    str(account.id),
                    account.email,
                    account.password_hash,
                    account.created_at.isoformat(),
                    account.updated_at.isoformat(),
                ),
            )
            inserted = cursor.rowcount == 1

        if not inserted:
            raise AccountExistsError("An account already exists")

        logger.info("Created owner account %s", account.id)
        session = self._issue_session(account)
        self._set_current(session)
        return session

    def sign_in(self, email: str, password: str) -> Session:
        account = self.get_account_by_email(email)
        if not account or not verify_password(password, account.password_hash):
            raise AuthError("Invalid login credentials")

        session = self._issue_session(account)
        self._set_current(session)
        return session

    def sign_out(self) -> None:
        self._set_current(None)

    def get_current_session(self) -> Session | None:
        with self._lock:
            current = self._current
        if current is not None and current.expires_at <= self._time.now_utc():
            self._set_current(None)
            return None
        return current

    def verify_token(self, token: str) -> Session | None:
        payload = self._signer.decode(token)
        if not payload or payload.get("purpose") != SESSION_PURPOSE:
            return None
        try:
            account_id = UUID(str(payload.get("sub")))
        except ValueError:
            return None

        account = self.get_account(account_id)
        if account is None:
            return None
        return Session(
            access_token=token,
            account_id=account.id,
            email=account.email,
            expires_at=datetime.fromtimestamp(int(payload["exp"]), UTC),
        )

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        key = uuid4()
        with self._lock:
            self._listeners[key] = callback

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.pop(key, None)

        return unsubscribe

    # --- Password reset ---

    def send_password_reset(self, email: str, redirect_to: str) -> None:
        account = self.get_account_by_email(email)
        if account is None:
            # Unknown addresses get the same response as known ones
            logger.info("Password reset requested for unknown address")
            return

        token, _ = self._signer.create(
            {"sub": str(account.id), "purpose": RESET_PURPOSE, "pwd": account.password_hash[-16:]},
            self._reset_ttl,
            now_utc=self._time.now_utc(),
        )
        separator = "&" if "?" in redirect_to else "?"
        link = f"{redirect_to}{separator}{urlencode({'token': token})}"

        if self._email is None:
            raise AuthError("Password reset email is not configured")
        result = self._email.send_email(
            recipient=account.email,
            subject="Reset your password",
            body_html=f'<p>Reset your password: <a href="{link}">{link}</a></p>',
            body_text=f"Reset your password: {link}",
        )
        if not result.success:
            raise AuthError(f"Failed to send reset email: {result.error}")

    def complete_password_reset(self, token: str, new_password: str) -> None:
        payload = self._signer.decode(token)
        if not payload or payload.get("purpose") != RESET_PURPOSE:
            raise AuthError("Invalid or expired reset token")

        try:
            account_id = UUID(str(payload.get("sub")))
        except ValueError as e:
            raise AuthError("Invalid or expired reset token") from e
        account = self.get_account(account_id)
        # Tokens die once the password they were issued against changes
        if account is None or account.password_hash[-16:] != payload.get("pwd"):
            raise AuthError("Invalid or expired reset token")

        with self._connect() as conn:
            conn.execute(
                "UPDATE accounts SET password_hash = ?, updated_at = ? WHERE id = ?",
                (
                    hash_password(new_password),
                    self._time.now_utc().isoformat(),
                    str(account.id),
                ),
            )
        logger.info("Password reset completed for account %s", account.id)
