"""Authoritative owner-session context.

Holds the current session for the process and keeps it in step with the
auth service's change notifications. The subscription is registered before
the initial read so a change landing in between is never lost.

Request tokens only authorize while they match the held session, so a
sign-out or a newer sign-in retires every earlier token.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from src.domain.entities import Session

from .ports import SessionSourcePort

logger = logging.getLogger(__name__)


class SessionContext:
    def __init__(self, source: SessionSourcePort) -> None:
        self._source = source
        self._lock = threading.Lock()
        self._session: Session | None = None
        self._unsubscribe: Callable[[], None] | None = None

    def attach(self) -> None:
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._source.on_session_change(self._on_change)
        initial = self._source.get_current_session()
        with self._lock:
            # A notification may already have arrived; it wins over the read
            if self._session is None:
                self._session = initial

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_change(self, session: Session | None) -> None:
        with self._lock:
            self._session = session
        logger.info("Owner session %s", "started" if session else "ended")

    @property
    def current(self) -> Session | None:
        with self._lock:
            return self._session

    @property
    def is_owner(self) -> bool:
        return self.current is not None

    def admits(self, session: Session) -> bool:
        """True when session is the owner session currently held."""
        current = self.current
        return current is not None and current.access_token == session.access_token
