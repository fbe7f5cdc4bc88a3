"""SessionContext tracks the one authoritative owner session."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

from src.components.bootstrap import SessionContext
from src.domain.entities import Session


def make_session() -> Session:
    return Session(
        access_token="t",
        account_id=uuid4(),
        email="owner@example.com",
        expires_at=datetime.now(UTC) + timedelta(hours=1),
    )


class FakeSessionSource:
    def __init__(self, current=None):
        self.current = current
        self.listeners = []
        self.notify_during_read = None

    def get_current_session(self):
        if self.notify_during_read is not None:
            # Simulates a change landing between subscribe and read
            for cb in list(self.listeners):
                cb(self.notify_during_read)
            return None
        return self.current

    def on_session_change(self, callback):
        self.listeners.append(callback)
        return lambda: self.listeners.remove(callback)


class TestSessionContext:
    def test_attach_reads_initial_session(self):
        session = make_session()
        ctx = SessionContext(FakeSessionSource(current=session))

        ctx.attach()

        assert ctx.current is session
        assert ctx.is_owner is True

    def test_follows_change_notifications(self):
        source = FakeSessionSource()
        ctx = SessionContext(source)
        ctx.attach()
        assert ctx.current is None

        session = make_session()
        source.listeners[0](session)
        assert ctx.current is session

        source.listeners[0](None)
        assert ctx.is_owner is False

    def test_change_during_attach_is_not_lost(self):
        source = FakeSessionSource()
        session = make_session()
        source.notify_during_read = session
        ctx = SessionContext(source)

        ctx.attach()

        assert ctx.current is session

    def test_detach_unsubscribes(self):
        source = FakeSessionSource()
        ctx = SessionContext(source)
        ctx.attach()
        assert len(source.listeners) == 1

        ctx.detach()

        assert source.listeners == []

    def test_admits_only_the_held_session(self):
        held = make_session()
        source = FakeSessionSource(current=held)
        ctx = SessionContext(source)
        ctx.attach()

        other = held.model_copy(update={"access_token": "older"})
        assert ctx.admits(held) is True
        assert ctx.admits(other) is False

        source.listeners[0](None)
        assert ctx.admits(held) is False
