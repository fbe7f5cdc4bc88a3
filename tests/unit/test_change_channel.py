"""In-process change-notification channel."""

from src.adapters.changes import InMemoryChangeChannel
from src.domain.entities import ChangeEvent


def event(table: str) -> ChangeEvent:
    return ChangeEvent(table=table, kind="update", row_id="1")


class TestInMemoryChangeChannel:
    def test_delivers_only_to_table_listeners(self):
        channel = InMemoryChangeChannel()
        projects, skills = [], []
        channel.subscribe("projects", projects.append)
        channel.subscribe("skills", skills.append)

        channel.publish(event("projects"))

        assert len(projects) == 1
        assert skills == []

    def test_unsubscribe(self):
        channel = InMemoryChangeChannel()
        received = []
        handle = channel.subscribe("projects", received.append)

        channel.unsubscribe(handle)
        channel.unsubscribe(handle)  # unknown handles are ignored
        channel.publish(event("projects"))

        assert received == []
        assert channel.listener_count() == 0

    def test_failing_listener_does_not_block_others(self):
        channel = InMemoryChangeChannel()
        received = []

        def broken(_event):
            raise RuntimeError("listener bug")

        channel.subscribe("projects", broken)
        channel.subscribe("projects", received.append)

        channel.publish(event("projects"))

        assert len(received) == 1
