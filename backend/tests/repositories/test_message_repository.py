"""
Tests for Message Repository.

Covers creation defaults, the two read queries behind the conversation
views, read-flag updates and unread counting.
"""

from datetime import datetime, timezone

import pytest

from farmdirect.core.exceptions import NotFoundException
from farmdirect.models.message import Message
from farmdirect.repositories.message_repository import MessageRepository


@pytest.fixture
def repo(db):
    return MessageRepository(db)


class TestMessageRepository:
    """Tests for MessageRepository basic operations."""

    def test_create_message_starts_unread(self, db, repo, grower, buyer):
        message = repo.create_message(
            sender_id=buyer.id,
            recipient_id=grower.id,
            subject="Property Inquiry",
            body="Is the plot still available?",
        )
        db.commit()

        assert message.id
        assert len(message.id) == 26
        assert message.is_read is False
        assert message.context_id is None
        time_diff = datetime.now(timezone.utc) - message.created_at
        assert time_diff.total_seconds() < 60

    def test_create_message_ids_are_unique(self, db, repo, grower, buyer):
        ids = {
            repo.create_message(buyer.id, grower.id, "Hi", f"Message {i}").id for i in range(5)
        }
        db.commit()
        assert len(ids) == 5

    def test_list_for_user_includes_both_directions_newest_first(
        self, repo, make_message, grower, buyer, outsider
    ):
        oldest = make_message(buyer, grower, "first", minutes_ago=30)
        middle = make_message(grower, buyer, "second", minutes_ago=20)
        newest = make_message(outsider, grower, "third", minutes_ago=10)
        make_message(outsider, buyer, "not mine", minutes_ago=5)

        messages = repo.list_for_user(grower.id)

        assert [m.id for m in messages] == [newest.id, middle.id, oldest.id]

    def test_list_conversation_is_chronological_and_pairwise(
        self, repo, make_message, grower, buyer, outsider
    ):
        first = make_message(buyer, grower, "hello", minutes_ago=30)
        second = make_message(grower, buyer, "hi back", minutes_ago=20)
        make_message(outsider, grower, "unrelated", minutes_ago=15)
        third = make_message(buyer, grower, "great", minutes_ago=10)

        thread = repo.list_conversation(grower.id, buyer.id)

        assert [m.id for m in thread] == [first.id, second.id, third.id]
        # Same thread from the other participant's side
        assert [m.id for m in repo.list_conversation(buyer.id, grower.id)] == [
            first.id,
            second.id,
            third.id,
        ]

    def test_list_conversation_filters_by_context(
        self, repo, make_message, grower, buyer, farm_space
    ):
        make_message(buyer, grower, "general question", minutes_ago=20)
        scoped = make_message(
            buyer, grower, "about the beds", minutes_ago=10, context_id=farm_space.id
        )

        thread = repo.list_conversation(grower.id, buyer.id, context_id=farm_space.id)

        assert [m.id for m in thread] == [scoped.id]

    def test_list_conversation_empty(self, repo, grower, buyer):
        assert repo.list_conversation(grower.id, buyer.id) == []

    def test_mark_read_is_idempotent(self, db, repo, make_message, grower, buyer):
        message = make_message(buyer, grower)

        repo.mark_read(message.id)
        db.commit()
        again = repo.mark_read(message.id)
        db.commit()

        db.expire_all()
        refreshed = db.query(Message).filter(Message.id == message.id).first()
        assert again.is_read is True
        assert refreshed.is_read is True

    def test_mark_read_unknown_id(self, repo):
        with pytest.raises(NotFoundException) as exc_info:
            repo.mark_read("01HZZZZZZZZZZZZZZZZZZZZZZZ")
        assert exc_info.value.code == "MESSAGE_NOT_FOUND"

    def test_mark_thread_read_only_touches_inbound(
        self, db, repo, make_message, grower, buyer, outsider
    ):
        inbound_1 = make_message(buyer, grower, "one")
        inbound_2 = make_message(buyer, grower, "two")
        outbound = make_message(grower, buyer, "reply")
        other = make_message(outsider, grower, "elsewhere")

        marked = repo.mark_thread_read(recipient_id=grower.id, sender_id=buyer.id)
        db.commit()

        assert marked == 2
        db.expire_all()
        states = {m.id: m.is_read for m in db.query(Message).all()}
        assert states[inbound_1.id] is True
        assert states[inbound_2.id] is True
        assert states[outbound.id] is False
        assert states[other.id] is False

    def test_unread_count_counts_only_unread_inbound(
        self, repo, make_message, grower, buyer, outsider
    ):
        make_message(buyer, grower, "unread 1")
        make_message(outsider, grower, "unread 2")
        make_message(buyer, grower, "already read", is_read=True)
        make_message(grower, buyer, "outbound")

        assert repo.unread_count(grower.id) == 2
        assert repo.unread_count(buyer.id) == 1
        assert repo.unread_count(outsider.id) == 0
