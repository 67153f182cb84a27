"""
Tests for MessageService validation, ownership and read side effects.
"""

import pytest

from farmdirect.core.config import settings
from farmdirect.core.exceptions import ForbiddenException, NotFoundException, ValidationException
from farmdirect.models.message import Message
from farmdirect.services.message_service import MessageService


@pytest.fixture
def service(db):
    return MessageService(db)


class TestSendMessage:
    def test_send_persists_with_default_subject(self, db, service, grower, buyer):
        message = service.send_message(buyer.id, grower.id, "Is the plot available?")

        db.expire_all()
        stored = db.query(Message).filter(Message.id == message.id).one()
        assert stored.subject == settings.default_message_subject
        assert stored.body == "Is the plot available?"
        assert stored.sender_id == buyer.id
        assert stored.recipient_id == grower.id
        assert stored.is_read is False

    def test_send_keeps_explicit_subject_and_context(
        self, service, grower, buyer, farm_space
    ):
        message = service.send_message(
            buyer.id, grower.id, "Hello", subject="Beds", context_id=farm_space.id
        )

        assert message.subject == "Beds"
        assert message.context_id == farm_space.id

    @pytest.mark.parametrize("body", ["", "   "])
    def test_blank_body_rejected(self, db, service, grower, buyer, body):
        with pytest.raises(ValidationException):
            service.send_message(buyer.id, grower.id, body)
        assert db.query(Message).count() == 0

    def test_oversized_body_rejected(self, service, grower, buyer):
        with pytest.raises(ValidationException) as exc_info:
            service.send_message(buyer.id, grower.id, "x" * (settings.max_message_length + 1))
        assert exc_info.value.code == "MESSAGE_TOO_LONG"

    def test_self_message_rejected(self, service, buyer):
        with pytest.raises(ValidationException) as exc_info:
            service.send_message(buyer.id, buyer.id, "Note to self")
        assert exc_info.value.code == "SELF_MESSAGE"

    def test_unknown_recipient(self, db, service, buyer):
        with pytest.raises(NotFoundException) as exc_info:
            service.send_message(buyer.id, "01HNOBODYNOBODYNOBODYNOBOD", "Hello?")
        assert exc_info.value.code == "RECIPIENT_NOT_FOUND"
        assert db.query(Message).count() == 0

    def test_unknown_context(self, service, grower, buyer):
        with pytest.raises(NotFoundException) as exc_info:
            service.send_message(
                buyer.id, grower.id, "Hello", context_id="01HNOSPACENOSPACENOSPACENO"
            )
        assert exc_info.value.code == "CONTEXT_NOT_FOUND"


class TestThreadAndReadState:
    def test_get_thread_marks_only_callers_inbound(
        self, db, service, make_message, grower, buyer
    ):
        inbound = make_message(buyer, grower, "question", minutes_ago=10)
        outbound = make_message(grower, buyer, "answer", minutes_ago=5)

        thread = service.get_thread(grower.id, buyer.id)

        assert [m.id for m in thread] == [inbound.id, outbound.id]
        db.expire_all()
        assert db.get(Message, inbound.id).is_read is True
        assert db.get(Message, outbound.id).is_read is False

    def test_mark_read_by_recipient(self, service, make_message, grower, buyer):
        message = make_message(buyer, grower)

        result = service.mark_read(message.id, grower.id)

        assert result.is_read is True
        assert service.unread_count(grower.id) == 0

    def test_mark_read_by_sender_is_forbidden(self, db, service, make_message, grower, buyer):
        message = make_message(buyer, grower)

        with pytest.raises(ForbiddenException):
            service.mark_read(message.id, buyer.id)

        db.expire_all()
        assert db.get(Message, message.id).is_read is False

    def test_mark_read_unknown(self, service, grower):
        with pytest.raises(NotFoundException):
            service.mark_read("01HNOPENOPENOPENOPENOPENOP", grower.id)

    def test_list_messages_newest_first(self, service, make_message, grower, buyer):
        older = make_message(buyer, grower, "older", minutes_ago=10)
        newer = make_message(grower, buyer, "newer", minutes_ago=1)

        assert [m.id for m in service.list_messages(grower.id)] == [newer.id, older.id]
