"""Tests for apps.chat.services: unread aggregation and the UnreadCounter."""

from datetime import datetime, timedelta, timezone as dt_timezone
from unittest.mock import Mock

import pytest
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import DatabaseError

from apps.chat.models import ChatMembership, Message
from apps.chat.services import (
    UnreadCounter,
    count_unread_messages,
    mark_chat_read,
    send_message,
    unread_counts_by_chat,
)

T0 = datetime(2024, 1, 15, 9, 0, tzinfo=dt_timezone.utc)


def post(chat, sender, content='hi', at=None):
    return Message.objects.create(
        chat=chat,
        sender=sender,
        content=content,
        created_at=at or T0,
    )


# ---------------------------------------------------------------------------
# count_unread_messages
# ---------------------------------------------------------------------------


@pytest.mark.django_db
class TestCountUnreadMessages:
    def test_no_user_returns_none(self):
        assert count_unread_messages(None) is None

    def test_no_memberships_is_zero(self, user):
        assert count_unread_messages(user.pk) == 0

    def test_never_read_chat_counts_every_foreign_message(self, user, other_user, make_chat):
        chat = make_chat(user, other_user)
        for n in range(3):
            post(chat, other_user, at=T0 - timedelta(days=n))

        assert count_unread_messages(user.pk) == 3

    def test_own_messages_never_count(self, user, other_user, make_chat):
        chat = make_chat(user, other_user)
        post(chat, user)
        post(chat, user)
        post(chat, other_user)

        assert count_unread_messages(user.pk) == 1
        assert count_unread_messages(other_user.pk) == 2

    def test_only_messages_after_last_read_count(self, user, other_user, make_chat):
        chat = make_chat(user, other_user)
        ChatMembership.objects.filter(chat=chat, user=user).update(last_read_at=T0)
        post(chat, other_user, at=T0 - timedelta(hours=1))
        post(chat, other_user, at=T0)
        post(chat, other_user, at=T0 + timedelta(minutes=1))

        assert count_unread_messages(user.pk) == 1

    def test_sums_across_chats(self, user, other_user, make_chat):
        busy = make_chat(user, other_user, name='Busy')
        quiet = make_chat(user, other_user, name='Quiet')
        for _ in range(3):
            post(busy, other_user)

        assert unread_counts_by_chat(user.pk) == {busy.pk: 3, quiet.pk: 0}
        assert count_unread_messages(user.pk) == 3

    def test_chats_without_membership_are_ignored(self, user, other_user, make_chat):
        chat = make_chat(other_user)
        post(chat, other_user)

        assert count_unread_messages(user.pk) == 0


# ---------------------------------------------------------------------------
# UnreadCounter
# ---------------------------------------------------------------------------


class TestUnreadCounter:
    def test_refresh_stores_and_returns_count(self):
        counter = UnreadCounter(7, aggregate=Mock(return_value=4))

        assert counter.refresh() == 4
        assert counter.count == 4
        counter._aggregate.assert_called_once_with(7)

    def test_database_error_keeps_previous_value(self):
        aggregate = Mock(side_effect=[5, DatabaseError('boom')])
        counter = UnreadCounter(7, aggregate=aggregate)

        counter.refresh()
        assert counter.refresh() == 5
        assert counter.in_flight is False

    def test_none_result_keeps_previous_value(self):
        counter = UnreadCounter(7, aggregate=Mock(side_effect=[2, None]))

        counter.refresh()
        assert counter.refresh() == 2

    def test_refresh_during_aggregation_reruns_once(self):
        results = iter([1, 2])
        calls = []

        def aggregate(user_id):
            calls.append(user_id)
            if len(calls) == 1:
                # A second request arrives while the first is in flight
                assert counter.in_flight is True
                assert counter.refresh() == 0
            return next(results)

        counter = UnreadCounter(7, aggregate=aggregate)

        assert counter.refresh() == 2
        assert len(calls) == 2
        assert counter.in_flight is False

    def test_unexpected_error_propagates_and_clears_in_flight(self):
        counter = UnreadCounter(7, aggregate=Mock(side_effect=RuntimeError('bug')))

        with pytest.raises(RuntimeError):
            counter.refresh()
        assert counter.in_flight is False


# ---------------------------------------------------------------------------
# send_message / mark_chat_read
# ---------------------------------------------------------------------------


@pytest.mark.django_db
class TestSendMessage:
    def test_member_posts_text(self, user, other_user, make_chat):
        chat = make_chat(user, other_user)

        message = send_message(chat, user, content='  hello  ')

        assert message.content == 'hello'
        assert message.message_type == Message.MessageType.TEXT

    def test_file_message_without_text(self, user, make_chat):
        chat = make_chat(user)

        message = send_message(chat, user, file_name='report.pdf')

        assert message.content is None
        assert message.message_type == Message.MessageType.FILE

    def test_non_member_is_rejected(self, user, other_user, make_chat):
        chat = make_chat(other_user)

        with pytest.raises(PermissionDenied):
            send_message(chat, user, content='hello')

    def test_empty_message_is_rejected(self, user, make_chat):
        chat = make_chat(user)

        with pytest.raises(ValidationError):
            send_message(chat, user, content='   ')


@pytest.mark.django_db
class TestMarkChatRead:
    def test_sets_last_read(self, user, make_chat):
        chat = make_chat(user)

        membership = mark_chat_read(chat, user, at=T0)

        assert membership.last_read_at == T0

    def test_never_moves_backward(self, user, make_chat):
        chat = make_chat(user)
        mark_chat_read(chat, user, at=T0)

        membership = mark_chat_read(chat, user, at=T0 - timedelta(hours=1))

        membership.refresh_from_db()
        assert membership.last_read_at == T0

    def test_non_member_raises(self, user, other_user, make_chat):
        chat = make_chat(other_user)

        with pytest.raises(ChatMembership.DoesNotExist):
            mark_chat_read(chat, user)
