"""
Service layer for chat app.

Services:
- count_unread_messages: Unread messages for a user across all chats
- unread_counts_by_chat: The same count broken down per chat
- UnreadCounter: Holds a user's last count and refreshes it, one
  aggregation at a time
- send_message: Post a message to a chat
- mark_chat_read: Advance a member's last-read timestamp
"""

import logging
import threading
from datetime import datetime, timezone as dt_timezone

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import DatabaseError
from django.utils import timezone

from .models import ChatMembership, Message

logger = logging.getLogger(__name__)

# Floor for memberships that have never been read
EPOCH = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)


def _unread_in_chat(chat_id, user_id, last_read_at):
    return Message.objects.filter(
        chat_id=chat_id,
        created_at__gt=last_read_at or EPOCH,
    ).exclude(sender_id=user_id).count()


def unread_counts_by_chat(user_id):
    """
    Unread message count per chat for a user.

    Returns:
        dict mapping chat id to its unread count (one entry per membership)
    """
    memberships = ChatMembership.objects.filter(
        user_id=user_id
    ).values_list('chat_id', 'last_read_at')

    return {
        chat_id: _unread_in_chat(chat_id, user_id, last_read_at)
        for chat_id, last_read_at in memberships
    }


def count_unread_messages(user_id):
    """
    Total unread messages for a user across every chat they belong to.

    A message is unread when it was created after the membership's
    last_read_at (or at any time if the chat was never read) and was not
    sent by the user. One count query is issued per membership.

    Returns:
        int, or None when no user is given (callers keep their prior value)
    """
    if not user_id:
        return None

    return sum(unread_counts_by_chat(user_id).values())


class UnreadCounter:
    """
    A user's unread message count, recomputed on demand.

    At most one aggregation runs at a time. A refresh() that arrives while
    one is in flight only flags a rerun; the running call recomputes once
    more before returning, so the final value reflects the latest request.
    Backend failures are logged and leave the previous count in place.
    """

    def __init__(self, user_id, aggregate=count_unread_messages):
        self.user_id = user_id
        self.count = 0
        self._aggregate = aggregate
        self._lock = threading.Lock()
        self._in_flight = False
        self._rerun_requested = False

    @property
    def in_flight(self):
        return self._in_flight

    def refresh(self):
        """Recompute the count and return it."""
        with self._lock:
            if self._in_flight:
                self._rerun_requested = True
                return self.count
            self._in_flight = True

        try:
            while True:
                with self._lock:
                    self._rerun_requested = False
                self._recompute()
                with self._lock:
                    if not self._rerun_requested:
                        self._in_flight = False
                        return self.count
        except Exception:
            with self._lock:
                self._in_flight = False
            raise

    def _recompute(self):
        try:
            value = self._aggregate(self.user_id)
        except DatabaseError:
            logger.exception(f'Failed to count unread messages for user {self.user_id}')
            return
        if value is not None:
            self.count = value


def send_message(chat, sender, content='', file_name=None):
    """
    Post a message to a chat.

    Raises:
        PermissionDenied: If the sender is not a member of the chat
        ValidationError: If there is neither content nor a file
    """
    if not ChatMembership.objects.filter(chat=chat, user=sender).exists():
        raise PermissionDenied("You are not a member of this chat.")

    content = content.strip() if content else ''
    if not content and not file_name:
        raise ValidationError("Message cannot be empty.")

    message = Message.objects.create(
        chat=chat,
        sender=sender,
        content=content or None,
        file_name=file_name,
        message_type=Message.MessageType.FILE if file_name else Message.MessageType.TEXT,
    )
    chat.save(update_fields=['updated_at'])
    return message


def mark_chat_read(chat, user, at=None):
    """
    Mark a chat as read up to `at` (default: now).

    last_read_at never moves backward: an earlier timestamp leaves the
    membership unchanged. Saving an advanced timestamp emits the
    membership-update event that live listeners react to.

    Raises:
        ChatMembership.DoesNotExist: If the user is not a member
    """
    membership = ChatMembership.objects.get(chat=chat, user=user)
    at = at or timezone.now()

    if membership.last_read_at is None or at > membership.last_read_at:
        membership.last_read_at = at
        membership.save(update_fields=['last_read_at'])

    return membership
