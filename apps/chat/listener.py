"""
Live unread-message listener.

Keeps a user's UnreadCounter fresh and tells them about messages that
arrive while they are signed in. The listener owns exactly two
subscriptions while mounted:

- messages / INSERT: a message from someone else in one of the user's
  chats plays the cue, shows a "new message" notice and refreshes the count
- chat_members / UPDATE: the user's own membership changed (they read a
  chat elsewhere), so the count is refreshed

States: unsubscribed → mount(user_id) → subscribed → unmount() → unsubscribed.
Each event triggers a full recount, so the count is correct after the last
event even if events arrive out of order.
"""

import logging

from django.conf import settings
from django.db import DatabaseError

from .feeds import FeedFilter, INSERT, UPDATE
from .models import Chat, ChatMembership
from .services import UnreadCounter

logger = logging.getLogger(__name__)

NEW_MESSAGE_TITLE = 'Новое сообщение'
UNKNOWN_SENDER = 'Неизвестный'
UNKNOWN_CHAT = 'чате'
FILE_PLACEHOLDER = '[file]'


class UnreadMessageListener:
    """Standing subscription for one user's unread count and notices."""

    def __init__(self, feed, notifier, counter=None, notice_duration_ms=None):
        self.feed = feed
        self.notifier = notifier
        self.counter = counter
        self.notice_duration_ms = notice_duration_ms or settings.NOTICE_DURATION_MS
        self.user_id = None
        self._subscriptions = []

    @property
    def is_subscribed(self):
        return bool(self._subscriptions)

    def mount(self, user_id):
        """Subscribe for `user_id`. A missing id leaves the listener unsubscribed."""
        if self.is_subscribed and self.user_id == user_id:
            return
        self.unmount()
        if not user_id:
            return

        self.user_id = user_id
        if self.counter is None or self.counter.user_id != user_id:
            self.counter = UnreadCounter(user_id)

        self._subscriptions = [
            self.feed.subscribe(FeedFilter('messages', INSERT), self.on_message_inserted),
            self.feed.subscribe(FeedFilter('chat_members', UPDATE), self.on_membership_updated),
        ]
        logger.debug(f'Unread listener mounted for user {user_id}')
        self.counter.refresh()

    def unmount(self):
        """Release both subscriptions. Safe to call when not mounted."""
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription.close()
        if subscriptions:
            logger.debug(f'Unread listener unmounted for user {self.user_id}')
        self.user_id = None

    def set_user(self, user_id):
        """Follow a change of the signed-in user; None unmounts."""
        if user_id:
            self.mount(user_id)
        else:
            self.unmount()

    # -------------------------------------------------------------------------
    # Event handlers
    # -------------------------------------------------------------------------

    def on_message_inserted(self, message):
        user_id = self.user_id
        if not user_id or message.sender_id == user_id:
            return

        try:
            is_member = ChatMembership.objects.filter(
                chat_id=message.chat_id,
                user_id=user_id,
            ).exists()
            if not is_member:
                return
            sender_name = self._sender_name(message)
            chat_name = self._chat_name(message.chat_id)
        except DatabaseError:
            logger.exception(f'Failed to look up new message {message.pk} for user {user_id}')
            return

        logger.debug(f'New message from {sender_name} in {chat_name} for user {user_id}')
        self._play_cue()

        try:
            self.notifier.notify(
                NEW_MESSAGE_TITLE,
                f'{sender_name}: {message.content or FILE_PLACEHOLDER}',
                self.notice_duration_ms,
            )
        except DatabaseError:
            logger.exception(f'Failed to store new message notice for user {user_id}')

        self.counter.refresh()

    def on_membership_updated(self, membership):
        if self.user_id and membership.user_id == self.user_id:
            self.counter.refresh()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _play_cue(self):
        try:
            self.notifier.play_cue()
        except Exception as e:
            logger.warning(f'Could not play notification sound: {e}')

    @staticmethod
    def _sender_name(message):
        from django.contrib.auth import get_user_model

        sender = get_user_model().objects.filter(pk=message.sender_id).first()
        return sender.get_full_name() if sender else UNKNOWN_SENDER

    @staticmethod
    def _chat_name(chat_id):
        name = Chat.objects.filter(pk=chat_id).values_list('name', flat=True).first()
        return name or UNKNOWN_CHAT
