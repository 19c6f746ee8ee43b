"""
Change feed for chat rows.

The listener depends on the ChangeFeed protocol only. SignalChangeFeed
implements it on top of Django's post_save signal:

- table "messages"     → apps.chat.Message
- table "chat_members" → apps.chat.ChatMembership
- event "INSERT"       → post_save with created=True
- event "UPDATE"       → post_save with created=False

Events are delivered after the surrounding transaction commits, so a
subscriber never sees a row that is later rolled back. Callbacks run with
robust=True: an exception in one subscriber is logged by Django and does
not reach the request that saved the row or the other subscribers. Filtering by chat
or user is left to the subscriber.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from django.apps import apps
from django.db import transaction
from django.db.models.signals import post_save

logger = logging.getLogger(__name__)

INSERT = 'INSERT'
UPDATE = 'UPDATE'

TABLE_MODELS = {
    'messages': 'chat.Message',
    'chat_members': 'chat.ChatMembership',
}


@dataclass(frozen=True)
class FeedFilter:
    """Which rows a subscription receives: a table and an event type."""

    table: str
    event: str


class Subscription(Protocol):
    """Handle for an open subscription."""

    def close(self) -> None: ...


class ChangeFeed(Protocol):
    """Source of row-level insert/update events."""

    def subscribe(self, feed_filter: FeedFilter,
                  callback: Callable[[Any], None]) -> Subscription: ...


class SignalSubscription:
    """A post_save receiver registered by SignalChangeFeed."""

    def __init__(self, model, dispatch_uid: str) -> None:
        self._model = model
        self._dispatch_uid = dispatch_uid
        self.closed = False

    def close(self) -> None:
        """Disconnect the receiver. Safe to call more than once."""
        if self.closed:
            return
        post_save.disconnect(sender=self._model, dispatch_uid=self._dispatch_uid)
        self.closed = True
        logger.debug(f'Closed change feed subscription {self._dispatch_uid}')


class SignalChangeFeed:
    """ChangeFeed backed by Django model signals."""

    def subscribe(self, feed_filter: FeedFilter,
                  callback: Callable[[Any], None]) -> SignalSubscription:
        if feed_filter.table not in TABLE_MODELS:
            raise ValueError(f'Unknown change feed table: {feed_filter.table}')
        if feed_filter.event not in (INSERT, UPDATE):
            raise ValueError(f'Unknown change feed event: {feed_filter.event}')

        model = apps.get_model(TABLE_MODELS[feed_filter.table])
        wants_insert = feed_filter.event == INSERT

        def receiver(sender, instance, created, raw=False, **kwargs):
            if raw or created != wants_insert:
                return
            transaction.on_commit(lambda: callback(instance), robust=True)

        dispatch_uid = f'change-feed-{feed_filter.table}-{uuid.uuid4().hex}'
        post_save.connect(receiver, sender=model, weak=False, dispatch_uid=dispatch_uid)
        logger.debug(f'Opened change feed subscription {dispatch_uid}')
        return SignalSubscription(model, dispatch_uid)
