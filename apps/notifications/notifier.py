"""
Notifier capability.

The chat listener emits user-facing output only through the Notifier
protocol. NoticeNotifier stores it as Notice rows for one user, which the
client polls from /notifications/active/.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Protocol

from django.urls import reverse
from django.utils import timezone

from .models import Notice
from .sound import CUE_DURATION_S, synthesize_cue

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Transient notices and an audible cue for the current user."""

    def notify(self, title: str, body: str, duration_ms: int) -> None: ...

    def play_cue(self) -> None: ...


class NoticeNotifier:
    """Notifier that persists notices for a single user."""

    def __init__(self, user_id) -> None:
        self.user_id = user_id

    def notify(self, title: str, body: str, duration_ms: int) -> None:
        now = timezone.now()
        Notice.objects.create(
            user_id=self.user_id,
            kind=Notice.Kind.TOAST,
            title=title,
            body=body,
            expires_at=now + timedelta(milliseconds=duration_ms),
        )

    def play_cue(self) -> None:
        # Raises if the tone cannot be rendered; the listener logs and moves on
        synthesize_cue()
        Notice.objects.create(
            user_id=self.user_id,
            kind=Notice.Kind.CUE,
            body=reverse('notifications:cue'),
            expires_at=timezone.now() + timedelta(seconds=CUE_DURATION_S * 2),
        )
