"""
Notice model.

Transient, user-facing notices polled by the client:
- toast: a title/body message shown for a limited time
- cue: a request to play the notification sound (body holds its URL)
"""

from django.db import models
from django.conf import settings
from django.utils import timezone


class NoticeQuerySet(models.QuerySet):

    def active(self, now=None):
        """Notices that have not expired yet."""
        return self.filter(expires_at__gt=now or timezone.now())


class Notice(models.Model):
    """A transient notice for one user."""

    class Kind(models.TextChoices):
        TOAST = 'toast', 'Toast'
        CUE = 'cue', 'Sound Cue'

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notices',
    )
    kind = models.CharField(
        max_length=10,
        choices=Kind.choices,
        default=Kind.TOAST,
    )
    title = models.CharField(max_length=255, blank=True)
    body = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField(db_index=True)

    objects = NoticeQuerySet.as_manager()

    class Meta:
        verbose_name = 'notice'
        verbose_name_plural = 'notices'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'expires_at']),
        ]

    def __str__(self):
        return f"{self.get_kind_display()} for {self.user}: {self.title}"

    @property
    def duration_ms(self):
        """Display duration in milliseconds."""
        return int((self.expires_at - self.created_at).total_seconds() * 1000)

    def to_dict(self):
        return {
            'id': self.pk,
            'kind': self.kind,
            'title': self.title,
            'body': self.body,
            'created_at': self.created_at.isoformat(),
            'expires_at': self.expires_at.isoformat(),
        }
