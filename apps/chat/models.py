"""
Chat models.

Models:
- Chat: A direct or group conversation
- ChatMembership: A user's membership in a chat and how far they have read
- Message: A message posted to a chat (immutable once sent)
"""

from django.db import models
from django.conf import settings
from django.utils import timezone


class Chat(models.Model):
    """A conversation between two or more users."""

    class ChatType(models.TextChoices):
        DIRECT = 'direct', 'Direct'
        GROUP = 'group', 'Group'

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    type = models.CharField(
        max_length=10,
        choices=ChatType.choices,
        default=ChatType.GROUP,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_chats',
    )
    archived = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'chat'
        verbose_name_plural = 'chats'
        ordering = ['-updated_at']

    def __str__(self):
        return self.name


class ChatMembership(models.Model):
    """
    A user's membership in a chat.

    last_read_at only moves forward (see services.mark_chat_read);
    messages created after it count as unread.
    """

    class Role(models.TextChoices):
        ADMIN = 'admin', 'Admin'
        MEMBER = 'member', 'Member'

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name='memberships',
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='chat_memberships',
    )
    role = models.CharField(
        max_length=10,
        choices=Role.choices,
        default=Role.MEMBER,
    )
    joined_at = models.DateTimeField(auto_now_add=True)
    last_read_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = 'chat membership'
        verbose_name_plural = 'chat memberships'
        constraints = [
            models.UniqueConstraint(
                fields=['chat', 'user'],
                name='unique_chat_member',
            ),
        ]
        indexes = [
            models.Index(fields=['user']),
        ]

    def __str__(self):
        return f"{self.user} in {self.chat}"


class Message(models.Model):
    """A message posted to a chat."""

    class MessageType(models.TextChoices):
        TEXT = 'text', 'Text'
        FILE = 'file', 'File'

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name='messages',
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='sent_messages',
    )
    content = models.TextField(null=True, blank=True)
    file_name = models.CharField(max_length=255, null=True, blank=True)
    message_type = models.CharField(
        max_length=10,
        choices=MessageType.choices,
        default=MessageType.TEXT,
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        verbose_name = 'message'
        verbose_name_plural = 'messages'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['chat', 'created_at']),
        ]

    def __str__(self):
        return f"Message by {self.sender} in {self.chat}"
