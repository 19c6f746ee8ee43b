"""
Admin configuration for chat app.
"""

from django.contrib import admin
from .models import Chat, ChatMembership, Message


class ChatMembershipInline(admin.TabularInline):
    """Inline admin for chat members."""
    model = ChatMembership
    extra = 0
    readonly_fields = ('joined_at', 'last_read_at')


@admin.register(Chat)
class ChatAdmin(admin.ModelAdmin):
    """Admin for Chat model."""

    list_display = ('name', 'type', 'created_by', 'archived', 'updated_at')
    list_filter = ('type', 'archived')
    search_fields = ('name', 'description')
    readonly_fields = ('created_at', 'updated_at')
    inlines = [ChatMembershipInline]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin for Message model. Messages are immutable."""

    list_display = ('chat', 'sender', 'message_type', 'content_preview', 'created_at')
    list_filter = ('message_type', 'created_at')
    search_fields = ('content', 'file_name', 'sender__email')
    ordering = ('-created_at',)
    readonly_fields = ('chat', 'sender', 'content', 'file_name', 'message_type', 'created_at')

    def content_preview(self, obj):
        """Show truncated content."""
        content = obj.content or obj.file_name or ''
        return content[:80] + '...' if len(content) > 80 else content
    content_preview.short_description = 'Content'

    def has_change_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        """Optimize with select_related."""
        return super().get_queryset(request).select_related('chat', 'sender')
