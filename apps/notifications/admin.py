"""
Admin configuration for notifications app.
"""

from django.contrib import admin
from .models import Notice


@admin.register(Notice)
class NoticeAdmin(admin.ModelAdmin):
    """Admin for Notice model."""

    list_display = ('user', 'kind', 'title', 'created_at', 'expires_at')
    list_filter = ('kind', 'created_at')
    search_fields = ('title', 'body', 'user__email')
    ordering = ('-created_at',)
    readonly_fields = ('created_at',)
