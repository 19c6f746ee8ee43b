"""
Admin configuration for tasks app.
"""

from django.contrib import admin
from .models import Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    """Admin for Task model."""

    list_display = (
        'id', 'title', 'assignee', 'creator', 'task_type',
        'status', 'priority', 'due_date', 'department', 'archived'
    )
    list_filter = (
        'task_type', 'status', 'priority', 'department',
        'archived', 'due_date'
    )
    search_fields = ('title', 'description')
    ordering = ('-created_at',)
    date_hierarchy = 'created_at'

    readonly_fields = ('created_at', 'updated_at', 'completed_at', 'archived_at')

    fieldsets = (
        (None, {
            'fields': ('title', 'description')
        }),
        ('Assignment', {
            'fields': ('assignee', 'creator', 'department', 'project')
        }),
        ('Status & Priority', {
            'fields': ('task_type', 'status', 'priority', 'start_date', 'due_date')
        }),
        ('Archive', {
            'fields': ('archived', 'archived_at'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at', 'completed_at'),
            'classes': ('collapse',),
        }),
    )

    def get_queryset(self, request):
        """Optimize with select_related."""
        return super().get_queryset(request).select_related(
            'assignee', 'creator', 'department', 'project'
        )
