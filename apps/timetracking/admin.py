"""
Admin configuration for timetracking app.
"""

from django.contrib import admin
from .models import TimeEntry


@admin.register(TimeEntry)
class TimeEntryAdmin(admin.ModelAdmin):
    """Admin for TimeEntry model."""

    list_display = ('employee', 'task', 'date', 'status', 'start_time', 'end_time', 'total_hours')
    list_filter = ('status', 'date')
    search_fields = ('employee__email', 'employee__first_name', 'employee__last_name')
    date_hierarchy = 'date'
    readonly_fields = ('created_at',)
