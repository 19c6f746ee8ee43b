"""
Admin configuration for projects app.
"""

from django.contrib import admin
from .models import Project, ProjectMember


class ProjectMemberInline(admin.TabularInline):
    """Inline admin for project members."""
    model = ProjectMember
    extra = 0
    readonly_fields = ('added_at',)


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    """Admin for Project model."""

    list_display = ('name', 'department', 'creator', 'status', 'start_date', 'end_date')
    list_filter = ('status', 'department')
    search_fields = ('name', 'description')
    readonly_fields = ('created_at', 'updated_at')
    inlines = [ProjectMemberInline]

    def get_queryset(self, request):
        """Optimize with select_related."""
        return super().get_queryset(request).select_related('department', 'creator')
