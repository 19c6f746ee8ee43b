"""
Admin configuration for accounts app.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Custom User admin with email authentication and profile fields."""

    list_display = (
        'email', 'full_name_display', 'position', 'role',
        'department', 'daily_hours', 'is_active', 'created_at'
    )
    list_filter = ('role', 'department', 'is_active', 'is_staff')
    search_fields = ('email', 'first_name', 'last_name', 'position')
    ordering = ('first_name', 'last_name')
    list_per_page = 25

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        (_('Profile'), {'fields': ('first_name', 'last_name', 'position', 'daily_hours')}),
        (_('Organization'), {'fields': ('role', 'department')}),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        (_('Important dates'), {
            'fields': ('last_login', 'created_at', 'updated_at'),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': (
                'email', 'first_name', 'last_name',
                'password1', 'password2', 'position', 'role', 'department'
            ),
        }),
    )

    readonly_fields = ('last_login', 'created_at', 'updated_at')

    def full_name_display(self, obj):
        return obj.get_full_name()
    full_name_display.short_description = 'Name'

    def get_queryset(self, request):
        """Optimize with select_related."""
        return super().get_queryset(request).select_related('department')
