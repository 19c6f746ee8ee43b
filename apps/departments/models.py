"""
Department model for organizational structure.

Departments are flat (no hierarchy/nesting).
"""

from django.db import models
from django.conf import settings


class Department(models.Model):
    """
    Represents an organizational department.

    Tasks carry their department so daily copies stay in the same
    department even if the assignee later moves.
    """

    name = models.CharField(
        max_length=100,
        unique=True,
        help_text='Full department name'
    )
    description = models.TextField(blank=True)
    head = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='headed_departments',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'department'
        verbose_name_plural = 'departments'
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def employee_count(self):
        """Return the number of active users in this department."""
        return self.users.filter(is_active=True).count()
