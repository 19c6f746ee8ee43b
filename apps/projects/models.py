"""
Project models.

Models:
- Project: A body of work owned by a department
- ProjectMember: Employee membership in a project
"""

from django.db import models
from django.conf import settings


class Project(models.Model):
    """Project grouping tasks and the employees working on them."""

    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        COMPLETED = 'completed', 'Completed'
        ARCHIVED = 'archived', 'Archived'

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    department = models.ForeignKey(
        'departments.Department',
        on_delete=models.PROTECT,
        related_name='projects',
    )
    creator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='created_projects',
    )
    status = models.CharField(
        max_length=15,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
    )
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'project'
        verbose_name_plural = 'projects'
        ordering = ['-created_at']

    def __str__(self):
        return self.name


class ProjectMember(models.Model):
    """Employee membership in a project."""

    class Role(models.TextChoices):
        OWNER = 'owner', 'Owner'
        MEMBER = 'member', 'Member'

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name='members',
    )
    employee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='project_memberships',
    )
    role = models.CharField(
        max_length=10,
        choices=Role.choices,
        default=Role.MEMBER,
    )
    added_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'project member'
        verbose_name_plural = 'project members'
        ordering = ['added_at']
        constraints = [
            models.UniqueConstraint(
                fields=['project', 'employee'],
                name='unique_project_member',
            ),
        ]

    def __str__(self):
        return f"{self.employee} in {self.project}"
