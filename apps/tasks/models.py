"""
Task management models.

Models:
- Task: Assignable unit of work; "daily" tasks recur once per calendar day
"""

from django.db import models
from django.conf import settings
from django.utils import timezone


class Task(models.Model):
    """
    Main Task model.

    Task types:
    - daily: recurs every day; completed copies are rolled over by the
      scheduled reset and duplication jobs
    - long-term: regular task with an optional due date
    - urgent: high-attention task

    Status workflow: pending → in_progress → completed
    (completed daily tasks go back to pending on rollover)
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        IN_PROGRESS = 'in_progress', 'In Progress'
        COMPLETED = 'completed', 'Completed'

    class Priority(models.TextChoices):
        LOW = 'low', 'Low'
        MEDIUM = 'medium', 'Medium'
        HIGH = 'high', 'High'

    class TaskType(models.TextChoices):
        DAILY = 'daily', 'Daily'
        LONG_TERM = 'long-term', 'Long-term'
        URGENT = 'urgent', 'Urgent'

    # Core fields
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    # Relationships
    assignee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_tasks',
        help_text='User assigned to complete this task'
    )
    creator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_tasks',
        help_text='User who created this task'
    )
    department = models.ForeignKey(
        'departments.Department',
        on_delete=models.PROTECT,
        related_name='tasks',
    )
    project = models.ForeignKey(
        'projects.Project',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tasks',
    )

    # Task classification
    task_type = models.CharField(
        max_length=10,
        choices=TaskType.choices,
        default=TaskType.LONG_TERM,
        db_index=True,
    )
    status = models.CharField(
        max_length=15,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    priority = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.MEDIUM,
        db_index=True,
    )

    # Planning (calendar dates in TIME_ZONE)
    start_date = models.DateField(null=True, blank=True)
    due_date = models.DateField(null=True, blank=True, db_index=True)

    # Archive
    archived = models.BooleanField(default=False)
    archived_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = 'task'
        verbose_name_plural = 'tasks'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['task_type', 'status', 'due_date']),
            models.Index(fields=['status', 'assignee']),
            models.Index(fields=['department', 'status']),
        ]

    def __str__(self):
        return f"#{self.pk}: {self.title}"

    @property
    def is_daily(self):
        """Check if this task recurs daily."""
        return self.task_type == self.TaskType.DAILY

    @property
    def is_overdue(self):
        """Check if task is past its due date and not completed."""
        if not self.due_date or self.status == self.Status.COMPLETED:
            return False
        return self.due_date < timezone.localdate()

    def to_dict(self):
        """Plain JSON-serializable representation used by API and job payloads."""
        return {
            'id': self.pk,
            'title': self.title,
            'description': self.description,
            'assignee_id': self.assignee_id,
            'creator_id': self.creator_id,
            'department_id': self.department_id,
            'project_id': self.project_id,
            'priority': self.priority,
            'task_type': self.task_type,
            'status': self.status,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'due_date': self.due_date.isoformat() if self.due_date else None,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'archived': self.archived,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
