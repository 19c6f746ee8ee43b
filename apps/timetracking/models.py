"""
Time tracking model.

A TimeEntry records one working session of an employee on a given day,
optionally against a task. Status workflow: working ⇄ paused → finished.
"""

from django.db import models
from django.conf import settings


class TimeEntry(models.Model):
    """One tracked working session."""

    class Status(models.TextChoices):
        WORKING = 'working', 'Working'
        PAUSED = 'paused', 'Paused'
        FINISHED = 'finished', 'Finished'

    employee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='time_entries',
    )
    task = models.ForeignKey(
        'tasks.Task',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='time_entries',
    )
    date = models.DateField(db_index=True)
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.WORKING,
        db_index=True,
    )

    start_time = models.DateTimeField()
    paused_at = models.DateTimeField(null=True, blank=True)
    end_time = models.DateTimeField(null=True, blank=True)

    pause_duration = models.FloatField(
        default=0,
        help_text='Total paused time in minutes'
    )
    total_hours = models.FloatField(
        default=0,
        help_text='Worked hours (set on pause and finish)'
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'time entry'
        verbose_name_plural = 'time entries'
        ordering = ['-start_time']
        indexes = [
            models.Index(fields=['employee', 'date', 'status']),
        ]

    def __str__(self):
        return f"{self.employee} on {self.date} ({self.get_status_display()})"
