"""
Service layer for time tracking.

Services:
- start_tracking / pause_tracking / resume_tracking / finish_tracking
- calculate_worked_time: Milliseconds worked by an employee on a day
- format_worked_time: "{hours}ч {minutes}м"
"""

from django.core.exceptions import ValidationError
from django.utils import timezone

from .models import TimeEntry

MS_PER_MINUTE = 60 * 1000
MS_PER_HOUR = 60 * MS_PER_MINUTE


def _worked_ms(entry, now):
    """Working time of an entry up to `now`, excluding pauses."""
    elapsed = (now - entry.start_time).total_seconds() * 1000
    return max(0, elapsed - entry.pause_duration * MS_PER_MINUTE)


def start_tracking(employee, task=None, now=None):
    """
    Start a working session.

    Raises:
        ValidationError: If the employee already has an open session
            for the same task
    """
    now = now or timezone.now()
    open_entries = TimeEntry.objects.filter(
        employee=employee,
        task=task,
        status__in=[TimeEntry.Status.WORKING, TimeEntry.Status.PAUSED],
    )
    if open_entries.exists():
        raise ValidationError("Time tracking is already running for this task.")

    return TimeEntry.objects.create(
        employee=employee,
        task=task,
        date=timezone.localdate(now),
        start_time=now,
        status=TimeEntry.Status.WORKING,
    )


def pause_tracking(entry, now=None):
    """Pause a working session, recording the hours worked so far."""
    if entry.status != TimeEntry.Status.WORKING:
        raise ValidationError("Only a running session can be paused.")

    now = now or timezone.now()
    entry.paused_at = now
    entry.total_hours = _worked_ms(entry, now) / MS_PER_HOUR
    entry.status = TimeEntry.Status.PAUSED
    entry.save(update_fields=['paused_at', 'total_hours', 'status'])
    return entry


def _close_pause(entry, now):
    if entry.paused_at:
        entry.pause_duration += (now - entry.paused_at).total_seconds() / 60
        entry.paused_at = None


def resume_tracking(entry, now=None):
    """Resume a paused session, adding the pause to pause_duration."""
    if entry.status != TimeEntry.Status.PAUSED:
        raise ValidationError("Only a paused session can be resumed.")

    now = now or timezone.now()
    _close_pause(entry, now)
    entry.status = TimeEntry.Status.WORKING
    entry.save(update_fields=['pause_duration', 'paused_at', 'status'])
    return entry


def finish_tracking(entry, now=None):
    """Finish a session and store its total worked hours."""
    if entry.status == TimeEntry.Status.FINISHED:
        raise ValidationError("This session is already finished.")

    now = now or timezone.now()
    _close_pause(entry, now)
    entry.end_time = now
    entry.total_hours = _worked_ms(entry, now) / MS_PER_HOUR
    entry.status = TimeEntry.Status.FINISHED
    entry.save(update_fields=['pause_duration', 'paused_at', 'end_time', 'total_hours', 'status'])
    return entry


def calculate_worked_time(employee, day=None, now=None):
    """
    Milliseconds worked by an employee on a day.

    Finished and paused sessions contribute their stored total_hours;
    running sessions contribute live time since start minus pauses.
    """
    now = now or timezone.now()
    day = day or timezone.localdate(now)

    total = 0
    entries = TimeEntry.objects.filter(employee=employee, date=day)
    for entry in entries:
        if entry.status == TimeEntry.Status.WORKING:
            total += _worked_ms(entry, now)
        else:
            total += entry.total_hours * MS_PER_HOUR
    return int(total)


def format_worked_time(milliseconds):
    """Format milliseconds as "{hours}ч {minutes}м"."""
    hours, remainder = divmod(int(milliseconds), MS_PER_HOUR)
    return f'{hours}ч {remainder // MS_PER_MINUTE}м'
