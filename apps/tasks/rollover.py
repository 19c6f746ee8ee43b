"""
Daily task rollover.

Two independent batch operations over tasks of type "daily":

- reset_daily_tasks: every completed daily task goes back to pending,
  regardless of its date. Running it twice in a row is safe; the second
  run finds nothing.
- duplicate_daily_tasks: daily tasks completed with a due date of
  yesterday get a fresh pending copy due today. The source rows are left
  untouched and no check is made for an existing copy, so a second run on
  the same day inserts the copies again.

Both raise django.db.DatabaseError on backend failures; apps.tasks.jobs
turns that into a failure payload.
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from django.db import transaction
from django.utils import timezone

from .models import Task
from apps.activity_log.models import log_bulk_task_activity, TaskActivity

logger = logging.getLogger(__name__)

# Fields carried over verbatim from the completed task to its copy
COPIED_FIELDS = (
    'title',
    'description',
    'assignee_id',
    'priority',
    'task_type',
    'department_id',
    'creator_id',
    'project_id',
)


@dataclass
class RolloverResult:
    """Outcome of a rollover run: number of rows affected and their data."""

    count: int = 0
    tasks: list = field(default_factory=list)


def completed_daily_tasks():
    """Queryset of every completed daily task."""
    return Task.objects.filter(
        task_type=Task.TaskType.DAILY,
        status=Task.Status.COMPLETED,
    )


def reset_daily_tasks():
    """
    Reset every completed daily task to pending and clear completed_at.

    Returns:
        RolloverResult with the number of rows updated and the updated rows
    """
    logger.info('Starting daily tasks status reset...')

    with transaction.atomic():
        task_ids = list(
            completed_daily_tasks()
            .select_for_update()
            .order_by('pk')
            .values_list('pk', flat=True)
        )
        logger.info(f'Found {len(task_ids)} completed daily tasks to reset')

        if not task_ids:
            return RolloverResult()

        updated = Task.objects.filter(
            pk__in=task_ids,
            task_type=Task.TaskType.DAILY,
            status=Task.Status.COMPLETED,
        ).update(
            status=Task.Status.PENDING,
            completed_at=None,
            updated_at=timezone.now(),
        )

        tasks = list(Task.objects.filter(pk__in=task_ids).order_by('pk'))
        log_bulk_task_activity(
            tasks,
            action_type=TaskActivity.ActionType.RESET,
            description='Daily task reset to Pending',
            field_name='status',
            old_value=Task.Status.COMPLETED,
            new_value=Task.Status.PENDING,
        )

    logger.info(f'Successfully reset {updated} daily tasks to pending status')
    return RolloverResult(count=updated, tasks=[task.to_dict() for task in tasks])


def build_daily_copy(task, due_date):
    """Build an unsaved pending copy of a daily task due on the given date."""
    copy = Task(
        due_date=due_date,
        start_date=due_date,
        status=Task.Status.PENDING,
    )
    for name in COPIED_FIELDS:
        setattr(copy, name, getattr(task, name))
    return copy


def duplicate_daily_tasks(today=None, skip_existing=False):
    """
    Create today's pending copies of daily tasks completed yesterday.

    Args:
        today: Date to duplicate into (default: current date in TIME_ZONE)
        skip_existing: Skip a task when a daily task with the same title and
            assignee is already due today. Off by default.

    Returns:
        RolloverResult with the number of rows inserted and the new rows
    """
    today = today or timezone.localdate()
    yesterday = today - timedelta(days=1)

    logger.info(f'Starting daily tasks duplication from {yesterday} to {today}...')

    sources = list(
        completed_daily_tasks()
        .filter(due_date=yesterday)
        .order_by('pk')
    )
    logger.info(f'Found {len(sources)} daily tasks for duplication')

    if skip_existing and sources:
        existing = set(
            Task.objects.filter(
                task_type=Task.TaskType.DAILY,
                due_date=today,
            ).values_list('title', 'assignee_id')
        )
        sources = [
            task for task in sources
            if (task.title, task.assignee_id) not in existing
        ]

    if not sources:
        return RolloverResult()

    with transaction.atomic():
        created = Task.objects.bulk_create(
            [build_daily_copy(task, today) for task in sources]
        )
        log_bulk_task_activity(
            created,
            action_type=TaskActivity.ActionType.DUPLICATED,
            description=f'Daily task created for {today.isoformat()}',
        )

    logger.info(f'Successfully created {len(created)} new daily tasks')
    return RolloverResult(count=len(created), tasks=[task.to_dict() for task in created])
