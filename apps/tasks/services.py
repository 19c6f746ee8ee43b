"""
Service layer for tasks app.

All business logic for task operations is centralized here.
Views and scheduled jobs call these functions rather than touching
the models directly.

Services:
- create_task: Create new task with validation and activity logging
- change_status: Change task status, maintaining completed_at
- archive_task: Move a task to the archive
- get_tasks_for_user: Role-based visible task queryset
"""

import logging

from django.utils import timezone
from django.db import transaction
from django.core.exceptions import PermissionDenied, ValidationError

from .models import Task
from apps.activity_log.models import log_task_activity, TaskActivity

logger = logging.getLogger(__name__)


def create_task(
    title: str,
    creator,
    assignee=None,
    description: str = '',
    priority: str = Task.Priority.MEDIUM,
    task_type: str = Task.TaskType.LONG_TERM,
    start_date=None,
    due_date=None,
    project=None,
    department=None,
):
    """
    Central task creation function.

    Args:
        title: Task title (required)
        creator: User creating the task (required)
        assignee: User to assign task to (optional)
        description: Task description (optional)
        priority: low/medium/high (default: medium)
        task_type: daily/long-term/urgent (default: long-term)
        start_date: Date work starts (optional)
        due_date: Date the task is due (optional)
        project: Project the task belongs to (optional)
        department: Department (default: assignee's, then creator's)

    Returns:
        Created Task instance

    Raises:
        ValidationError: If required fields are missing or invalid
    """
    if not title or not title.strip():
        raise ValidationError("Task title is required.")

    if not creator:
        raise ValidationError("Creator is required.")

    if assignee is not None and not assignee.is_active:
        raise ValidationError("Cannot assign task to inactive user.")

    if priority not in Task.Priority.values:
        raise ValidationError(f"Invalid priority: {priority}")

    if task_type not in Task.TaskType.values:
        raise ValidationError(f"Invalid task type: {task_type}")

    if start_date and due_date and due_date < start_date:
        raise ValidationError("Due date cannot be before the start date.")

    if department is None:
        if assignee is not None and assignee.department_id:
            department = assignee.department
        elif project is not None:
            department = project.department
        else:
            department = creator.department
    if department is None:
        raise ValidationError("Task department could not be determined.")

    with transaction.atomic():
        task = Task.objects.create(
            title=title.strip(),
            description=description.strip() if description else '',
            assignee=assignee,
            creator=creator,
            department=department,
            project=project,
            priority=priority,
            task_type=task_type,
            start_date=start_date,
            due_date=due_date,
        )

        if assignee is not None and assignee.pk != creator.pk:
            description_text = f'Task created and assigned to {assignee.get_full_name()}'
        else:
            description_text = f'Task created: "{task.title}"'

        log_task_activity(
            task=task,
            user=creator,
            action_type=TaskActivity.ActionType.CREATED,
            description=description_text
        )

    return task


def change_status(task, user, new_status):
    """
    Change task status.

    completed_at is stamped when a task is completed and cleared when
    it leaves the completed state.

    Raises:
        PermissionDenied: If user is neither assignee, creator nor admin
        ValidationError: If the status is unknown or the task is archived
    """
    if not (user.is_admin() or user.pk in (task.assignee_id, task.creator_id)):
        raise PermissionDenied("You don't have permission to change this task's status.")

    if new_status not in Task.Status.values:
        raise ValidationError(f"Invalid status: {new_status}")

    if task.archived:
        raise ValidationError("Archived tasks cannot change status.")

    old_status = task.status
    if old_status == new_status:
        return task

    with transaction.atomic():
        task.status = new_status
        if new_status == Task.Status.COMPLETED:
            task.completed_at = timezone.now()
        else:
            task.completed_at = None
        task.save()

        log_task_activity(
            task=task,
            user=user,
            action_type=TaskActivity.ActionType.STATUS_CHANGED,
            description=f'Status changed from {Task.Status(old_status).label} to {Task.Status(new_status).label}',
            field_name='status',
            old_value=old_status,
            new_value=new_status
        )

    return task


def archive_task(task, user):
    """
    Archive a task. Only the creator or an admin may archive.

    Raises:
        PermissionDenied: If user cannot archive the task
    """
    if not (user.is_admin() or task.creator_id == user.pk):
        raise PermissionDenied("You don't have permission to archive this task.")

    if task.archived:
        return task

    with transaction.atomic():
        task.archived = True
        task.archived_at = timezone.now()
        task.save(update_fields=['archived', 'archived_at', 'updated_at'])

        log_task_activity(
            task=task,
            user=user,
            action_type=TaskActivity.ActionType.ARCHIVED,
            description='Task archived'
        )

    return task


# =============================================================================
# Query Helpers
# =============================================================================

def get_tasks_for_user(user):
    """
    Get the task queryset visible to a user.

    Admins see every task; employees see tasks assigned to or created by them.
    """
    from django.db.models import Q

    base_qs = Task.objects.select_related(
        'assignee', 'creator', 'department', 'project'
    )

    if user.can_view_all_tasks():
        return base_qs

    return base_qs.filter(Q(assignee=user) | Q(creator=user))
