"""Tests for the daily task rollover jobs (apps.tasks.rollover / apps.tasks.jobs)."""

from datetime import date
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.utils import timezone

from apps.activity_log.models import TaskActivity
from apps.tasks.jobs import run_duplicate_job, run_reset_job
from apps.tasks.models import Task
from apps.tasks.rollover import duplicate_daily_tasks

TODAY = date(2024, 1, 15)
YESTERDAY = date(2024, 1, 14)

pytestmark = pytest.mark.django_db


def completed(make_task, **kwargs):
    kwargs.setdefault('task_type', Task.TaskType.DAILY)
    return make_task(
        status=Task.Status.COMPLETED,
        completed_at=timezone.now(),
        **kwargs,
    )


class TestResetJob:
    def test_resets_only_completed_daily_tasks(self, make_task):
        daily = [completed(make_task, title=f'Daily {n}', due_date=YESTERDAY) for n in range(3)]
        pending_daily = make_task(task_type=Task.TaskType.DAILY)
        long_term = completed(make_task, task_type=Task.TaskType.LONG_TERM)

        payload = run_reset_job()

        assert payload['success'] is True
        assert payload['reset'] == 3
        assert payload['message'] == 'Successfully reset 3 daily tasks'
        assert [row['id'] for row in payload['tasks']] == [task.pk for task in daily]
        assert all(row['status'] == 'pending' for row in payload['tasks'])

        for task in daily:
            task.refresh_from_db()
            assert task.status == Task.Status.PENDING
            assert task.completed_at is None
            assert task.due_date == YESTERDAY

        long_term.refresh_from_db()
        assert long_term.status == Task.Status.COMPLETED
        pending_daily.refresh_from_db()
        assert pending_daily.status == Task.Status.PENDING

    def test_second_run_finds_nothing(self, make_task):
        completed(make_task)
        run_reset_job()

        payload = run_reset_job()

        assert payload == {
            'success': True,
            'message': 'No completed daily tasks found to reset',
            'reset': 0,
        }

    def test_logs_system_activity(self, make_task):
        task = completed(make_task)

        run_reset_job()

        activity = TaskActivity.objects.get(task=task, action_type=TaskActivity.ActionType.RESET)
        assert activity.user is None
        assert activity.old_value == Task.Status.COMPLETED
        assert activity.new_value == Task.Status.PENDING

    def test_database_error_becomes_failure_payload(self):
        with patch('apps.tasks.jobs.reset_daily_tasks', side_effect=DatabaseError('connection lost')):
            payload = run_reset_job()

        assert payload == {'success': False, 'error': 'connection lost'}


class TestDuplicateJob:
    def test_copies_yesterdays_completed_daily_tasks(self, make_task, other_user, department):
        sources = [
            completed(make_task, title='Stand-up notes', due_date=YESTERDAY,
                      description='Post in #team', priority=Task.Priority.HIGH),
            completed(make_task, title='Inbox zero', due_date=YESTERDAY, assignee=other_user),
        ]
        make_task(task_type=Task.TaskType.DAILY, due_date=YESTERDAY)
        completed(make_task, due_date=date(2024, 1, 13))
        completed(make_task, task_type=Task.TaskType.LONG_TERM, due_date=YESTERDAY)

        payload = run_duplicate_job(today=TODAY)

        assert payload['success'] is True
        assert payload['duplicated'] == 2
        assert payload['message'] == 'Successfully duplicated 2 daily tasks'

        copies = Task.objects.filter(due_date=TODAY).order_by('pk')
        assert copies.count() == 2
        for source, copy in zip(sources, copies):
            assert copy.title == source.title
            assert copy.description == source.description
            assert copy.assignee_id == source.assignee_id
            assert copy.creator_id == source.creator_id
            assert copy.priority == source.priority
            assert copy.department_id == department.pk
            assert copy.task_type == Task.TaskType.DAILY
            assert copy.status == Task.Status.PENDING
            assert copy.start_date == TODAY
            assert copy.completed_at is None

        assert [row['due_date'] for row in payload['tasks']] == ['2024-01-15', '2024-01-15']

    def test_sources_are_left_untouched(self, make_task):
        source = completed(make_task, due_date=YESTERDAY)

        run_duplicate_job(today=TODAY)

        source.refresh_from_db()
        assert source.status == Task.Status.COMPLETED
        assert source.due_date == YESTERDAY

    def test_second_run_duplicates_again(self, make_task):
        completed(make_task, title='A', due_date=YESTERDAY)
        completed(make_task, title='B', due_date=YESTERDAY)

        run_duplicate_job(today=TODAY)
        run_duplicate_job(today=TODAY)

        assert Task.objects.filter(due_date=TODAY).count() == 4

    def test_skip_existing_prevents_second_copy(self, make_task):
        completed(make_task, due_date=YESTERDAY)

        first = duplicate_daily_tasks(today=TODAY, skip_existing=True)
        second = duplicate_daily_tasks(today=TODAY, skip_existing=True)

        assert first.count == 1
        assert second.count == 0
        assert Task.objects.filter(due_date=TODAY).count() == 1

    def test_logs_duplication_activity(self, make_task):
        completed(make_task, due_date=YESTERDAY)

        run_duplicate_job(today=TODAY)

        copy = Task.objects.get(due_date=TODAY)
        activity = copy.activities.get()
        assert activity.action_type == TaskActivity.ActionType.DUPLICATED
        assert activity.user is None

    def test_nothing_to_duplicate(self, make_task):
        completed(make_task, due_date=TODAY)

        payload = run_duplicate_job(today=TODAY)

        assert payload == {
            'success': True,
            'message': 'No daily tasks found for duplication',
            'duplicated': 0,
        }

    def test_database_error_becomes_failure_payload(self):
        with patch('apps.tasks.jobs.duplicate_daily_tasks', side_effect=DatabaseError('timeout')):
            payload = run_duplicate_job(today=TODAY)

        assert payload == {'success': False, 'error': 'timeout'}
