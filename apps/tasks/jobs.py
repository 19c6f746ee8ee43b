"""
Scheduled jobs for the tasks app.

Entry points for Django-Q2 schedules (see `manage.py setup_schedules`)
and for the rollover HTTP endpoints. Each job returns a JSON-ready payload:

    {"success": true, "message": ..., "reset"|"duplicated": n, "tasks": [...]}
    {"success": false, "error": ...}
"""

import logging

from django.db import DatabaseError

from .rollover import reset_daily_tasks, duplicate_daily_tasks

logger = logging.getLogger(__name__)


def run_reset_job():
    """
    Scheduled job: reset completed daily tasks to pending.
    Runs nightly after the duplication job.
    """
    try:
        result = reset_daily_tasks()
    except DatabaseError as exc:
        logger.exception('Error in reset-daily-tasks job')
        return {'success': False, 'error': str(exc)}

    if not result.count:
        return {
            'success': True,
            'message': 'No completed daily tasks found to reset',
            'reset': 0,
        }

    return {
        'success': True,
        'message': f'Successfully reset {result.count} daily tasks',
        'reset': result.count,
        'tasks': result.tasks,
    }


def run_duplicate_job(today=None):
    """
    Scheduled job: copy yesterday's completed daily tasks into today.
    Runs nightly shortly after midnight in TIME_ZONE.
    """
    try:
        result = duplicate_daily_tasks(today=today)
    except DatabaseError as exc:
        logger.exception('Error in duplicate-daily-tasks job')
        return {'success': False, 'error': str(exc)}

    if not result.count:
        return {
            'success': True,
            'message': 'No daily tasks found for duplication',
            'duplicated': 0,
        }

    return {
        'success': True,
        'message': f'Successfully duplicated {result.count} daily tasks',
        'duplicated': result.count,
        'tasks': result.tasks,
    }
