"""
Views for tasks app.

Includes:
- Task list (JSON) with filtering
- Status change (JSON)
- Daily task rollover job endpoints (reset, duplicate)
"""

import json
import logging

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied, ValidationError
from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.utils.crypto import constant_time_compare
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from .filters import TaskFilter
from .jobs import run_reset_job, run_duplicate_job
from .services import change_status, get_tasks_for_user

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'authorization, x-client-info, apikey, content-type',
}


# =============================================================================
# Task Views
# =============================================================================

@login_required
@require_GET
def task_list(request):
    """List tasks visible to the current user, filtered by TaskFilter."""
    queryset = get_tasks_for_user(request.user)
    task_filter = TaskFilter(request.GET, queryset=queryset)

    if not task_filter.is_valid():
        return JsonResponse({'errors': task_filter.errors}, status=400)

    tasks = task_filter.qs.order_by('due_date', '-created_at')
    return JsonResponse({
        'count': tasks.count(),
        'tasks': [task.to_dict() for task in tasks],
    })


@login_required
@require_POST
def task_status_change(request, pk):
    """Change the status of a task. Accepts form data or a JSON body."""
    task = get_object_or_404(get_tasks_for_user(request.user), pk=pk)

    if request.content_type == 'application/json':
        try:
            new_status = json.loads(request.body or b'{}').get('status')
        except ValueError:
            return JsonResponse({'error': 'Invalid JSON body.'}, status=400)
    else:
        new_status = request.POST.get('status')

    try:
        task = change_status(task, request.user, new_status)
    except PermissionDenied as e:
        return JsonResponse({'error': str(e)}, status=403)
    except ValidationError as e:
        return JsonResponse({'error': ' '.join(e.messages)}, status=400)

    return JsonResponse({'task': task.to_dict()})


# =============================================================================
# Rollover Job Endpoints
# =============================================================================

def _with_cors(response):
    for header, value in CORS_HEADERS.items():
        response[header] = value
    return response


def _is_authorized(request):
    """Check the bearer token when ROLLOVER_JOB_TOKEN is configured."""
    token = settings.ROLLOVER_JOB_TOKEN
    if not token:
        return True
    header = request.headers.get('Authorization', '')
    scheme, _, supplied = header.partition(' ')
    return scheme.lower() == 'bearer' and constant_time_compare(supplied, token)


def _job_response(request, job):
    """
    Run a rollover job and map its payload to an HTTP response.

    OPTIONS → empty 200, success → 200, failure → 500. Request body and
    query parameters are ignored.
    """
    if request.method == 'OPTIONS':
        return _with_cors(HttpResponse(status=200))

    if not _is_authorized(request):
        logger.warning(f'Rejected unauthorized call to {request.path}')
        return _with_cors(JsonResponse(
            {'success': False, 'error': 'Unauthorized'},
            status=401,
        ))

    payload = job()
    status = 200 if payload['success'] else 500
    return _with_cors(JsonResponse(payload, status=status))


@csrf_exempt
def reset_daily_tasks_view(request):
    """HTTP entry point for the daily task reset job."""
    return _job_response(request, run_reset_job)


@csrf_exempt
def duplicate_daily_tasks_view(request):
    """HTTP entry point for the daily task duplication job."""
    return _job_response(request, run_duplicate_job)
