"""
Views for timetracking app.
"""

from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from .services import calculate_worked_time, format_worked_time


@login_required
@require_GET
def worked_today(request):
    """Total time worked by the current user today."""
    total = calculate_worked_time(request.user)
    return JsonResponse({
        'total_ms': total,
        'formatted': format_worked_time(total),
    })
