"""
Views for notifications app.

Includes:
- Active notices for the current user (polled by the client)
- The synthesized notification cue
"""

from django.contrib.auth.decorators import login_required
from django.http import HttpResponse, JsonResponse
from django.views.decorators.cache import cache_control
from django.views.decorators.http import require_GET

from .models import Notice
from .sound import synthesize_cue


@login_required
@require_GET
def active_notices(request):
    """Return the current user's unexpired notices, newest first."""
    notices = Notice.objects.filter(user=request.user).active()
    return JsonResponse({'notices': [notice.to_dict() for notice in notices]})


@require_GET
@cache_control(max_age=86400, public=True)
def notification_cue(request):
    """Serve the "new message" sound as WAV."""
    return HttpResponse(synthesize_cue(), content_type='audio/wav')
