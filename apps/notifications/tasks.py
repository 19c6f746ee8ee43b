"""
Scheduled tasks for notifications app.

Background jobs for:
- Purging expired notices (hourly)
"""

import logging

from django.utils import timezone

from .models import Notice

logger = logging.getLogger(__name__)


def purge_expired_notices():
    """
    Scheduled job to run hourly.
    Deletes notices whose display window has passed.

    Returns:
        Number of notices deleted
    """
    deleted, _ = Notice.objects.filter(expires_at__lte=timezone.now()).delete()
    logger.info(f'Purged {deleted} expired notices')
    return deleted
