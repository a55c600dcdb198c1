"""
Core Celery tasks for system maintenance.

Best practices demonstrated:
- Scheduled periodic tasks
- Proper logging
- Error handling
"""

from celery import shared_task
from django.contrib.sessions.models import Session
from django.utils import timezone
import logging

logger = logging.getLogger(__name__)


@shared_task(name='apps.core.tasks.cleanup_sessions')
def cleanup_sessions():
    """
    Clean up expired sessions.

    Admin logins still use Django sessions; this task runs hourly
    (see config/celery.py) to keep the session table small.
    """
    try:
        expired_sessions = Session.objects.filter(expire_date__lt=timezone.now())
        count = expired_sessions.count()
        expired_sessions.delete()

        logger.info(f"Cleaned up {count} expired sessions")
        return {'status': 'success', 'deleted_count': count}

    except Exception as e:
        logger.error(f"Error cleaning up sessions: {e}", exc_info=True)
        raise
