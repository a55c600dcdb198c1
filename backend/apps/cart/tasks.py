"""Cart maintenance tasks."""

from celery import shared_task
from django.conf import settings
from django.utils import timezone
from datetime import timedelta
import logging

logger = logging.getLogger(__name__)


@shared_task(name='apps.cart.tasks.purge_stale_carts')
def purge_stale_carts(days=None):
    """
    Delete carts untouched for CART_RETENTION_DAYS (default 30).

    Runs daily from Celery beat.
    """
    from .models import Cart

    days = days if days is not None else getattr(settings, 'CART_RETENTION_DAYS', 30)
    cutoff = timezone.now() - timedelta(days=days)

    try:
        stale = Cart.objects.filter(updated_at__lt=cutoff)
        count = stale.count()
        stale.delete()
    except Exception as e:
        logger.error(f"Error purging stale carts: {e}", exc_info=True)
        raise

    logger.info(f"Purged {count} cart(s) idle for more than {days} days")
    return {'status': 'success', 'deleted_count': count}
