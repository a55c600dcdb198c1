"""
Catalog Celery tasks.

Best practices demonstrated:
- Periodic tasks scheduled through Celery beat (config/celery.py)
- Retries for tasks that talk to external services (email)
- Structured return values for monitoring
"""

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.db.models import F
import logging

from .cache import FEATURED_KEY, get_or_build, invalidate_catalog_cache

logger = logging.getLogger(__name__)


def low_stock_variants():
    """Active variants of active products with 0 < stock <= threshold."""
    from .models import ProductVariant

    return (
        ProductVariant.objects
        .select_related('product')
        .filter(
            is_active=True,
            product__is_active=True,
            stock_quantity__gt=0,
            stock_quantity__lte=F('low_stock_threshold'),
        )
        .order_by('stock_quantity', 'variant_sku')
    )


@shared_task(
    bind=True,
    autoretry_for=(ConnectionError,),
    retry_kwargs={'max_retries': 3, 'countdown': 60},
    name='apps.catalog.tasks.report_low_stock'
)
def report_low_stock(self):
    """
    Log (and optionally email) variants running low on stock.

    The email goes to LOW_STOCK_ALERT_EMAIL when it is configured.
    """
    variants = list(low_stock_variants())
    if not variants:
        logger.info("No low-stock variants")
        return {'status': 'success', 'low_stock_count': 0}

    lines = [
        f"{v.variant_sku} ({v.product.name}): {v.stock_quantity} left, threshold {v.low_stock_threshold}"
        for v in variants
    ]
    logger.warning(f"{len(variants)} variant(s) low on stock")

    recipient = getattr(settings, 'LOW_STOCK_ALERT_EMAIL', '')
    if recipient:
        send_mail(
            subject=f"Low stock: {len(variants)} variant(s)",
            message='\n'.join(lines),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient],
        )
        logger.info(f"Low-stock report sent to {recipient}")

    return {
        'status': 'success',
        'low_stock_count': len(variants),
        'variant_skus': [v.variant_sku for v in variants],
    }


@shared_task(name='apps.catalog.tasks.warm_featured_cache')
def warm_featured_cache(count=8):
    """Rebuild the featured-products response after the cache was dropped."""
    from .serializers import ProductListSerializer
    from .services import featured_products

    invalidate_catalog_cache()
    data = get_or_build(
        f'{FEATURED_KEY}:{count}',
        lambda: ProductListSerializer(featured_products(count), many=True).data,
    )
    logger.info(f"Warmed featured cache with {len(data)} product(s)")
    return {'status': 'success', 'count': len(data)}
