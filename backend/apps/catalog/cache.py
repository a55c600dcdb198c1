"""
Catalog response caching.

Listing responses depend on many query parameters, so keys are namespaced
with a version counter. Any catalog write bumps the version, which makes
every previously cached listing unreachable at once.
"""

import logging

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

VERSION_KEY = 'catalog:cache-version'
FEATURED_KEY = 'featured_products'


def _timeout():
    return getattr(settings, 'CATALOG_CACHE_TIMEOUT', 60 * 5)


def _version():
    version = cache.get(VERSION_KEY)
    if version is None:
        version = 1
        cache.set(VERSION_KEY, version, None)
    return version


def versioned_key(key):
    return f'{key}:v{_version()}'


def get_or_build(key, builder, timeout=None):
    """Return the cached value for `key`, building and storing it on a miss."""
    full_key = versioned_key(key)
    value = cache.get(full_key)
    if value is None:
        value = builder()
        cache.set(full_key, value, timeout if timeout is not None else _timeout())
    return value


def invalidate_catalog_cache():
    """Drop every cached catalog response."""
    try:
        cache.incr(VERSION_KEY)
    except ValueError:
        cache.set(VERSION_KEY, 2, None)
    logger.debug("Catalog cache invalidated")
