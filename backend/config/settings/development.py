"""
Development settings - includes debug tools and relaxed security.
"""

from .base import *

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '[::1]']

# Debug toolbar
INSTALLED_APPS += ['debug_toolbar']

MIDDLEWARE.insert(0, 'debug_toolbar.middleware.DebugToolbarMiddleware')

INTERNAL_IPS = ['127.0.0.1']

# Catalog responses are cached; switch to DummyCache to see every query
# CACHES = {
#     'default': {
#         'BACKEND': 'django.core.cache.backends.dummy.DummyCache',
#     }
# }

EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# Low-stock reports go to the console backend above
LOW_STOCK_ALERT_EMAIL = config('LOW_STOCK_ALERT_EMAIL', default='stock@localhost')

CORS_ALLOW_ALL_ORIGINS = True

SECURE_SSL_REDIRECT = False
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False

# DRF - browsable API and no throttling in development
REST_FRAMEWORK['DEFAULT_RENDERER_CLASSES'] = [
    'rest_framework.renderers.JSONRenderer',
    'rest_framework.renderers.BrowsableAPIRenderer',
]
REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []

# Uncomment to run tasks synchronously without a Celery worker
# CELERY_TASK_ALWAYS_EAGER = True
# CELERY_TASK_EAGER_PROPAGATES = True

LOGGING['loggers']['django']['level'] = 'DEBUG'
LOGGING['loggers']['apps']['level'] = 'DEBUG'

print(f"☕ Running in DEVELOPMENT mode")
print(f"📍 Database: {DATABASES['default']['NAME']}@{DATABASES['default']['HOST']}")
print(f"💾 Cache: {CACHES['default']['LOCATION']}")
