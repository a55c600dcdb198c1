"""
Celery configuration for async task processing.

Best practices demonstrated:
- Auto-discovery of tasks
- Task routing by queue
- Beat schedule for periodic catalog and cart maintenance
- Task lifecycle logging through signals
"""

import os
from celery import Celery
from celery.schedules import crontab
from celery.signals import task_prerun, task_postrun, task_failure
import logging

logger = logging.getLogger(__name__)

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

app = Celery('coffee_shop')

app.config_from_object('django.conf:settings', namespace='CELERY')

app.autodiscover_tasks()


app.conf.task_routes = {
    # Outgoing email
    'apps.catalog.tasks.report_low_stock': {
        'queue': 'notifications',
        'routing_key': 'notifications.stock',
    },
    'apps.catalog.tasks.warm_featured_cache': {
        'queue': 'default',
        'routing_key': 'default',
    },
    # Housekeeping
    'apps.cart.tasks.purge_stale_carts': {
        'queue': 'maintenance',
        'routing_key': 'maintenance.cleanup',
    },
    'apps.core.tasks.cleanup_sessions': {
        'queue': 'maintenance',
        'routing_key': 'maintenance.cleanup',
    },
}


@task_prerun.connect
def task_prerun_handler(task_id, task, *args, **kwargs):
    logger.info(f'Task {task.name}[{task_id}] starting')


@task_postrun.connect
def task_postrun_handler(task_id, task, retval, *args, **kwargs):
    logger.info(f'Task {task.name}[{task_id}] completed')


@task_failure.connect
def task_failure_handler(task_id, exception, *args, **kwargs):
    logger.error(f'Task {task_id} failed: {exception}', exc_info=True)


app.conf.beat_schedule = {
    'cleanup-old-sessions': {
        'task': 'apps.core.tasks.cleanup_sessions',
        'schedule': 3600.0,  # Every hour
    },
    'report-low-stock': {
        'task': 'apps.catalog.tasks.report_low_stock',
        'schedule': crontab(hour=7, minute=0),
    },
    'purge-stale-carts': {
        'task': 'apps.cart.tasks.purge_stale_carts',
        'schedule': crontab(hour=3, minute=30),
        'options': {
            'queue': 'maintenance',
        },
    },
}

app.conf.timezone = 'UTC'
