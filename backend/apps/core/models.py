"""
Core models providing base classes for all apps.

Best practices demonstrated:
- Abstract base models for common fields
- Timestamp tracking
- Manual display ordering shared by catalog and content models
"""

from django.db import models


class TimeStampedModel(models.Model):
    """
    Abstract base class that provides self-updating
    'created_at' and 'updated_at' fields (stored in UTC).
    """
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-created_at']


class OrderedModel(models.Model):
    """
    Abstract base class for admin-controlled manual ordering.

    Lower values sort first.
    """
    display_order = models.IntegerField(default=0, db_index=True)

    class Meta:
        abstract = True


class BaseModel(TimeStampedModel, OrderedModel):
    """
    Combination of TimeStamped and Ordered models.
    Use this as the base for catalog and content models.
    """
    class Meta:
        abstract = True
