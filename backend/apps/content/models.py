"""
Storefront content: homepage slides, FAQs and key/value site settings.

All text is bilingual (English/Arabic) with the Arabic variant optional.
"""

from django.db import models

from apps.core.models import BaseModel, TimeStampedModel


class Slide(BaseModel):
    """Homepage carousel slide. Ordered by `display_order`."""
    title = models.CharField(max_length=200)
    title_ar = models.CharField(max_length=200, blank=True)
    subtitle = models.CharField(max_length=500, blank=True)
    subtitle_ar = models.CharField(max_length=500, blank=True)
    image_path = models.CharField(max_length=500)
    button_text = models.CharField(max_length=100, blank=True)
    button_text_ar = models.CharField(max_length=100, blank=True)
    button_url = models.CharField(max_length=500, blank=True)
    background_color = models.CharField(max_length=50, blank=True)
    text_color = models.CharField(max_length=50, default='text-white')
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = 'slides'
        ordering = ['display_order', 'id']

    def __str__(self):
        return self.title


class FAQCategory(BaseModel):
    name = models.CharField(max_length=200)
    name_ar = models.CharField(max_length=200, blank=True)
    slug = models.SlugField(max_length=200, unique=True)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = 'faq_categories'
        verbose_name = 'FAQ category'
        verbose_name_plural = 'FAQ categories'
        ordering = ['display_order', 'id']

    def __str__(self):
        return self.name


class FAQ(BaseModel):
    question = models.CharField(max_length=500)
    question_ar = models.CharField(max_length=500, blank=True)
    answer = models.TextField()
    answer_ar = models.TextField(blank=True)
    category = models.ForeignKey(
        FAQCategory,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='faqs'
    )
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = 'faqs'
        verbose_name = 'FAQ'
        ordering = ['display_order', 'id']

    def __str__(self):
        return self.question


class Setting(TimeStampedModel):
    """
    Key/value site setting.

    Values are stored as text; `data_type` tells clients (and the typed
    getters in `services`) how to interpret them.
    """

    class DataType(models.TextChoices):
        TEXT = 'text', 'Text'
        IMAGE = 'image', 'Image'
        BOOLEAN = 'boolean', 'Boolean'
        NUMBER = 'number', 'Number'

    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True)
    description = models.CharField(max_length=500, blank=True)
    description_ar = models.CharField(max_length=500, blank=True)
    category = models.CharField(max_length=50, default='General', db_index=True)
    data_type = models.CharField(max_length=10, choices=DataType.choices, default=DataType.TEXT)
    is_required = models.BooleanField(default=False)

    class Meta:
        db_table = 'settings'
        ordering = ['category', 'key']

    def __str__(self):
        return self.key
