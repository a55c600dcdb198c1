"""
Content service layer: slides, FAQs and settings.

Public slide and FAQ lists are cached; every write clears the cached
lists for its model.
"""

import logging
from decimal import Decimal, InvalidOperation

from django.core.cache import cache
from django.db import transaction
from django.utils.text import slugify

from apps.core.exceptions import Conflict, IntegrityConflict, NotFound, ValidationFailed
from .models import FAQ, FAQCategory, Setting, Slide

logger = logging.getLogger(__name__)

ACTIVE_SLIDES_KEY = 'content:active-slides'
PUBLIC_FAQS_KEY = 'content:public-faqs'
CACHE_TIMEOUT = 60 * 15

TRUE_VALUES = {'true', '1', 'yes', 'on'}


def _get(model, pk, label):
    instance = model.objects.filter(pk=pk).first()
    if instance is None:
        raise NotFound(f'{label} not found.')
    return instance


def _apply(instance, data):
    for attr, value in data.items():
        setattr(instance, attr, value)
    instance.save()
    return instance


@transaction.atomic
def _reorder(model, orders):
    """Apply `{id: display_order}`; unknown ids are skipped."""
    updated = 0
    for instance in model.objects.select_for_update().filter(pk__in=list(orders)):
        instance.display_order = orders[instance.pk]
        instance.save(update_fields=['display_order', 'updated_at'])
        updated += 1
    return updated


# ---------------------------------------------------------------------------
# Slides
# ---------------------------------------------------------------------------

def all_slides():
    return Slide.objects.order_by('display_order', 'id')


def active_slides():
    return cache.get_or_set(
        ACTIVE_SLIDES_KEY,
        lambda: list(Slide.objects.filter(is_active=True).order_by('display_order', 'id')),
        CACHE_TIMEOUT,
    )


def get_slide(slide_id):
    return _get(Slide, slide_id, 'Slide')


def create_slide(data):
    slide = Slide.objects.create(**data)
    cache.delete(ACTIVE_SLIDES_KEY)
    logger.info(f"Created slide {slide.id}")
    return slide


def update_slide(slide_id, data):
    slide = _apply(get_slide(slide_id), data)
    cache.delete(ACTIVE_SLIDES_KEY)
    return slide


def delete_slide(slide_id):
    get_slide(slide_id).delete()
    cache.delete(ACTIVE_SLIDES_KEY)
    logger.info(f"Deleted slide {slide_id}")


def toggle_slide_status(slide_id):
    slide = get_slide(slide_id)
    slide.is_active = not slide.is_active
    slide.save(update_fields=['is_active', 'updated_at'])
    cache.delete(ACTIVE_SLIDES_KEY)
    return slide


def reorder_slides(orders):
    updated = _reorder(Slide, orders)
    cache.delete(ACTIVE_SLIDES_KEY)
    return updated


# ---------------------------------------------------------------------------
# FAQs
# ---------------------------------------------------------------------------

def faq_categories(active_only=False):
    queryset = FAQCategory.objects.order_by('display_order', 'id')
    if active_only:
        queryset = queryset.filter(is_active=True)
    return queryset


def get_faq_category(category_id):
    return _get(FAQCategory, category_id, 'FAQ category')


def create_faq_category(data):
    data = dict(data)
    slug = data.pop('slug', '') or slugify(data['name']) or 'faq'
    if FAQCategory.objects.filter(slug=slug).exists():
        raise IntegrityConflict('slug', f"FAQ category with slug '{slug}' already exists.")
    category = FAQCategory.objects.create(slug=slug, **data)
    cache.delete(PUBLIC_FAQS_KEY)
    return category


def update_faq_category(category_id, data):
    category = get_faq_category(category_id)
    slug = data.get('slug')
    if slug and FAQCategory.objects.filter(slug=slug).exclude(pk=category.pk).exists():
        raise IntegrityConflict('slug', f"FAQ category with slug '{slug}' already exists.")
    if not slug:
        data = {k: v for k, v in data.items() if k != 'slug'}
    category = _apply(category, data)
    cache.delete(PUBLIC_FAQS_KEY)
    return category


def delete_faq_category(category_id):
    """Delete an FAQ category; rejected while FAQs still reference it."""
    category = get_faq_category(category_id)
    if category.faqs.exists():
        logger.warning(f"Refused to delete FAQ category {category.slug}: it still owns FAQs")
        raise Conflict('Cannot delete FAQ category that contains FAQs. Please move or delete them first.')
    category.delete()
    cache.delete(PUBLIC_FAQS_KEY)


def reorder_faq_categories(orders):
    updated = _reorder(FAQCategory, orders)
    cache.delete(PUBLIC_FAQS_KEY)
    return updated


def all_faqs():
    return FAQ.objects.select_related('category').order_by('display_order', 'id')


def public_faqs(category_slug=None):
    """
    Active FAQs for the storefront.

    With a category slug only FAQs of that (active) category are listed.
    """
    if category_slug:
        return list(
            FAQ.objects.select_related('category')
            .filter(is_active=True, category__slug=category_slug, category__is_active=True)
            .order_by('display_order', 'id')
        )
    return cache.get_or_set(
        PUBLIC_FAQS_KEY,
        lambda: list(all_faqs().filter(is_active=True)),
        CACHE_TIMEOUT,
    )


def get_faq(faq_id):
    return _get(FAQ, faq_id, 'FAQ')


def _resolve_category(data):
    data = dict(data)
    if 'category_id' in data:
        category_id = data.pop('category_id')
        data['category'] = get_faq_category(category_id) if category_id is not None else None
    return data


def create_faq(data):
    faq = FAQ.objects.create(**_resolve_category(data))
    cache.delete(PUBLIC_FAQS_KEY)
    return faq


def update_faq(faq_id, data):
    faq = _apply(get_faq(faq_id), _resolve_category(data))
    cache.delete(PUBLIC_FAQS_KEY)
    return faq


def delete_faq(faq_id):
    get_faq(faq_id).delete()
    cache.delete(PUBLIC_FAQS_KEY)


def reorder_faqs(orders):
    updated = _reorder(FAQ, orders)
    cache.delete(PUBLIC_FAQS_KEY)
    return updated


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

def all_settings(category=None):
    queryset = Setting.objects.all()
    if category:
        queryset = queryset.filter(category=category).order_by('key')
    return queryset


def get_setting(key):
    setting = Setting.objects.filter(key=key).first()
    if setting is None:
        raise NotFound(f"Setting with key '{key}' not found.")
    return setting


def get_value(key, default=''):
    setting = Setting.objects.filter(key=key).only('value').first()
    return setting.value if setting is not None else default


def get_bool(key, default=False):
    value = get_value(key, None)
    if value is None:
        return default
    return value.strip().lower() in TRUE_VALUES


def get_number(key, default=None):
    value = get_value(key, None)
    if value is None:
        return default
    try:
        return Decimal(value.strip())
    except InvalidOperation:
        logger.warning(f"Setting {key} is not a number: {value!r}")
        return default


def _validate_value(data_type, value):
    if data_type == Setting.DataType.NUMBER:
        try:
            Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationFailed.for_field('value', 'Value must be a number.')
    elif data_type == Setting.DataType.BOOLEAN:
        if str(value).strip().lower() not in TRUE_VALUES | {'false', '0', 'no', 'off'}:
            raise ValidationFailed.for_field('value', 'Value must be true or false.')


def create_setting(data):
    if Setting.objects.filter(key=data['key']).exists():
        raise IntegrityConflict('key', f"Setting with key '{data['key']}' already exists.")
    _validate_value(data.get('data_type', Setting.DataType.TEXT), data.get('value', ''))
    setting = Setting.objects.create(**data)
    logger.info(f"Created setting {setting.key}")
    return setting


def update_setting(key, data):
    setting = get_setting(key)
    data = {k: v for k, v in data.items() if k != 'key'}
    _validate_value(data.get('data_type', setting.data_type), data.get('value', setting.value))
    setting = _apply(setting, data)
    logger.info(f"Updated setting {key}")
    return setting


def delete_setting(key):
    setting = get_setting(key)
    if setting.is_required:
        raise Conflict(f"Setting '{key}' is required and cannot be deleted.")
    setting.delete()
    logger.info(f"Deleted setting {key}")
