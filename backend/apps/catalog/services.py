"""
Catalog service layer.

All catalog writes go through these functions. They enforce the business
rules the database cannot express on its own and raise the domain
exceptions from `apps.core.exceptions`, which the API turns into error
responses:

- SKU / variant SKU / category slug uniqueness -> IntegrityConflict
- Category delete while it owns products -> Conflict
- Product delete while any variant (active or not) carries stock -> Conflict
- Missing entities -> NotFound

Reads for the public listing load products with their category, active
variants and approved reviews, then hand them to the pure query engine.
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Prefetch, Q
from django.utils import timezone
from django.utils.text import slugify

from apps.core.exceptions import Conflict, IntegrityConflict, NotFound, ValidationFailed
from .cache import invalidate_catalog_cache
from .models import Category, Product, ProductImage, ProductReview, ProductVariant
from .pricing import select_default_variant, summarize_reviews
from .query import Page, SearchSpec, paginate, search_catalog

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = [
    'sku', 'name', 'name_ar', 'description', 'description_ar',
    'notes', 'notes_ar', 'aromatic_profile', 'aromatic_profile_ar',
    'intensity', 'origin', 'roast_level', 'process',
    'is_active', 'is_featured', 'is_digital', 'display_order',
]

DEFAULT_WEIGHT = Decimal('250')

VARIANT_FIELDS = [
    'variant_sku', 'weight', 'weight_unit', 'price', 'discount_price',
    'length', 'width', 'height', 'stock_quantity', 'low_stock_threshold',
    'is_active', 'is_default', 'display_order',
]

CATEGORY_FIELDS = [
    'slug', 'name', 'name_ar', 'description', 'description_ar',
    'image_path', 'is_active', 'is_displayed_on_homepage', 'display_order',
]


# ---------------------------------------------------------------------------
# Product reads
# ---------------------------------------------------------------------------

def catalog_queryset():
    """
    Products with everything the listing and detail views need.

    Variants are ordered by id so the default-variant fallback picks the
    first one created.
    """
    return Product.objects.select_related('category').prefetch_related(
        Prefetch(
            'variants',
            queryset=ProductVariant.objects.filter(is_active=True).order_by('id')
        ),
        Prefetch(
            'reviews',
            queryset=ProductReview.objects.filter(is_approved=True)
        ),
        'images',
    )


def list_products(spec: SearchSpec) -> Page:
    """Run the catalog query engine over the active products."""
    products = list(catalog_queryset().filter(is_active=True))
    return search_catalog(spec, products)


def get_product(product_id, include_inactive=False):
    queryset = catalog_queryset()
    if not include_inactive:
        queryset = queryset.filter(is_active=True)
    product = queryset.filter(pk=product_id).first()
    if product is None:
        raise NotFound('Product not found.')
    return product


def get_product_by_sku(sku, include_inactive=False):
    queryset = catalog_queryset()
    if not include_inactive:
        queryset = queryset.filter(is_active=True)
    product = queryset.filter(sku=sku).first()
    if product is None:
        raise NotFound('Product not found.')
    return product


def featured_products(count=8):
    return list(
        catalog_queryset()
        .filter(is_active=True, is_featured=True)
        .order_by('display_order', 'name')[:count]
    )


def products_by_category(category_id, count=20):
    return list(
        catalog_queryset()
        .filter(is_active=True, category_id=category_id)
        .order_by('display_order', 'name')[:count]
    )


# ---------------------------------------------------------------------------
# Product writes
# ---------------------------------------------------------------------------

def _format_weight(weight):
    return format(Decimal(str(weight)).normalize(), 'f')


def default_variant_sku(sku, weight, weight_unit):
    return f"{sku}-{_format_weight(weight)}{weight_unit}"


def _get_category(category_id):
    category = Category.objects.filter(pk=category_id).first()
    if category is None:
        raise NotFound('Category not found.')
    return category


def _ensure_unique_sku(sku, exclude_id=None):
    queryset = Product.objects.filter(sku=sku)
    if exclude_id is not None:
        queryset = queryset.exclude(pk=exclude_id)
    if queryset.exists():
        raise IntegrityConflict('sku', 'SKU already exists.')


def _ensure_unique_variant_sku(variant_sku, exclude_id=None):
    queryset = ProductVariant.objects.filter(variant_sku=variant_sku)
    if exclude_id is not None:
        queryset = queryset.exclude(pk=exclude_id)
    if queryset.exists():
        raise IntegrityConflict('variant_sku', 'Variant SKU already exists.')


def _ensure_discount_below_price(variant):
    """Check the merged variant, so stored values count as well as new ones."""
    if variant.discount_price is not None and variant.discount_price >= variant.price:
        raise ValidationFailed.for_field(
            'discount_price', 'Discount price must be less than the regular price.'
        )


def _default_variant(product, lock=False):
    """The variant shown on the product card: chosen among active variants only."""
    variants = product.variants.filter(is_active=True).order_by('id')
    if lock:
        variants = variants.select_for_update()
    return select_default_variant(variants)


@transaction.atomic
def create_product(data):
    """
    Create a product and its default variant.

    `data` carries the product fields plus the pricing of the first
    variant (price, discount_price, weight, weight_unit, stock_quantity,
    low_stock_threshold).
    """
    category = _get_category(data['category_id'])
    _ensure_unique_sku(data['sku'])

    product = Product(category=category)
    for attr in PRODUCT_FIELDS:
        if attr in data:
            setattr(product, attr, data[attr])
    product.save()

    weight = data.get('weight', DEFAULT_WEIGHT)
    weight_unit = data.get('weight_unit', 'g')
    variant_sku = default_variant_sku(product.sku, weight, weight_unit)
    _ensure_unique_variant_sku(variant_sku)

    ProductVariant.objects.create(
        product=product,
        variant_sku=variant_sku,
        weight=weight,
        weight_unit=weight_unit,
        price=data['price'],
        discount_price=data.get('discount_price'),
        stock_quantity=data.get('stock_quantity', 0),
        low_stock_threshold=data.get('low_stock_threshold', 5),
        is_active=True,
        is_default=True,
    )

    invalidate_catalog_cache()
    logger.info(f"Created product {product.sku} (ID: {product.id})")
    return get_product(product.id, include_inactive=True)


@transaction.atomic
def update_product(product_id, data):
    """Update product fields and the pricing of its default variant."""
    product = Product.objects.select_for_update().filter(pk=product_id).first()
    if product is None:
        raise NotFound('Product not found.')

    if 'category_id' in data:
        product.category = _get_category(data['category_id'])
    if 'sku' in data:
        _ensure_unique_sku(data['sku'], exclude_id=product.id)

    for attr in PRODUCT_FIELDS:
        if attr in data:
            setattr(product, attr, data[attr])
    product.save()

    pricing_fields = {'price', 'discount_price', 'weight', 'weight_unit', 'stock_quantity', 'low_stock_threshold'}
    if pricing_fields & set(data):
        variant = _default_variant(product, lock=True)
        if variant is None:
            if data.get('price') is None:
                raise ValidationFailed.for_field(
                    'price', 'Price is required when the product has no active variant.'
                )
            variant = ProductVariant(
                product=product, weight=DEFAULT_WEIGHT, is_default=True, is_active=True
            )
        for attr in pricing_fields:
            if attr in data:
                setattr(variant, attr, data[attr])
        _ensure_discount_below_price(variant)
        variant.variant_sku = default_variant_sku(product.sku, variant.weight, variant.weight_unit)
        _ensure_unique_variant_sku(variant.variant_sku, exclude_id=variant.pk)
        variant.save()
        if variant.is_default:
            _clear_other_defaults(variant)

    invalidate_catalog_cache()
    logger.info(f"Updated product {product.sku} (ID: {product.id})")
    return get_product(product.id, include_inactive=True)


def has_stocked_variants(variants):
    """
    Delete guard: any variant with stock blocks deletion.

    The active flag is deliberately not considered here, unlike the
    in-stock listing filter which only looks at active variants.
    """
    return any(v.stock_quantity > 0 for v in variants)


@transaction.atomic
def delete_product(product_id):
    """
    Delete a product and everything it owns.

    Children are removed explicitly (reviews, images, variants) before the
    product itself, inside one transaction, instead of relying on the
    database cascade.
    """
    product = Product.objects.select_for_update().filter(pk=product_id).first()
    if product is None:
        raise NotFound('Product not found.')

    variants = list(product.variants.all())
    if has_stocked_variants(variants):
        logger.warning(f"Refused to delete product {product.sku}: variants still carry stock")
        raise Conflict(
            'Cannot delete product that has variants with stock. Please clear stock first.'
        )

    review_count, _ = product.reviews.all().delete()
    image_count, _ = product.images.all().delete()
    variant_count, _ = product.variants.all().delete()
    name, sku = product.name, product.sku
    product.delete()

    invalidate_catalog_cache()
    logger.info(
        f"Deleted product '{name}' ({sku}) with {review_count} review(s), "
        f"{variant_count} variant(s) and {image_count} image(s)"
    )
    return {
        'reviews': review_count,
        'images': image_count,
        'variants': variant_count,
    }


def _toggle(model, pk, field, not_found_message):
    instance = model.objects.filter(pk=pk).first()
    if instance is None:
        raise NotFound(not_found_message)
    setattr(instance, field, not getattr(instance, field))
    instance.save(update_fields=[field, 'updated_at'])
    invalidate_catalog_cache()
    logger.info(f"{model.__name__} {pk}: {field} -> {getattr(instance, field)}")
    return instance


def toggle_product_status(product_id):
    return _toggle(Product, product_id, 'is_active', 'Product not found.')


def toggle_product_featured(product_id):
    return _toggle(Product, product_id, 'is_featured', 'Product not found.')


@transaction.atomic
def update_stock(product_id, quantity):
    """Set the stock of the product's default variant."""
    if quantity is None or int(quantity) < 0:
        raise ValidationFailed.for_field('quantity', 'Quantity must be 0 or greater.')

    product = Product.objects.filter(pk=product_id).first()
    if product is None:
        raise NotFound('Product not found.')

    variant = _default_variant(product, lock=True)
    if variant is None:
        raise NotFound('Product has no active variants.')

    variant.stock_quantity = int(quantity)
    variant.save(update_fields=['stock_quantity', 'updated_at'])
    invalidate_catalog_cache()
    logger.info(f"Stock for {variant.variant_sku} set to {variant.stock_quantity}")
    return variant


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------

def _clear_other_defaults(variant):
    ProductVariant.objects.filter(product_id=variant.product_id, is_default=True).exclude(
        pk=variant.pk
    ).update(is_default=False)


@transaction.atomic
def add_variant(product_id, data):
    product = Product.objects.filter(pk=product_id).first()
    if product is None:
        raise NotFound('Product not found.')
    _ensure_unique_variant_sku(data['variant_sku'])

    variant = ProductVariant(product=product)
    for attr in VARIANT_FIELDS:
        if attr in data:
            setattr(variant, attr, data[attr])
    _ensure_discount_below_price(variant)
    variant.save()
    if variant.is_default:
        _clear_other_defaults(variant)

    invalidate_catalog_cache()
    logger.info(f"Added variant {variant.variant_sku} to product {product.sku}")
    return variant


@transaction.atomic
def update_variant(variant_id, data):
    variant = ProductVariant.objects.select_for_update().filter(pk=variant_id).first()
    if variant is None:
        raise NotFound('Variant not found.')
    if 'variant_sku' in data:
        _ensure_unique_variant_sku(data['variant_sku'], exclude_id=variant.pk)

    for attr in VARIANT_FIELDS:
        if attr in data:
            setattr(variant, attr, data[attr])
    _ensure_discount_below_price(variant)
    variant.save()
    if variant.is_default:
        _clear_other_defaults(variant)

    invalidate_catalog_cache()
    return variant


def delete_variant(variant_id):
    variant = ProductVariant.objects.filter(pk=variant_id).first()
    if variant is None:
        raise NotFound('Variant not found.')
    variant.delete()
    invalidate_catalog_cache()
    logger.info(f"Deleted variant {variant.variant_sku}")


@transaction.atomic
def set_default_variant(variant_id):
    variant = ProductVariant.objects.select_for_update().filter(pk=variant_id).first()
    if variant is None:
        raise NotFound('Variant not found.')
    variant.is_default = True
    variant.save(update_fields=['is_default', 'updated_at'])
    _clear_other_defaults(variant)
    invalidate_catalog_cache()
    return variant


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

@transaction.atomic
def add_image(product_id, data):
    product = Product.objects.filter(pk=product_id).first()
    if product is None:
        raise NotFound('Product not found.')
    image = ProductImage.objects.create(product=product, **data)
    if image.is_main:
        product.images.exclude(pk=image.pk).update(is_main=False)
    invalidate_catalog_cache()
    return image


@transaction.atomic
def set_main_image(image_id):
    """Flag one image as main; at most one main image per product."""
    image = ProductImage.objects.filter(pk=image_id).first()
    if image is None:
        raise NotFound('Image not found.')
    ProductImage.objects.filter(product_id=image.product_id).exclude(pk=image.pk).update(is_main=False)
    image.is_main = True
    image.save(update_fields=['is_main', 'updated_at'])
    invalidate_catalog_cache()
    return image


def delete_image(image_id):
    deleted, _ = ProductImage.objects.filter(pk=image_id).delete()
    if not deleted:
        raise NotFound('Image not found.')
    invalidate_catalog_cache()


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

def generate_slug(name):
    return slugify((name or '').replace('&', ' and ')) or 'category'


def is_slug_available(slug, exclude_id=None):
    queryset = Category.objects.filter(slug=slug)
    if exclude_id is not None:
        queryset = queryset.exclude(pk=exclude_id)
    return not queryset.exists()


def generate_unique_slug(name, exclude_id=None):
    base_slug = generate_slug(name)
    slug = base_slug
    counter = 1
    while not is_slug_available(slug, exclude_id):
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug


def get_category(category_id):
    return _get_category(category_id)


def get_category_by_slug(slug):
    category = Category.objects.filter(slug=slug, is_active=True).first()
    if category is None:
        raise NotFound('Category not found.')
    return category


def active_categories():
    return Category.objects.filter(is_active=True).order_by('display_order', 'name')


def homepage_categories():
    return active_categories().filter(is_displayed_on_homepage=True)


def filter_categories(search=None, status=None):
    """Admin listing: free-text search plus a status filter."""
    queryset = Category.objects.all()
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) | Q(name_ar__icontains=search) | Q(slug__icontains=search)
        )

    status = (status or '').lower()
    if status == 'active':
        queryset = queryset.filter(is_active=True)
    elif status == 'inactive':
        queryset = queryset.filter(is_active=False)
    elif status == 'homepage':
        queryset = queryset.filter(is_displayed_on_homepage=True)
    elif status == 'hidden':
        queryset = queryset.filter(is_displayed_on_homepage=False)

    return queryset.order_by('display_order', 'name')


@transaction.atomic
def create_category(data):
    slug = data.get('slug') or generate_unique_slug(data['name'])
    if not is_slug_available(slug):
        raise IntegrityConflict('slug', f"Category with slug '{slug}' already exists.")

    category = Category(slug=slug)
    for attr in CATEGORY_FIELDS:
        if attr in data and attr != 'slug':
            setattr(category, attr, data[attr])
    category.save()

    invalidate_catalog_cache()
    logger.info(f"Created category {category.slug} (ID: {category.id})")
    return category


@transaction.atomic
def update_category(category_id, data):
    category = Category.objects.select_for_update().filter(pk=category_id).first()
    if category is None:
        raise NotFound('Category not found.')

    slug = data.get('slug')
    if slug and not is_slug_available(slug, exclude_id=category.id):
        raise IntegrityConflict('slug', f"Category with slug '{slug}' already exists.")

    for attr in CATEGORY_FIELDS:
        if attr in data and (attr != 'slug' or slug):
            setattr(category, attr, data[attr])
    category.save()

    invalidate_catalog_cache()
    return category


@transaction.atomic
def delete_category(category_id):
    """Delete a category; rejected while it still owns products."""
    category = Category.objects.select_for_update().filter(pk=category_id).first()
    if category is None:
        raise NotFound('Category not found.')

    if category.products.exists():
        logger.warning(f"Refused to delete category {category.slug}: it still owns products")
        raise Conflict(
            'Cannot delete category that contains products. '
            'Please move or delete the products first.'
        )

    slug = category.slug
    category.delete()
    invalidate_catalog_cache()
    logger.info(f"Deleted category {slug}")


def toggle_category_status(category_id):
    return _toggle(Category, category_id, 'is_active', 'Category not found.')


def toggle_category_homepage(category_id):
    return _toggle(Category, category_id, 'is_displayed_on_homepage', 'Category not found.')


@transaction.atomic
def reorder_categories(orders):
    """Apply `{category_id: display_order}`; unknown ids are skipped."""
    categories = Category.objects.select_for_update().filter(pk__in=list(orders))
    for category in categories:
        category.display_order = orders[category.pk]
        category.save(update_fields=['display_order', 'updated_at'])
    invalidate_catalog_cache()
    return len(categories)


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------

def product_reviews(product_id, page=1, page_size=10):
    """Approved reviews for a product, newest first, plus the rating summary."""

    if not Product.objects.filter(pk=product_id).exists():
        raise NotFound('Product not found.')

    reviews = list(
        ProductReview.objects.filter(product_id=product_id, is_approved=True)
        .order_by('-created_at', '-id')
    )
    return paginate(reviews, page, page_size), summarize_reviews(reviews)


def submit_review(product_id, data, user=None):
    """Store a review awaiting moderation."""
    product = Product.objects.filter(pk=product_id, is_active=True).first()
    if product is None:
        raise NotFound('Product not found.')

    review = ProductReview.objects.create(
        product=product,
        user=user if user is not None and user.is_authenticated else None,
        is_approved=False,
        **data
    )
    logger.info(f"Review {review.id} submitted for product {product.sku}")
    return review


def approve_review(review_id, approved_by=None):
    review = ProductReview.objects.filter(pk=review_id).first()
    if review is None:
        raise NotFound('Review not found.')
    review.is_approved = True
    review.approved_by = approved_by
    review.approved_at = timezone.now()
    review.save(update_fields=['is_approved', 'approved_by', 'approved_at', 'updated_at'])
    invalidate_catalog_cache()
    return review


def reject_review(review_id, notes=''):
    review = ProductReview.objects.filter(pk=review_id).first()
    if review is None:
        raise NotFound('Review not found.')
    review.is_approved = False
    review.approved_by = None
    review.approved_at = None
    review.admin_notes = notes or review.admin_notes
    review.save(update_fields=['is_approved', 'approved_by', 'approved_at', 'admin_notes', 'updated_at'])
    invalidate_catalog_cache()
    return review


def delete_review(review_id):
    deleted, _ = ProductReview.objects.filter(pk=review_id).delete()
    if not deleted:
        raise NotFound('Review not found.')
    invalidate_catalog_cache()
