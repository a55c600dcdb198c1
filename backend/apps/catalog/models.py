"""
Catalog models: categories, products, variants, images and reviews.

Best practices demonstrated:
- DecimalField for money (never FloatField)
- Derived pricing/stock values exposed as properties, never stored
- PROTECT on the category foreign key (restrict-delete)
- Composite indexes for the listing query pattern
- Bilingual (English/Arabic) text fields side by side
"""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.core.models import BaseModel, TimeStampedModel
from . import pricing


class Category(BaseModel):
    """Product category with homepage visibility."""
    slug = models.SlugField(max_length=100, unique=True)
    name = models.CharField(max_length=100, db_index=True)
    name_ar = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    description_ar = models.TextField(blank=True)
    image_path = models.CharField(max_length=500, blank=True)

    is_active = models.BooleanField(default=True, db_index=True)
    is_displayed_on_homepage = models.BooleanField(default=True)

    class Meta:
        db_table = 'categories'
        verbose_name_plural = 'Categories'
        ordering = ['display_order', 'name']

    def __str__(self):
        return self.name


class Product(BaseModel):
    """
    Coffee product.

    Pricing and stock live on the variants; use `pricing.resolve_pricing`
    (or the `pricing_summary` property) to get the representative values.
    """
    sku = models.CharField(max_length=100, unique=True, db_index=True)
    name = models.CharField(max_length=200, db_index=True)
    name_ar = models.CharField(max_length=200, blank=True)
    description = models.TextField(blank=True)
    description_ar = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    notes_ar = models.TextField(blank=True)
    aromatic_profile = models.CharField(max_length=500, blank=True)
    aromatic_profile_ar = models.CharField(max_length=500, blank=True)
    intensity = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(10)]
    )

    # Coffee attributes (free text)
    origin = models.CharField(max_length=100, blank=True)
    roast_level = models.CharField(max_length=50, blank=True)
    process = models.CharField(max_length=50, blank=True)

    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,  # Categories with products cannot be deleted
        related_name='products'
    )

    # Status
    is_active = models.BooleanField(default=True, db_index=True)
    is_featured = models.BooleanField(default=False, db_index=True)
    is_digital = models.BooleanField(default=False)

    class Meta:
        db_table = 'products'
        ordering = ['display_order', 'name']
        indexes = [
            models.Index(fields=['category', 'is_active'], name='products_category_active_idx'),
            models.Index(fields=['is_featured', 'is_active'], name='products_featured_active_idx'),
            models.Index(fields=['is_active', 'display_order', 'name'], name='products_listing_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def active_variants(self):
        """Active variants, honouring a prefetch when one is present."""
        return [v for v in self.variants.all() if v.is_active]

    @property
    def pricing_summary(self):
        return pricing.resolve_pricing(self.active_variants)

    @property
    def rating_summary(self):
        return pricing.summarize_reviews(self.reviews.all())

    @property
    def main_image(self):
        return next((img for img in self.images.all() if img.is_main), None)


class ProductVariant(BaseModel):
    """
    A purchasable weight/price/stock configuration of a product.

    `is_default` is not enforced unique at the database level;
    `services.set_default_variant` keeps a single default per product.
    """
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name='variants'
    )
    variant_sku = models.CharField(max_length=100, unique=True, db_index=True)

    weight = models.DecimalField(max_digits=10, decimal_places=3)
    weight_unit = models.CharField(max_length=10, default='g')

    # Pricing in OMR (three decimal places)
    price = models.DecimalField(max_digits=10, decimal_places=3)
    discount_price = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        null=True,
        blank=True,
        help_text="Only counts as a discount when lower than the price"
    )

    # Dimensions in centimeters
    length = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    width = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    height = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)

    # Inventory
    stock_quantity = models.PositiveIntegerField(default=0)
    low_stock_threshold = models.PositiveIntegerField(default=5)

    is_active = models.BooleanField(default=True, db_index=True)
    is_default = models.BooleanField(default=False)

    class Meta:
        db_table = 'product_variants'
        ordering = ['display_order', 'id']
        indexes = [
            models.Index(fields=['product', 'is_active'], name='variants_product_active_idx'),
        ]

    def __str__(self):
        return f"{self.variant_sku} ({self.weight}{self.weight_unit})"

    @property
    def effective_price(self):
        return pricing.effective_price(self)

    @property
    def has_discount(self):
        return pricing.has_discount(self)

    @property
    def discount_percentage(self):
        return pricing.discount_percentage(self)

    @property
    def is_in_stock(self):
        return pricing.is_in_stock(self)

    @property
    def is_low_stock(self):
        return pricing.is_low_stock(self)


class ProductImage(TimeStampedModel):
    """Product image metadata. Files are stored outside the database."""
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name='images'
    )
    file_name = models.CharField(max_length=255, blank=True)
    image_path = models.CharField(max_length=500)
    alt_text = models.CharField(max_length=255, blank=True)
    alt_text_ar = models.CharField(max_length=255, blank=True)
    is_main = models.BooleanField(default=False)
    display_order = models.IntegerField(default=0)
    file_size = models.PositiveIntegerField(default=0)
    width = models.PositiveIntegerField(null=True, blank=True)
    height = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        db_table = 'product_images'
        ordering = ['display_order', 'id']

    def __str__(self):
        return f"Image for {self.product.name}"


class ProductReview(TimeStampedModel):
    """Customer review. Only approved reviews count towards ratings."""
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name='reviews'
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviews'
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    title = models.CharField(max_length=200, blank=True)
    title_ar = models.CharField(max_length=200, blank=True)
    content = models.TextField(blank=True)
    content_ar = models.TextField(blank=True)
    customer_name = models.CharField(max_length=100)
    customer_email = models.EmailField()

    # Moderation
    is_approved = models.BooleanField(default=False, db_index=True)
    is_featured = models.BooleanField(default=False)
    admin_notes = models.TextField(blank=True)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_reviews'
    )
    approved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'product_reviews'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['product', 'is_approved'], name='reviews_product_approved_idx'),
        ]

    def __str__(self):
        return f"{self.rating}* review of {self.product.name} by {self.customer_name}"
