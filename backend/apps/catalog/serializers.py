"""
Catalog serializers.

Best practices demonstrated:
- Different serializers for list vs detail views
- Read-only computed pricing fields resolved from variants
- Plain Serializers for writes so uniqueness is decided by the service
  layer (409) instead of a model validator (400)
- Boundary validation for lengths, ranges and cross-field rules
"""

from decimal import Decimal

from rest_framework import serializers

from . import pricing
from .models import Category, Product, ProductImage, ProductReview, ProductVariant
from .query import DEFAULT_PAGE_SIZE, SearchSpec

MIN_PRICE = Decimal('0.001')
MAX_PRICE = Decimal('999.999')
MIN_WEIGHT = Decimal('1')
MAX_WEIGHT = Decimal('10000')


# ---------------------------------------------------------------------------
# Search parameters
# ---------------------------------------------------------------------------

class ProductSearchSerializer(serializers.Serializer):
    """
    Query-string parameters of the public product listing.

    Out-of-range paging values are clamped by the query engine; only
    values that are not numbers at all are rejected here.
    """
    query = serializers.CharField(required=False, allow_blank=True, max_length=200)
    category_id = serializers.IntegerField(required=False)
    category_slug = serializers.CharField(required=False, allow_blank=True, max_length=100)
    min_price = serializers.DecimalField(max_digits=10, decimal_places=3, required=False)
    max_price = serializers.DecimalField(max_digits=10, decimal_places=3, required=False)
    featured_only = serializers.BooleanField(required=False, default=False)
    in_stock_only = serializers.BooleanField(required=False, default=False)
    sort_by = serializers.CharField(required=False, allow_blank=True)
    sort_direction = serializers.CharField(required=False, allow_blank=True)
    page = serializers.IntegerField(required=False, default=1)
    page_size = serializers.IntegerField(required=False, default=DEFAULT_PAGE_SIZE)

    def to_spec(self) -> SearchSpec:
        return SearchSpec.build(**self.validated_data)


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

class CategorySerializer(serializers.ModelSerializer):
    """Category with the number of products it owns."""
    product_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = [
            'id', 'slug', 'name', 'name_ar', 'description', 'description_ar',
            'image_path', 'is_active', 'is_displayed_on_homepage',
            'display_order', 'product_count', 'created_at', 'updated_at',
        ]

    def get_product_count(self, obj):
        annotated = getattr(obj, 'product_count', None)
        if annotated is not None:
            return annotated
        return obj.products.count()


class CategorySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'slug', 'name', 'name_ar']


class CategoryWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    name_ar = serializers.CharField(max_length=100, required=False, allow_blank=True)
    slug = serializers.SlugField(max_length=100, required=False, allow_blank=True)
    description = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    description_ar = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    image_path = serializers.CharField(max_length=500, required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)
    is_displayed_on_homepage = serializers.BooleanField(required=False)
    display_order = serializers.IntegerField(required=False)


class CategoryReorderSerializer(serializers.Serializer):
    """`[{"id": 1, "display_order": 0}, ...]`"""
    id = serializers.IntegerField()
    display_order = serializers.IntegerField()


# ---------------------------------------------------------------------------
# Variants and images
# ---------------------------------------------------------------------------

class ProductVariantSerializer(serializers.ModelSerializer):
    effective_price = serializers.DecimalField(max_digits=10, decimal_places=3, read_only=True)
    has_discount = serializers.BooleanField(read_only=True)
    discount_percentage = serializers.DecimalField(max_digits=6, decimal_places=2, read_only=True)
    is_in_stock = serializers.BooleanField(read_only=True)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = ProductVariant
        fields = [
            'id', 'variant_sku', 'weight', 'weight_unit',
            'price', 'discount_price', 'effective_price',
            'has_discount', 'discount_percentage',
            'length', 'width', 'height',
            'stock_quantity', 'low_stock_threshold',
            'is_in_stock', 'is_low_stock',
            'is_active', 'is_default', 'display_order',
        ]


def _validate_discount(attrs):
    """Same-request check; stored values are checked again by the services."""
    price = attrs.get('price')
    discount = attrs.get('discount_price')
    if discount is not None and price is not None and discount >= price:
        raise serializers.ValidationError({
            'discount_price': 'Discount price must be less than the regular price.'
        })
    return attrs


class ProductVariantWriteSerializer(serializers.Serializer):
    variant_sku = serializers.CharField(max_length=100)
    weight = serializers.DecimalField(
        max_digits=10, decimal_places=3, min_value=MIN_WEIGHT, max_value=MAX_WEIGHT
    )
    weight_unit = serializers.CharField(max_length=10, required=False, default='g')
    price = serializers.DecimalField(
        max_digits=10, decimal_places=3, min_value=MIN_PRICE, max_value=MAX_PRICE
    )
    discount_price = serializers.DecimalField(
        max_digits=10, decimal_places=3, min_value=MIN_PRICE, max_value=MAX_PRICE,
        required=False, allow_null=True
    )
    length = serializers.DecimalField(max_digits=8, decimal_places=2, required=False, allow_null=True)
    width = serializers.DecimalField(max_digits=8, decimal_places=2, required=False, allow_null=True)
    height = serializers.DecimalField(max_digits=8, decimal_places=2, required=False, allow_null=True)
    stock_quantity = serializers.IntegerField(min_value=0, required=False, default=0)
    low_stock_threshold = serializers.IntegerField(min_value=0, required=False, default=5)
    is_active = serializers.BooleanField(required=False, default=True)
    is_default = serializers.BooleanField(required=False, default=False)
    display_order = serializers.IntegerField(required=False, default=0)

    def validate(self, attrs):
        return _validate_discount(attrs)


class ProductImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductImage
        fields = [
            'id', 'file_name', 'image_path', 'alt_text', 'alt_text_ar',
            'is_main', 'display_order', 'file_size', 'width', 'height',
        ]
        read_only_fields = ['id']


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

def _money(value):
    return None if value is None else str(value)


class ProductListSerializer(serializers.ModelSerializer):
    """
    Lightweight product card.

    Price and stock fields come from the default active variant and are
    recomputed on every read.
    """
    category_name = serializers.CharField(source='category.name', read_only=True)
    category_slug = serializers.CharField(source='category.slug', read_only=True)
    main_image = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            'id', 'sku', 'name', 'name_ar', 'origin', 'roast_level', 'process',
            'intensity', 'category_id', 'category_name', 'category_slug',
            'is_active', 'is_featured', 'display_order', 'main_image',
            'created_at', 'updated_at',
        ]

    def get_main_image(self, obj):
        image = obj.main_image
        return image.image_path if image else None

    def to_representation(self, instance):
        data = super().to_representation(instance)
        summary = instance.pricing_summary
        rating = instance.rating_summary
        data.update({
            'price': _money(summary.price),
            'discount_price': _money(summary.discount_price),
            'effective_price': _money(summary.effective_price),
            'has_discount': summary.has_discount,
            'discount_percentage': str(summary.discount_percentage.quantize(Decimal('0.01'))),
            'weight': _money(summary.weight),
            'weight_unit': summary.weight_unit,
            'stock_quantity': summary.stock_quantity,
            'is_in_stock': summary.is_in_stock,
            'is_low_stock': summary.is_low_stock,
            'default_variant_id': summary.default_variant_id,
            'average_rating': str(rating.average_rating.quantize(Decimal('0.01'))),
            'review_count': rating.review_count,
        })
        return data


class ProductDetailSerializer(ProductListSerializer):
    """Full product with category, active variants, images and ratings."""
    category = CategorySummarySerializer(read_only=True)
    variants = serializers.SerializerMethodField()
    images = ProductImageSerializer(many=True, read_only=True)
    rating_breakdown = serializers.SerializerMethodField()

    class Meta(ProductListSerializer.Meta):
        fields = ProductListSerializer.Meta.fields + [
            'description', 'description_ar', 'notes', 'notes_ar',
            'aromatic_profile', 'aromatic_profile_ar', 'is_digital',
            'category', 'variants', 'images', 'rating_breakdown',
        ]

    def get_variants(self, obj):
        variants = sorted(obj.active_variants, key=lambda v: (v.display_order, v.id))
        return ProductVariantSerializer(variants, many=True).data

    def get_rating_breakdown(self, obj):
        return {str(stars): count for stars, count in obj.rating_summary.rating_breakdown.items()}


class ProductAdminSerializer(ProductListSerializer):
    """Admin listing row: every variant, not only active ones."""
    variant_count = serializers.SerializerMethodField()
    min_price = serializers.SerializerMethodField()
    total_stock = serializers.SerializerMethodField()

    class Meta(ProductListSerializer.Meta):
        fields = ProductListSerializer.Meta.fields + ['variant_count', 'min_price', 'total_stock']

    def get_variant_count(self, obj):
        return len(obj.variants.all())

    def get_min_price(self, obj):
        return _money(pricing.min_effective_price(obj.variants.all()))

    def get_total_stock(self, obj):
        return pricing.total_stock(obj.variants.all())


class ProductWriteSerializer(serializers.Serializer):
    """
    Create/update payload: product fields plus default-variant pricing.

    On partial updates only the supplied fields are validated.
    """
    sku = serializers.CharField(max_length=50)
    name = serializers.CharField(max_length=200)
    name_ar = serializers.CharField(max_length=200, required=False, allow_blank=True)
    description = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    description_ar = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    notes_ar = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    aromatic_profile = serializers.CharField(max_length=500, required=False, allow_blank=True)
    aromatic_profile_ar = serializers.CharField(max_length=500, required=False, allow_blank=True)
    intensity = serializers.IntegerField(min_value=1, max_value=10, required=False, allow_null=True)
    origin = serializers.CharField(max_length=100, required=False, allow_blank=True)
    roast_level = serializers.CharField(max_length=50, required=False, allow_blank=True)
    process = serializers.CharField(max_length=50, required=False, allow_blank=True)
    category_id = serializers.IntegerField()
    is_active = serializers.BooleanField(required=False)
    is_featured = serializers.BooleanField(required=False)
    is_digital = serializers.BooleanField(required=False)
    display_order = serializers.IntegerField(required=False)

    # Default variant
    price = serializers.DecimalField(
        max_digits=10, decimal_places=3, min_value=MIN_PRICE, max_value=MAX_PRICE
    )
    discount_price = serializers.DecimalField(
        max_digits=10, decimal_places=3, min_value=MIN_PRICE, max_value=MAX_PRICE,
        required=False, allow_null=True
    )
    weight = serializers.DecimalField(
        max_digits=10, decimal_places=3, min_value=MIN_WEIGHT, max_value=MAX_WEIGHT,
        required=False
    )
    weight_unit = serializers.CharField(max_length=10, required=False)
    stock_quantity = serializers.IntegerField(min_value=0, required=False)
    low_stock_threshold = serializers.IntegerField(min_value=0, required=False)

    def validate(self, attrs):
        return _validate_discount(attrs)


class StockUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=0)


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------

class ProductReviewSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductReview
        fields = [
            'id', 'product_id', 'rating', 'title', 'title_ar',
            'content', 'content_ar', 'customer_name',
            'is_approved', 'is_featured', 'created_at',
        ]


class ProductReviewAdminSerializer(ProductReviewSerializer):
    class Meta(ProductReviewSerializer.Meta):
        fields = ProductReviewSerializer.Meta.fields + [
            'customer_email', 'admin_notes', 'approved_by', 'approved_at',
        ]


class ReviewSubmitSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    title = serializers.CharField(max_length=200, required=False, allow_blank=True)
    content = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    customer_name = serializers.CharField(max_length=100)
    customer_email = serializers.EmailField()


class ReviewRejectSerializer(serializers.Serializer):
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)
