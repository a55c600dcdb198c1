"""Catalog admin configuration."""

from django.contrib import admin
from .models import Category, Product, ProductImage, ProductReview, ProductVariant


class ProductVariantInline(admin.TabularInline):
    """Inline for product variants."""
    model = ProductVariant
    extra = 0
    fields = [
        'variant_sku', 'weight', 'weight_unit', 'price', 'discount_price',
        'stock_quantity', 'low_stock_threshold', 'is_active', 'is_default',
    ]


class ProductImageInline(admin.TabularInline):
    """Inline for product images."""
    model = ProductImage
    extra = 0


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'is_active', 'is_displayed_on_homepage', 'display_order']
    list_filter = ['is_active', 'is_displayed_on_homepage']
    search_fields = ['name', 'name_ar', 'slug']
    prepopulated_fields = {'slug': ('name',)}


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """
    Product admin.

    Deleting from here goes through the database cascade; the API
    delete endpoint applies the stock guard.
    """
    list_display = ['name', 'sku', 'category', 'is_active', 'is_featured', 'display_order', 'created_at']
    list_filter = ['is_active', 'is_featured', 'category']
    search_fields = ['name', 'name_ar', 'sku']
    list_select_related = ['category']
    inlines = [ProductVariantInline, ProductImageInline]
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('sku', 'name', 'name_ar', 'category')
        }),
        ('Description', {
            'fields': ('description', 'description_ar', 'notes', 'notes_ar')
        }),
        ('Coffee', {
            'fields': ('origin', 'roast_level', 'process', 'intensity',
                       'aromatic_profile', 'aromatic_profile_ar')
        }),
        ('Status', {
            'fields': ('is_active', 'is_featured', 'is_digital', 'display_order')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(ProductReview)
class ProductReviewAdmin(admin.ModelAdmin):
    list_display = ['product', 'customer_name', 'rating', 'is_approved', 'created_at']
    list_filter = ['is_approved', 'rating']
    search_fields = ['customer_name', 'customer_email', 'product__name']
    raw_id_fields = ['product', 'user', 'approved_by']
