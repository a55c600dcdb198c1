"""
django-filter FilterSets for the admin product listing.
"""

import django_filters
from django.db.models import Exists, OuterRef, Q

from .models import Product, ProductVariant

STATUS_CHOICES = (
    ('active', 'Active'),
    ('inactive', 'Inactive'),
    ('outofstock', 'Out of stock'),
)


class ProductAdminFilter(django_filters.FilterSet):
    """
    Admin product filters.

    `status=outofstock` matches products without any active variant
    carrying stock.
    """
    search = django_filters.CharFilter(method='filter_search')
    status = django_filters.ChoiceFilter(choices=STATUS_CHOICES, method='filter_status')
    category_id = django_filters.NumberFilter(field_name='category_id')

    class Meta:
        model = Product
        fields = ['search', 'status', 'category_id', 'is_featured']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) | Q(name_ar__icontains=value) | Q(sku__icontains=value)
        )

    def filter_status(self, queryset, name, value):
        if value == 'active':
            return queryset.filter(is_active=True)
        if value == 'inactive':
            return queryset.filter(is_active=False)
        if value == 'outofstock':
            stocked = ProductVariant.objects.filter(
                product=OuterRef('pk'),
                is_active=True,
                stock_quantity__gt=0,
            )
            return queryset.filter(~Exists(stocked))
        return queryset
