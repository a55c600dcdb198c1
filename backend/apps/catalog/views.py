"""
Catalog API views.

Best practices demonstrated:
- Thin views: validation in serializers, business rules in services
- Different serializers for list, detail and admin views
- Versioned response caching for the public listing and featured products
- Custom actions for state toggles and sub-resources
- Admin-only writes via IsAdminUser
"""

import logging
from decimal import Decimal

from django.db.models import Count, Prefetch
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response

from apps.core.pagination import StandardResultsSetPagination
from . import cache as catalog_cache
from . import services
from .filters import ProductAdminFilter
from .models import Product, ProductReview, ProductVariant
from .serializers import (
    CategoryReorderSerializer,
    CategorySerializer,
    CategorySummarySerializer,
    CategoryWriteSerializer,
    ProductAdminSerializer,
    ProductDetailSerializer,
    ProductImageSerializer,
    ProductListSerializer,
    ProductReviewAdminSerializer,
    ProductReviewSerializer,
    ProductSearchSerializer,
    ProductVariantSerializer,
    ProductVariantWriteSerializer,
    ProductWriteSerializer,
    ReviewRejectSerializer,
    ReviewSubmitSerializer,
    StockUpdateSerializer,
)

logger = logging.getLogger(__name__)

_CENTS = Decimal('0.01')


def page_payload(page, serialize):
    """Render a `query.Page` as the paginated response envelope."""
    return {
        'items': [serialize(item) for item in page.items],
        'current_page': page.current_page,
        'page_size': page.page_size,
        'total_items': page.total_items,
        'total_pages': page.total_pages,
        'has_previous_page': page.has_previous_page,
        'has_next_page': page.has_next_page,
    }


class ProductViewSet(viewsets.GenericViewSet):
    """
    Products.

    Public reads only see active products. Everything that changes state
    is admin only.
    """
    permission_classes = [AllowAny]
    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = ProductAdminFilter
    lookup_value_regex = r'\d+'

    admin_actions = {
        'create', 'update', 'partial_update', 'destroy', 'admin',
        'toggle_status', 'toggle_featured', 'stock', 'variants', 'images',
    }

    def get_queryset(self):
        if self.action == 'admin':
            return Product.objects.select_related('category').prefetch_related(
                Prefetch('variants', queryset=ProductVariant.objects.order_by('id')),
                Prefetch('reviews', queryset=ProductReview.objects.filter(is_approved=True)),
                'images',
            ).order_by('display_order', 'name')
        return services.catalog_queryset()

    def get_permissions(self):
        if self.action in self.admin_actions:
            return [IsAdminUser()]
        return super().get_permissions()

    def list(self, request):
        """
        Search, sort and paginate the catalog.

        Endpoint: GET /api/v1/products/
        """
        params = ProductSearchSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        spec = params.to_spec()

        def build():
            page = services.list_products(spec)
            return page_payload(page, lambda p: ProductListSerializer(p).data)

        return Response(catalog_cache.get_or_build(spec.cache_key, build))

    def retrieve(self, request, pk=None):
        product = services.get_product(pk, include_inactive=request.user.is_staff)
        return Response(ProductDetailSerializer(product).data)

    def create(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = services.create_product(serializer.validated_data)
        return Response(ProductDetailSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None, partial=False):
        serializer = ProductWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        product = services.update_product(pk, serializer.validated_data)
        return Response(ProductDetailSerializer(product).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk, partial=True)

    def destroy(self, request, pk=None):
        services.delete_product(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'], url_path=r'sku/(?P<sku>[^/]+)')
    def by_sku(self, request, sku=None):
        """Endpoint: GET /api/v1/products/sku/{sku}/"""
        product = services.get_product_by_sku(sku)
        return Response(ProductDetailSerializer(product).data)

    @action(detail=False, methods=['get'])
    def featured(self, request):
        """
        Featured products, cached until the next catalog write.

        Endpoint: GET /api/v1/products/featured/
        """
        count = _bounded_int(request.query_params.get('count'), default=8)

        def build():
            return ProductListSerializer(services.featured_products(count), many=True).data

        return Response(catalog_cache.get_or_build(f'{catalog_cache.FEATURED_KEY}:{count}', build))

    @action(detail=False, methods=['get'], url_path=r'category/(?P<category_id>\d+)')
    def by_category(self, request, category_id=None):
        """Endpoint: GET /api/v1/products/category/{category_id}/"""
        count = _bounded_int(request.query_params.get('count'), default=20)
        products = services.products_by_category(int(category_id), count)
        return Response(ProductListSerializer(products, many=True).data)

    @action(detail=False, methods=['get'])
    def admin(self, request):
        """
        Admin listing with status/search filters.

        Endpoint: GET /api/v1/products/admin/?status=active|inactive|outofstock
        """
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = ProductAdminSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(detail=True, methods=['patch'], url_path='toggle-status')
    def toggle_status(self, request, pk=None):
        product = services.toggle_product_status(pk)
        return Response({'id': product.id, 'is_active': product.is_active})

    @action(detail=True, methods=['patch'], url_path='toggle-featured')
    def toggle_featured(self, request, pk=None):
        product = services.toggle_product_featured(pk)
        return Response({'id': product.id, 'is_featured': product.is_featured})

    @action(detail=True, methods=['patch'])
    def stock(self, request, pk=None):
        """Endpoint: PATCH /api/v1/products/{id}/stock/"""
        serializer = StockUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        variant = services.update_stock(pk, serializer.validated_data['quantity'])
        return Response({
            'message': f'Stock updated to {variant.stock_quantity}',
            'variant_id': variant.id,
            'stock_quantity': variant.stock_quantity,
            'is_in_stock': variant.is_in_stock,
            'is_low_stock': variant.is_low_stock,
        })

    @action(detail=True, methods=['get', 'post'])
    def variants(self, request, pk=None):
        """All variants of a product, or add one."""
        if request.method == 'GET':
            product = services.get_product(pk, include_inactive=True)
            variants = ProductVariant.objects.filter(product=product)
            return Response(ProductVariantSerializer(variants, many=True).data)

        serializer = ProductVariantWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        variant = services.add_variant(pk, serializer.validated_data)
        return Response(ProductVariantSerializer(variant).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def images(self, request, pk=None):
        serializer = ProductImageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        image = services.add_image(pk, serializer.validated_data)
        return Response(ProductImageSerializer(image).data, status=status.HTTP_201_CREATED)


def _bounded_int(value, default, upper=100):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(1, min(number, upper))


class ProductVariantViewSet(viewsets.ViewSet):
    """Admin endpoints for a single variant."""
    permission_classes = [IsAdminUser]
    lookup_value_regex = r'\d+'

    def partial_update(self, request, pk=None):
        serializer = ProductVariantWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        variant = services.update_variant(pk, serializer.validated_data)
        return Response(ProductVariantSerializer(variant).data)

    def destroy(self, request, pk=None):
        services.delete_variant(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['patch'], url_path='set-default')
    def set_default(self, request, pk=None):
        variant = services.set_default_variant(pk)
        return Response(ProductVariantSerializer(variant).data)


class ProductImageViewSet(viewsets.ViewSet):
    """Admin endpoints for a single product image."""
    permission_classes = [IsAdminUser]
    lookup_value_regex = r'\d+'

    def destroy(self, request, pk=None):
        services.delete_image(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['patch'], url_path='set-main')
    def set_main(self, request, pk=None):
        image = services.set_main_image(pk)
        return Response(ProductImageSerializer(image).data)


class CategoryViewSet(viewsets.ViewSet):
    """
    Categories.

    Public endpoints list active categories ordered by display order then
    name; admin endpoints manage them.
    """
    permission_classes = [AllowAny]
    lookup_value_regex = r'\d+'

    admin_actions = {
        'create', 'update', 'partial_update', 'destroy', 'admin',
        'toggle_status', 'toggle_homepage', 'reorder',
    }

    def get_permissions(self):
        if self.action in self.admin_actions:
            return [IsAdminUser()]
        return super().get_permissions()

    def list(self, request):
        categories = services.active_categories().annotate(product_count=Count('products'))
        return Response(CategorySerializer(categories, many=True).data)

    def retrieve(self, request, pk=None):
        return Response(CategorySerializer(services.get_category(pk)).data)

    @action(detail=False, methods=['get'])
    def summaries(self, request):
        return Response(CategorySummarySerializer(services.active_categories(), many=True).data)

    @action(detail=False, methods=['get'], url_path=r'by-slug/(?P<slug>[-\w]+)')
    def by_slug(self, request, slug=None):
        return Response(CategorySerializer(services.get_category_by_slug(slug)).data)

    @action(detail=False, methods=['get'])
    def homepage(self, request):
        categories = services.homepage_categories().annotate(product_count=Count('products'))
        return Response(CategorySerializer(categories, many=True).data)

    @action(detail=False, methods=['get'])
    def admin(self, request):
        """Endpoint: GET /api/v1/categories/admin/?search=&status=active|inactive|homepage|hidden"""
        categories = services.filter_categories(
            search=request.query_params.get('search'),
            status=request.query_params.get('status'),
        ).annotate(product_count=Count('products'))
        return Response(CategorySerializer(categories, many=True).data)

    def create(self, request):
        serializer = CategoryWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        category = services.create_category(serializer.validated_data)
        return Response(CategorySerializer(category).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None, partial=False):
        serializer = CategoryWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        category = services.update_category(pk, serializer.validated_data)
        return Response(CategorySerializer(category).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk, partial=True)

    def destroy(self, request, pk=None):
        services.delete_category(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['patch'], url_path='toggle-status')
    def toggle_status(self, request, pk=None):
        category = services.toggle_category_status(pk)
        return Response({'id': category.id, 'is_active': category.is_active})

    @action(detail=True, methods=['patch'], url_path='toggle-homepage')
    def toggle_homepage(self, request, pk=None):
        category = services.toggle_category_homepage(pk)
        return Response({
            'id': category.id,
            'is_displayed_on_homepage': category.is_displayed_on_homepage,
        })

    @action(detail=False, methods=['post'])
    def reorder(self, request):
        serializer = CategoryReorderSerializer(data=request.data, many=True)
        serializer.is_valid(raise_exception=True)
        orders = {item['id']: item['display_order'] for item in serializer.validated_data}
        updated = services.reorder_categories(orders)
        return Response({'updated': updated})


class ReviewViewSet(viewsets.GenericViewSet):
    """Product reviews: public read/submit, admin moderation."""
    permission_classes = [AllowAny]
    pagination_class = StandardResultsSetPagination
    lookup_value_regex = r'\d+'

    def get_permissions(self):
        if self.action in {'list', 'approve', 'reject', 'destroy'}:
            return [IsAdminUser()]
        return super().get_permissions()

    def get_queryset(self):
        queryset = ProductReview.objects.select_related('product').order_by('-created_at')
        approved = self.request.query_params.get('is_approved')
        if approved is not None:
            queryset = queryset.filter(is_approved=approved.lower() in ('1', 'true'))
        return queryset

    def list(self, request):
        """Admin moderation queue. Endpoint: GET /api/v1/reviews/?is_approved=false"""
        page = self.paginate_queryset(self.get_queryset())
        return self.get_paginated_response(ProductReviewAdminSerializer(page, many=True).data)

    @action(detail=False, methods=['get', 'post'], url_path=r'product/(?P<product_id>\d+)')
    def product(self, request, product_id=None):
        """
        Approved reviews of a product with the rating summary, or submit one.

        Endpoint: GET|POST /api/v1/reviews/product/{product_id}/
        """
        if request.method == 'POST':
            serializer = ReviewSubmitSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            review = services.submit_review(int(product_id), serializer.validated_data, request.user)
            return Response(ProductReviewSerializer(review).data, status=status.HTTP_201_CREATED)

        page_number = _bounded_int(request.query_params.get('page'), default=1, upper=10 ** 6)
        page_size = _bounded_int(request.query_params.get('page_size'), default=10)
        page, summary = services.product_reviews(int(product_id), page_number, page_size)
        payload = page_payload(page, lambda r: ProductReviewSerializer(r).data)
        payload.update({
            'average_rating': str(summary.average_rating.quantize(_CENTS)),
            'review_count': summary.review_count,
            'rating_breakdown': {str(k): v for k, v in summary.rating_breakdown.items()},
        })
        return Response(payload)

    @action(detail=True, methods=['patch'])
    def approve(self, request, pk=None):
        review = services.approve_review(pk, approved_by=request.user)
        return Response(ProductReviewAdminSerializer(review).data)

    @action(detail=True, methods=['patch'])
    def reject(self, request, pk=None):
        serializer = ReviewRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = services.reject_review(pk, serializer.validated_data.get('notes', ''))
        return Response(ProductReviewAdminSerializer(review).data)

    def destroy(self, request, pk=None):
        services.delete_review(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
