"""
Tests for the catalog app.

Best practices demonstrated:
- Use pytest fixtures
- Use factory_boy for test data
- Test services and API endpoints separately
- Test the guarded deletes and the error envelope
"""

from decimal import Decimal
from unittest.mock import patch

import pytest
from django.core import mail

from apps.core.exceptions import Conflict, IntegrityConflict, NotFound, ValidationFailed
from . import services
from .factories import (
    CategoryFactory,
    ProductFactory,
    ProductImageFactory,
    ProductReviewFactory,
    ProductVariantFactory,
)
from .models import Product, ProductImage, ProductReview, ProductVariant
from .tasks import low_stock_variants, report_low_stock, warm_featured_cache


def make_product(name, price='5.000', stock=10, category=None, **kwargs):
    """Product with a single default variant."""
    product = ProductFactory(
        name=name,
        category=category or CategoryFactory(),
        **kwargs
    )
    ProductVariantFactory(
        product=product,
        price=Decimal(price),
        stock_quantity=stock,
        is_default=True,
    )
    return product


@pytest.fixture
def category(db):
    return CategoryFactory(name='Single Origin', slug='single-origin')


@pytest.fixture
def product(db, category):
    return make_product('Ethiopia Yirgacheffe', price='6.500', category=category, sku='ETH-001')


@pytest.mark.django_db
class TestProductServices:
    """Product writes and their business rules."""

    def test_create_product_creates_default_variant(self, category):
        product = services.create_product({
            'sku': 'COL-001',
            'name': 'Colombia Huila',
            'category_id': category.id,
            'price': Decimal('4.750'),
            'weight': Decimal('250.000'),
            'weight_unit': 'g',
            'stock_quantity': 12,
        })

        variant = product.variants.get()
        assert variant.variant_sku == 'COL-001-250g'
        assert variant.is_default
        assert variant.stock_quantity == 12
        assert product.pricing_summary.effective_price == Decimal('4.750')

    def test_create_product_rejects_duplicate_sku(self, product, category):
        with pytest.raises(IntegrityConflict) as excinfo:
            services.create_product({
                'sku': 'ETH-001',
                'name': 'Another',
                'category_id': category.id,
                'price': Decimal('3.000'),
            })
        assert excinfo.value.field == 'sku'

    def test_create_product_requires_existing_category(self):
        with pytest.raises(NotFound):
            services.create_product({
                'sku': 'NOPE-1',
                'name': 'Orphan',
                'category_id': 999,
                'price': Decimal('3.000'),
            })

    def test_update_product_reprices_default_variant(self, product):
        services.update_product(product.id, {'price': Decimal('7.000'), 'discount_price': Decimal('6.000')})

        variant = ProductVariant.objects.get(product=product)
        assert variant.price == Decimal('7.000')
        assert variant.effective_price == Decimal('6.000')

    def test_update_product_recreates_default_variant_when_none_left(self, product):
        product.variants.all().delete()

        services.update_product(product.id, {'price': Decimal('5.000')})

        variant = ProductVariant.objects.get(product=product)
        assert variant.variant_sku == 'ETH-001-250g'
        assert variant.weight == Decimal('250')
        assert variant.is_default
        assert variant.is_active

    def test_update_product_without_variants_requires_price(self, product):
        product.variants.all().delete()

        with pytest.raises(ValidationFailed) as excinfo:
            services.update_product(product.id, {'weight': Decimal('500')})

        assert 'price' in excinfo.value.errors
        assert not ProductVariant.objects.filter(product=product).exists()

    def test_update_product_checks_discount_against_stored_price(self, product):
        with pytest.raises(ValidationFailed) as excinfo:
            services.update_product(product.id, {'discount_price': Decimal('9.000')})

        assert 'discount_price' in excinfo.value.errors
        assert ProductVariant.objects.get(product=product).discount_price is None

    def test_update_variant_checks_discount_against_stored_price(self, product):
        variant = product.variants.get()

        with pytest.raises(ValidationFailed):
            services.update_variant(variant.id, {'discount_price': Decimal('6.500')})

        services.update_variant(variant.id, {'discount_price': Decimal('6.000')})
        variant.refresh_from_db()
        assert variant.effective_price == Decimal('6.000')

    def test_update_stock_targets_active_default_variant(self, product):
        shown = product.variants.get()
        product.variants.update(is_default=False)
        hidden = ProductVariantFactory(product=product, is_active=False, is_default=True, stock_quantity=3)

        services.update_stock(product.id, 7)

        shown.refresh_from_db()
        hidden.refresh_from_db()
        assert shown.stock_quantity == 7
        assert hidden.stock_quantity == 3

    def test_update_stock_without_active_variants(self, product):
        product.variants.update(is_active=False)

        with pytest.raises(NotFound):
            services.update_stock(product.id, 4)

    def test_delete_rejected_while_inactive_variant_has_stock(self, product):
        ProductVariantFactory(product=product, is_active=False, stock_quantity=3)
        product.variants.filter(is_active=True).update(stock_quantity=0)

        with pytest.raises(Conflict) as excinfo:
            services.delete_product(product.id)

        assert 'clear stock first' in excinfo.value.message
        assert Product.objects.filter(pk=product.id).exists()

    def test_delete_removes_children(self, product):
        product.variants.update(stock_quantity=0)
        ProductImageFactory(product=product)
        ProductReviewFactory(product=product)

        counts = services.delete_product(product.id)

        assert counts == {'reviews': 1, 'images': 1, 'variants': 1}
        assert not Product.objects.filter(pk=product.id).exists()
        assert not ProductVariant.objects.exists()
        assert not ProductImage.objects.exists()
        assert not ProductReview.objects.exists()

    def test_update_stock_rejects_negative_quantity(self, product):
        with pytest.raises(ValidationFailed):
            services.update_stock(product.id, -1)

    def test_set_default_variant_clears_other_defaults(self, product):
        second = ProductVariantFactory(product=product)

        services.set_default_variant(second.id)

        defaults = list(product.variants.filter(is_default=True))
        assert defaults == [second]

    def test_set_main_image_keeps_one_main(self, product):
        first = ProductImageFactory(product=product, is_main=True)
        second = ProductImageFactory(product=product)

        services.set_main_image(second.id)

        first.refresh_from_db()
        assert not first.is_main
        assert ProductImage.objects.get(is_main=True) == second


@pytest.mark.django_db
class TestCategoryServices:
    """Slug generation and the restrict-delete rule."""

    def test_generate_slug(self):
        assert services.generate_slug('Single Origin & Blends') == 'single-origin-and-blends'
        assert services.generate_slug('!!!') == 'category'

    def test_generate_unique_slug_adds_suffix(self, category):
        assert services.generate_unique_slug('Single Origin') == 'single-origin-1'

        CategoryFactory(slug='single-origin-1')
        assert services.generate_unique_slug('Single Origin') == 'single-origin-2'

    def test_create_category_rejects_taken_slug(self, category):
        with pytest.raises(IntegrityConflict):
            services.create_category({'name': 'Other', 'slug': 'single-origin'})

    def test_delete_rejected_while_category_has_products(self, product, category):
        with pytest.raises(Conflict):
            services.delete_category(category.id)

        product.variants.update(stock_quantity=0)
        services.delete_product(product.id)
        services.delete_category(category.id)

        assert not type(category).objects.filter(pk=category.id).exists()

    def test_filter_categories_by_status(self, category):
        hidden = CategoryFactory(name='Hidden', is_displayed_on_homepage=False)
        inactive = CategoryFactory(name='Retired', is_active=False)

        assert list(services.filter_categories(status='hidden')) == [hidden]
        assert list(services.filter_categories(status='inactive')) == [inactive]
        assert list(services.filter_categories(search='single')) == [category]

    def test_reorder_skips_unknown_ids(self, category):
        assert services.reorder_categories({category.id: 7, 999: 1}) == 1
        category.refresh_from_db()
        assert category.display_order == 7


@pytest.mark.django_db
class TestProductListingAPI:
    """Public listing: search, filters, sorting and the page envelope."""

    @pytest.fixture
    def catalog(self, category):
        return [
            make_product('Brazil Santos', price='3.000', category=category),
            make_product('Colombia Huila', price='4.500', stock=0, category=category),
            make_product('Ethiopia Yirgacheffe', price='6.500', category=category, is_featured=True),
        ]

    def test_list_envelope(self, api_client, catalog):
        response = api_client.get('/api/v1/products/', {'page_size': 2})

        assert response.status_code == 200
        assert response.data['total_items'] == 3
        assert response.data['total_pages'] == 2
        assert response.data['current_page'] == 1
        assert response.data['has_next_page'] is True
        assert response.data['has_previous_page'] is False
        assert len(response.data['items']) == 2

    def test_search_is_case_insensitive(self, api_client, catalog):
        response = api_client.get('/api/v1/products/', {'query': 'ETHIOPIA'})

        assert [p['name'] for p in response.data['items']] == ['Ethiopia Yirgacheffe']

    def test_in_stock_and_price_filters(self, api_client, catalog):
        response = api_client.get('/api/v1/products/', {'in_stock_only': 'true', 'max_price': '5'})

        assert [p['name'] for p in response.data['items']] == ['Brazil Santos']

    def test_sort_by_name_desc(self, api_client, catalog):
        response = api_client.get('/api/v1/products/', {'sort_by': 'name', 'sort_direction': 'desc'})

        assert [p['name'] for p in response.data['items']] == [
            'Ethiopia Yirgacheffe', 'Colombia Huila', 'Brazil Santos',
        ]

    def test_unknown_sort_falls_back_to_display_order(self, api_client, catalog):
        Product.objects.filter(name='Ethiopia Yirgacheffe').update(display_order=-1)
        services.invalidate_catalog_cache()

        response = api_client.get('/api/v1/products/', {'sort_by': 'price'})

        assert [p['name'] for p in response.data['items']] == [
            'Ethiopia Yirgacheffe', 'Brazil Santos', 'Colombia Huila',
        ]

    def test_out_of_range_page_returns_empty_items(self, api_client, catalog):
        response = api_client.get('/api/v1/products/', {'page': 9})

        assert response.status_code == 200
        assert response.data['items'] == []
        assert response.data['total_items'] == 3

    def test_inactive_products_are_hidden(self, api_client, catalog):
        Product.objects.filter(name='Brazil Santos').update(is_active=False)
        services.invalidate_catalog_cache()

        response = api_client.get('/api/v1/products/')

        assert response.data['total_items'] == 2

    def test_listing_is_cached_until_a_write(self, api_client, catalog, category):
        assert api_client.get('/api/v1/products/').data['total_items'] == 3

        # Direct ORM writes bypass invalidation, so the cached page is served.
        make_product('Kenya AA', category=category)
        assert api_client.get('/api/v1/products/').data['total_items'] == 3

        services.toggle_product_featured(catalog[0].id)
        assert api_client.get('/api/v1/products/').data['total_items'] == 4

    def test_list_item_pricing_fields(self, api_client, category):
        product = make_product('Decaf', price='5.000', category=category)
        product.variants.update(discount_price=Decimal('4.000'))

        item = api_client.get('/api/v1/products/').data['items'][0]

        assert Decimal(item['price']) == Decimal('5')
        assert Decimal(item['effective_price']) == Decimal('4')
        assert item['has_discount'] is True
        assert item['discount_percentage'] == '20.00'
        assert item['average_rating'] == '0.00'

    def test_featured(self, api_client, catalog):
        response = api_client.get('/api/v1/products/featured/')

        assert response.status_code == 200
        assert [p['name'] for p in response.data] == ['Ethiopia Yirgacheffe']


@pytest.mark.django_db
class TestProductAPI:
    """Detail, admin writes and the error envelope."""

    def test_retrieve_product(self, api_client, product):
        ProductReviewFactory(product=product, rating=4)
        ProductReviewFactory(product=product, rating=5)
        ProductReviewFactory(product=product, rating=1, is_approved=False)

        response = api_client.get(f'/api/v1/products/{product.id}/')

        assert response.status_code == 200
        assert response.data['sku'] == 'ETH-001'
        assert response.data['review_count'] == 2
        assert response.data['average_rating'] == '4.50'
        assert response.data['rating_breakdown'] == {'1': 0, '2': 0, '3': 0, '4': 1, '5': 1}
        assert len(response.data['variants']) == 1

    def test_retrieve_by_sku(self, api_client, product):
        response = api_client.get('/api/v1/products/sku/ETH-001/')

        assert response.status_code == 200
        assert response.data['id'] == product.id

    def test_inactive_product_not_found(self, api_client, product):
        Product.objects.filter(pk=product.id).update(is_active=False)

        response = api_client.get(f'/api/v1/products/{product.id}/')

        assert response.status_code == 404
        assert response.data == {'success': False, 'message': 'Product not found.', 'errors': {}}

    def test_create_product_requires_admin(self, customer_client, category):
        response = customer_client.post('/api/v1/products/', {
            'sku': 'NEW-001',
            'name': 'New Product',
            'category_id': category.id,
            'price': '4.000',
        }, format='json')

        assert response.status_code == 403
        assert response.data['success'] is False

    def test_create_product(self, admin_client, category):
        response = admin_client.post('/api/v1/products/', {
            'sku': 'KEN-001',
            'name': 'Kenya AA',
            'category_id': category.id,
            'price': '5.500',
            'weight': '1000',
            'stock_quantity': 4,
        }, format='json')

        assert response.status_code == 201
        assert response.data['variants'][0]['variant_sku'] == 'KEN-001-1000g'
        assert response.data['is_low_stock'] is True

    def test_duplicate_sku_is_a_conflict(self, admin_client, product, category):
        response = admin_client.post('/api/v1/products/', {
            'sku': 'ETH-001',
            'name': 'Duplicate',
            'category_id': category.id,
            'price': '4.000',
        }, format='json')

        assert response.status_code == 409
        assert response.data == {
            'success': False,
            'message': 'SKU already exists.',
            'errors': {'sku': ['SKU already exists.']},
        }

    def test_create_validation_errors(self, admin_client, category):
        response = admin_client.post('/api/v1/products/', {
            'sku': 'X' * 51,
            'name': 'Too Expensive',
            'category_id': category.id,
            'price': '1000.000',
            'discount_price': '2.000',
        }, format='json')

        assert response.status_code == 400
        assert response.data['success'] is False
        assert response.data['message'] == 'Validation failed.'
        assert {'sku', 'price'} <= set(response.data['errors'])

    def test_discount_must_be_below_price(self, admin_client, category):
        response = admin_client.post('/api/v1/products/', {
            'sku': 'DISC-1',
            'name': 'Discounted',
            'category_id': category.id,
            'price': '4.000',
            'discount_price': '4.000',
        }, format='json')

        assert response.status_code == 400
        assert 'discount_price' in response.data['errors']

    def test_delete_guard(self, admin_client, product):
        ProductVariantFactory(product=product, is_active=False, stock_quantity=3)
        product.variants.filter(is_default=True).update(stock_quantity=0)

        response = admin_client.delete(f'/api/v1/products/{product.id}/')
        assert response.status_code == 409
        assert response.data['message'] == (
            'Cannot delete product that has variants with stock. Please clear stock first.'
        )

        product.variants.update(stock_quantity=0)
        response = admin_client.delete(f'/api/v1/products/{product.id}/')
        assert response.status_code == 204
        assert not Product.objects.filter(pk=product.id).exists()

    def test_update_stock(self, admin_client, product):
        response = admin_client.patch(f'/api/v1/products/{product.id}/stock/', {'quantity': 0}, format='json')

        assert response.status_code == 200
        assert response.data['stock_quantity'] == 0
        assert response.data['is_in_stock'] is False

        response = admin_client.patch(f'/api/v1/products/{product.id}/stock/', {'quantity': -5}, format='json')
        assert response.status_code == 400
        assert 'quantity' in response.data['errors']

    def test_patch_product_discount_above_stored_price(self, admin_client, product):
        response = admin_client.patch(f'/api/v1/products/{product.id}/', {'discount_price': '9.000'}, format='json')

        assert response.status_code == 400
        assert response.data['success'] is False
        assert 'discount_price' in response.data['errors']

        response = admin_client.patch(f'/api/v1/products/{product.id}/', {'discount_price': '5.000'}, format='json')
        assert response.status_code == 200
        assert ProductVariant.objects.get(product=product).effective_price == Decimal('5.000')

    def test_patch_variant_discount_above_stored_price(self, admin_client, product):
        variant = product.variants.get()

        response = admin_client.patch(f'/api/v1/variants/{variant.id}/', {'discount_price': '9.000'}, format='json')

        assert response.status_code == 400
        assert 'discount_price' in response.data['errors']
        variant.refresh_from_db()
        assert variant.discount_price is None
        assert variant.effective_price == Decimal('6.500')

    def test_toggle_status(self, admin_client, product):
        response = admin_client.patch(f'/api/v1/products/{product.id}/toggle-status/')

        assert response.status_code == 200
        assert response.data == {'id': product.id, 'is_active': False}

    def test_add_variant(self, admin_client, product):
        response = admin_client.post(f'/api/v1/products/{product.id}/variants/', {
            'variant_sku': 'ETH-001-1000g',
            'weight': '1000',
            'price': '20.000',
            'stock_quantity': 2,
        }, format='json')

        assert response.status_code == 201
        assert product.variants.count() == 2

        response = admin_client.get(f'/api/v1/products/{product.id}/variants/')
        assert len(response.data) == 2

    def test_admin_status_filter(self, admin_client, category):
        make_product('Alpha', category=category)
        make_product('Bravo', stock=0, category=category)
        charlie = make_product('Charlie', stock=0, category=category)
        ProductVariantFactory(product=charlie, is_active=False, stock_quantity=5)

        response = admin_client.get('/api/v1/products/admin/', {'status': 'outofstock'})

        assert response.status_code == 200
        assert [p['name'] for p in response.data['items']] == ['Bravo', 'Charlie']
        assert response.data['items'][1]['variant_count'] == 2
        assert response.data['items'][1]['total_stock'] == 0


@pytest.mark.django_db
class TestCategoryAPI:
    def test_list_active_categories_with_counts(self, api_client, product, category):
        CategoryFactory(name='Retired', is_active=False)

        response = api_client.get('/api/v1/categories/')

        assert response.status_code == 200
        assert [(c['slug'], c['product_count']) for c in response.data] == [('single-origin', 1)]

    def test_by_slug(self, api_client, category):
        response = api_client.get('/api/v1/categories/by-slug/single-origin/')

        assert response.status_code == 200
        assert response.data['id'] == category.id

    def test_create_generates_slug(self, admin_client):
        response = admin_client.post('/api/v1/categories/', {'name': 'Capsules & Pods'}, format='json')

        assert response.status_code == 201
        assert response.data['slug'] == 'capsules-and-pods'

    def test_delete_category_with_products_is_a_conflict(self, admin_client, product, category):
        response = admin_client.delete(f'/api/v1/categories/{category.id}/')

        assert response.status_code == 409
        assert response.data['success'] is False
        assert response.data['message'].startswith('Cannot delete category that contains products.')

    def test_reorder(self, admin_client, category):
        other = CategoryFactory(name='Blends')

        response = admin_client.post('/api/v1/categories/reorder/', [
            {'id': category.id, 'display_order': 2},
            {'id': other.id, 'display_order': 1},
        ], format='json')

        assert response.status_code == 200
        assert response.data == {'updated': 2}


@pytest.mark.django_db
class TestReviewAPI:
    def test_submitted_reviews_wait_for_approval(self, admin_client, product):
        response = admin_client.post(f'/api/v1/reviews/product/{product.id}/', {
            'rating': 4,
            'customer_name': 'Amal',
            'customer_email': 'amal@example.com',
            'content': 'Bright and floral.',
        }, format='json')
        assert response.status_code == 201
        assert response.data['is_approved'] is False
        review_id = response.data['id']

        response = admin_client.get(f'/api/v1/reviews/product/{product.id}/')
        assert response.data['review_count'] == 0
        assert response.data['items'] == []

        response = admin_client.patch(f'/api/v1/reviews/{review_id}/approve/')
        assert response.status_code == 200
        assert response.data['is_approved'] is True

        response = admin_client.get(f'/api/v1/reviews/product/{product.id}/')
        assert response.data['review_count'] == 1
        assert response.data['average_rating'] == '4.00'
        assert response.data['rating_breakdown']['4'] == 1

    def test_rating_out_of_range(self, api_client, product):
        response = api_client.post(f'/api/v1/reviews/product/{product.id}/', {
            'rating': 6,
            'customer_name': 'Amal',
            'customer_email': 'amal@example.com',
        }, format='json')

        assert response.status_code == 400
        assert 'rating' in response.data['errors']

    def test_moderation_queue_requires_admin(self, api_client):
        response = api_client.get('/api/v1/reviews/')

        assert response.status_code in (401, 403)


@pytest.mark.django_db
class TestCatalogTasks:
    def test_low_stock_variants(self, category):
        low = make_product('Low', stock=3, category=category)
        make_product('Plenty', stock=50, category=category)
        make_product('Empty', stock=0, category=category)

        assert [v.product_id for v in low_stock_variants()] == [low.id]

    def test_report_low_stock_sends_email(self, settings, category):
        settings.LOW_STOCK_ALERT_EMAIL = 'stock@example.com'
        make_product('Low', stock=2, category=category)

        result = report_low_stock()

        assert result['low_stock_count'] == 1
        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ['stock@example.com']

    def test_report_low_stock_without_recipient(self, category):
        make_product('Low', stock=2, category=category)

        with patch('apps.catalog.tasks.send_mail') as send_mail:
            result = report_low_stock()

        assert result['low_stock_count'] == 1
        send_mail.assert_not_called()

    def test_warm_featured_cache(self, api_client, category):
        make_product('Featured', category=category, is_featured=True)
        make_product('Regular', category=category)

        assert warm_featured_cache() == {'status': 'success', 'count': 1}
        assert len(api_client.get('/api/v1/products/featured/').data) == 1
