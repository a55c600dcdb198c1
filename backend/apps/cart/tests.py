"""
Tests for cart app.

Best practices for testing:
- Test business logic (stock limits, line merging)
- Test task execution
- Test permissions
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.catalog.factories import ProductVariantFactory
from apps.core.exceptions import NotFound, ValidationFailed
from . import services
from .models import Cart
from .tasks import purge_stale_carts


@pytest.fixture
def variant(db):
    return ProductVariantFactory(
        price=Decimal('8.000'),
        discount_price=Decimal('6.500'),
        stock_quantity=5,
        is_default=True,
    )


@pytest.mark.django_db
class TestCartServices:
    def test_add_item_uses_effective_price(self, customer, variant):
        cart = services.add_item(customer, variant.id, 2)

        item = cart.items.get()
        assert item.unit_price == Decimal('6.500')
        assert cart.total_price == Decimal('13.000')
        assert cart.item_count == 2

    def test_adding_same_variant_merges_lines(self, customer, variant):
        services.add_item(customer, variant.id, 1)
        cart = services.add_item(customer, variant.id, 2)

        assert cart.items.count() == 1
        assert cart.item_count == 3

    def test_cannot_exceed_stock(self, customer, variant):
        services.add_item(customer, variant.id, 4)

        with pytest.raises(ValidationFailed) as excinfo:
            services.add_item(customer, variant.id, 2)
        assert 'quantity' in excinfo.value.errors

    def test_inactive_variant_cannot_be_added(self, customer, variant):
        variant.is_active = False
        variant.save()

        with pytest.raises(ValidationFailed):
            services.add_item(customer, variant.id)

    def test_zero_quantity_removes_line(self, customer, variant):
        services.add_item(customer, variant.id, 2)

        cart = services.update_quantity(customer, variant.id, 0)

        assert cart.items.count() == 0

    def test_remove_missing_item(self, customer, variant):
        with pytest.raises(NotFound):
            services.remove_item(customer, variant.id)


@pytest.mark.django_db
class TestCartAPI:
    def test_cart_requires_authentication(self, api_client):
        response = api_client.get('/api/v1/cart/')

        assert response.status_code == 401

    def test_add_update_and_clear(self, customer_client, variant):
        response = customer_client.post('/api/v1/cart/items/', {'variant_id': variant.id, 'quantity': 2}, format='json')
        assert response.status_code == 201
        assert response.data['item_count'] == 2

        response = customer_client.patch(f'/api/v1/cart/items/{variant.id}/', {'quantity': 5}, format='json')
        assert response.status_code == 200
        assert response.data['items'][0]['quantity'] == 5

        response = customer_client.patch(f'/api/v1/cart/items/{variant.id}/', {'quantity': 6}, format='json')
        assert response.status_code == 400
        assert response.data['success'] is False

        response = customer_client.post('/api/v1/cart/clear/')
        assert response.status_code == 200
        assert response.data['items'] == []

    def test_unknown_variant(self, customer_client, db):
        response = customer_client.post('/api/v1/cart/items/', {'variant_id': 999}, format='json')

        assert response.status_code == 404
        assert response.data['message'] == 'Variant not found.'


@pytest.mark.django_db
class TestCartTasks:
    def test_purge_stale_carts(self, customer, admin_user):
        stale = Cart.objects.create(user=customer)
        Cart.objects.create(user=admin_user)
        Cart.objects.filter(pk=stale.pk).update(updated_at=timezone.now() - timedelta(days=45))

        result = purge_stale_carts(days=30)

        assert result['deleted_count'] == 1
        assert not Cart.objects.filter(pk=stale.pk).exists()
