"""
Cart service layer.

Quantities are validated against the variant's current stock; the unit
price stored on a line is the variant's effective price when the line was
created.
"""

import logging

from django.db import transaction

from apps.catalog.models import ProductVariant
from apps.catalog.pricing import effective_price
from apps.core.exceptions import NotFound, ValidationFailed
from .models import Cart, CartItem

logger = logging.getLogger(__name__)


def get_cart(user):
    cart, _ = Cart.objects.get_or_create(user=user)
    return (
        Cart.objects
        .prefetch_related('items__variant__product')
        .get(pk=cart.pk)
    )


def _purchasable_variant(variant_id):
    variant = (
        ProductVariant.objects.select_related('product')
        .filter(pk=variant_id)
        .first()
    )
    if variant is None:
        raise NotFound('Variant not found.')
    if not variant.is_active or not variant.product.is_active:
        raise ValidationFailed.for_field('variant_id', 'This item is not available.')
    return variant


def _check_stock(variant, quantity):
    if quantity > variant.stock_quantity:
        raise ValidationFailed.for_field(
            'quantity',
            f'Only {variant.stock_quantity} item(s) of {variant.variant_sku} in stock.'
        )


@transaction.atomic
def add_item(user, variant_id, quantity=1):
    """Add to the cart, merging with an existing line for the same variant."""
    if quantity < 1:
        raise ValidationFailed.for_field('quantity', 'Quantity must be at least 1.')

    variant = _purchasable_variant(variant_id)
    cart, _ = Cart.objects.get_or_create(user=user)
    item = CartItem.objects.select_for_update().filter(cart=cart, variant=variant).first()

    new_quantity = quantity + (item.quantity if item else 0)
    _check_stock(variant, new_quantity)

    if item is None:
        CartItem.objects.create(
            cart=cart,
            variant=variant,
            quantity=new_quantity,
            unit_price=effective_price(variant),
        )
    else:
        item.quantity = new_quantity
        item.save(update_fields=['quantity', 'updated_at'])

    cart.save(update_fields=['updated_at'])
    logger.info(f"Cart {cart.id}: {variant.variant_sku} x{new_quantity}")
    return get_cart(user)


@transaction.atomic
def update_quantity(user, variant_id, quantity):
    """Set a line's quantity; zero or less removes the line."""
    cart, _ = Cart.objects.get_or_create(user=user)
    item = CartItem.objects.select_for_update().select_related('variant').filter(
        cart=cart, variant_id=variant_id
    ).first()
    if item is None:
        raise NotFound('Item is not in the cart.')

    if quantity <= 0:
        item.delete()
    else:
        _check_stock(item.variant, quantity)
        item.quantity = quantity
        item.save(update_fields=['quantity', 'updated_at'])

    cart.save(update_fields=['updated_at'])
    return get_cart(user)


def remove_item(user, variant_id):
    cart, _ = Cart.objects.get_or_create(user=user)
    deleted, _ = CartItem.objects.filter(cart=cart, variant_id=variant_id).delete()
    if not deleted:
        raise NotFound('Item is not in the cart.')
    cart.save(update_fields=['updated_at'])
    return get_cart(user)


def clear_cart(user):
    cart, _ = Cart.objects.get_or_create(user=user)
    count, _ = cart.items.all().delete()
    cart.save(update_fields=['updated_at'])
    logger.info(f"Cleared cart {cart.id} ({count} line(s))")
    return get_cart(user)
