"""
Variant pricing resolver.

Pure functions deriving the price/stock values a product exposes from its
variants, and the rating aggregates from its reviews. Nothing here touches
the database: inputs are any objects with the variant (or review)
attributes, so model instances and plain test doubles both work.

All functions are total. Missing data maps to zero-valued defaults
(no price, zero stock, zero rating) instead of raising.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, Optional, Sequence

ZERO = Decimal('0')
HUNDRED = Decimal('100')


def _decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def effective_price(variant) -> Decimal:
    """Discount price when present, otherwise the list price."""
    discount = _decimal(variant.discount_price)
    return discount if discount is not None else _decimal(variant.price)


def has_discount(variant) -> bool:
    discount = _decimal(variant.discount_price)
    return discount is not None and discount < _decimal(variant.price)


def discount_percentage(variant) -> Decimal:
    """Percentage off the list price, or 0 when there is no discount."""
    if not has_discount(variant):
        return ZERO
    price = _decimal(variant.price)
    return (price - _decimal(variant.discount_price)) / price * HUNDRED


def is_in_stock(variant) -> bool:
    return variant.stock_quantity > 0


def is_low_stock(variant) -> bool:
    return 0 < variant.stock_quantity <= variant.low_stock_threshold


def select_default_variant(variants: Iterable):
    """
    Pick the variant representing a product in list views.

    First variant flagged `is_default`, else the first one in the
    collection's order, else None.
    """
    variants = list(variants)
    for variant in variants:
        if variant.is_default:
            return variant
    return variants[0] if variants else None


@dataclass(frozen=True)
class PricingSummary:
    """Representative pricing/stock values for a product."""
    price: Optional[Decimal] = None
    discount_price: Optional[Decimal] = None
    effective_price: Optional[Decimal] = None
    has_discount: bool = False
    discount_percentage: Decimal = ZERO
    weight: Optional[Decimal] = None
    weight_unit: Optional[str] = None
    stock_quantity: int = 0
    is_in_stock: bool = False
    is_low_stock: bool = False
    default_variant_id: Optional[int] = None


EMPTY_PRICING = PricingSummary()


def resolve_pricing(variants: Iterable) -> PricingSummary:
    """Derive the product-level pricing fields from its default variant."""
    variant = select_default_variant(variants)
    if variant is None:
        return EMPTY_PRICING

    return PricingSummary(
        price=_decimal(variant.price),
        discount_price=_decimal(variant.discount_price),
        effective_price=effective_price(variant),
        has_discount=has_discount(variant),
        discount_percentage=discount_percentage(variant),
        weight=_decimal(getattr(variant, 'weight', None)),
        weight_unit=getattr(variant, 'weight_unit', None),
        stock_quantity=variant.stock_quantity,
        is_in_stock=is_in_stock(variant),
        is_low_stock=is_low_stock(variant),
        default_variant_id=getattr(variant, 'id', None),
    )


def resolved_price(variants: Iterable) -> Optional[Decimal]:
    """Effective price of the default variant, or None without variants."""
    return resolve_pricing(variants).effective_price


def min_effective_price(variants: Iterable) -> Optional[Decimal]:
    """Lowest effective price among active variants."""
    prices = [effective_price(v) for v in variants if v.is_active]
    return min(prices) if prices else None


def total_stock(variants: Iterable) -> int:
    """Sum of stock across active variants."""
    return sum(v.stock_quantity for v in variants if v.is_active)


@dataclass(frozen=True)
class RatingSummary:
    average_rating: Decimal = ZERO
    review_count: int = 0
    rating_breakdown: Dict[int, int] = field(default_factory=dict)


def summarize_reviews(reviews: Sequence) -> RatingSummary:
    """
    Aggregate approved reviews.

    Unapproved reviews are ignored. The breakdown always carries the
    five star values so clients can render empty bars.
    """
    ratings = [r.rating for r in reviews if r.is_approved]
    breakdown = {stars: 0 for stars in range(1, 6)}
    for rating in ratings:
        breakdown[rating] = breakdown.get(rating, 0) + 1

    if not ratings:
        return RatingSummary(rating_breakdown=breakdown)

    average = Decimal(sum(ratings)) / Decimal(len(ratings))
    return RatingSummary(
        average_rating=average,
        review_count=len(ratings),
        rating_breakdown=breakdown,
    )
