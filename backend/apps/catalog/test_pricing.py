"""
Tests for the variant pricing resolver.

These run without a database: variants and reviews are plain
SimpleNamespace objects carrying the attributes the resolver reads.
"""

from decimal import Decimal
from types import SimpleNamespace

from . import pricing


def variant(price='10.000', discount_price=None, stock=10, threshold=5,
            is_active=True, is_default=False, id=None, weight='250'):
    return SimpleNamespace(
        id=id,
        price=Decimal(price),
        discount_price=Decimal(discount_price) if discount_price is not None else None,
        stock_quantity=stock,
        low_stock_threshold=threshold,
        is_active=is_active,
        is_default=is_default,
        weight=Decimal(weight),
        weight_unit='g',
    )


def review(rating, is_approved=True):
    return SimpleNamespace(rating=rating, is_approved=is_approved)


class TestVariantDerivedFields:
    """Per-variant derived values."""

    def test_discounted_variant(self):
        v = variant(price='10.000', discount_price='8.000')
        assert pricing.effective_price(v) == Decimal('8.000')
        assert pricing.has_discount(v) is True
        assert pricing.discount_percentage(v) == Decimal('20')

    def test_variant_without_discount(self):
        v = variant(price='10.000')
        assert pricing.effective_price(v) == Decimal('10.000')
        assert pricing.has_discount(v) is False
        assert pricing.discount_percentage(v) == 0

    def test_discount_not_lower_than_price_is_not_a_discount(self):
        v = variant(price='10.000', discount_price='12.000')
        assert pricing.has_discount(v) is False
        assert pricing.discount_percentage(v) == 0
        # Effective price still follows the discount price when present.
        assert pricing.effective_price(v) == Decimal('12.000')

    def test_discount_percentage_keeps_decimal_precision(self):
        v = variant(price='3.000', discount_price='2.000')
        expected = (Decimal('3.000') - Decimal('2.000')) / Decimal('3.000') * 100
        assert pricing.discount_percentage(v) == expected

    def test_stock_flags(self):
        assert pricing.is_in_stock(variant(stock=1)) is True
        assert pricing.is_in_stock(variant(stock=0)) is False

        assert pricing.is_low_stock(variant(stock=5, threshold=5)) is True
        assert pricing.is_low_stock(variant(stock=1, threshold=5)) is True
        assert pricing.is_low_stock(variant(stock=6, threshold=5)) is False
        assert pricing.is_low_stock(variant(stock=0, threshold=5)) is False


class TestDefaultVariantSelection:

    def test_first_flagged_default_wins(self):
        first = variant(id=1)
        flagged = variant(id=2, is_default=True)
        also_flagged = variant(id=3, is_default=True)
        assert pricing.select_default_variant([first, flagged, also_flagged]) is flagged

    def test_falls_back_to_first_in_order(self):
        first, second = variant(id=1), variant(id=2)
        assert pricing.select_default_variant([first, second]) is first

    def test_empty_collection(self):
        assert pricing.select_default_variant([]) is None


class TestResolvePricing:

    def test_product_without_variants_has_no_price(self):
        """Zero variants resolve to an absent price and zero stock."""
        summary = pricing.resolve_pricing([])
        assert summary.price is None
        assert summary.effective_price is None
        assert summary.stock_quantity == 0
        assert summary.is_in_stock is False
        assert summary.has_discount is False
        assert summary.discount_percentage == 0

    def test_summary_comes_from_default_variant(self):
        variants = [
            variant(id=1, price='12.000'),
            variant(id=2, price='10.000', discount_price='8.000', stock=3, is_default=True),
        ]
        summary = pricing.resolve_pricing(variants)
        assert summary.default_variant_id == 2
        assert summary.price == Decimal('10.000')
        assert summary.effective_price == Decimal('8.000')
        assert summary.has_discount is True
        assert summary.discount_percentage == Decimal('20')
        assert summary.stock_quantity == 3
        assert summary.is_low_stock is True

    def test_resolved_price(self):
        assert pricing.resolved_price([]) is None
        assert pricing.resolved_price([variant(price='7.500')]) == Decimal('7.500')

    def test_min_price_and_total_stock_ignore_inactive_variants(self):
        variants = [
            variant(price='4.000', stock=2, is_active=False),
            variant(price='6.000', discount_price='5.000', stock=3),
            variant(price='9.000', stock=4),
        ]
        assert pricing.min_effective_price(variants) == Decimal('5.000')
        assert pricing.total_stock(variants) == 7


class TestSummarizeReviews:

    def test_no_reviews(self):
        summary = pricing.summarize_reviews([])
        assert summary.average_rating == 0
        assert summary.review_count == 0
        assert summary.rating_breakdown == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}

    def test_only_approved_reviews_count(self):
        reviews = [review(5), review(4), review(1, is_approved=False)]
        summary = pricing.summarize_reviews(reviews)
        assert summary.review_count == 2
        assert summary.average_rating == Decimal('4.5')
        assert summary.rating_breakdown[5] == 1
        assert summary.rating_breakdown[4] == 1
        assert summary.rating_breakdown[1] == 0

    def test_only_unapproved_reviews(self):
        summary = pricing.summarize_reviews([review(3, is_approved=False)])
        assert summary.average_rating == 0
        assert summary.review_count == 0
