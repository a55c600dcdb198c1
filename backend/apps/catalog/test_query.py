"""
Tests for the catalog query engine.

Products are plain objects, so filtering, sorting and pagination are
exercised without a database.
"""

import math
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from itertools import count
from types import SimpleNamespace

import pytest

from .query import (
    MAX_PAGE_SIZE,
    SearchSpec,
    SortDirection,
    SortKey,
    normalize_paging,
    paginate,
    search_catalog,
    sort_products,
    total_pages,
)

_ids = count(1)
BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def variant(price='10.000', discount_price=None, stock=10, is_active=True, is_default=False):
    return SimpleNamespace(
        id=next(_ids),
        price=Decimal(price),
        discount_price=Decimal(discount_price) if discount_price else None,
        stock_quantity=stock,
        low_stock_threshold=5,
        is_active=is_active,
        is_default=is_default,
        weight=Decimal('250'),
        weight_unit='g',
    )


def product(name, sku=None, name_ar='', category_id=1, category_slug='espresso',
            is_active=True, is_featured=False, display_order=0, variants=None,
            created_offset=0, updated_offset=0):
    variants = [variant()] if variants is None else variants
    return SimpleNamespace(
        id=next(_ids),
        name=name,
        name_ar=name_ar,
        sku=sku or name.upper(),
        category_id=category_id,
        category=SimpleNamespace(id=category_id, slug=category_slug),
        is_active=is_active,
        is_featured=is_featured,
        display_order=display_order,
        created_at=BASE_TIME + timedelta(days=created_offset),
        updated_at=BASE_TIME + timedelta(days=updated_offset),
        active_variants=[v for v in variants if v.is_active],
    )


def names(page_or_list):
    items = page_or_list.items if hasattr(page_or_list, 'items') else page_or_list
    return [p.name for p in items]


class TestSortKeyParsing:

    @pytest.mark.parametrize('raw, expected', [
        ('name', SortKey.NAME),
        ('NAME', SortKey.NAME),
        (' created ', SortKey.CREATED),
        ('updated', SortKey.UPDATED),
        ('displayorder', SortKey.DISPLAY_ORDER),
        ('display_order', SortKey.DISPLAY_ORDER),
        ('price', SortKey.DEFAULT),
        ('', SortKey.DEFAULT),
        (None, SortKey.DEFAULT),
    ])
    def test_total_mapping(self, raw, expected):
        assert SortKey.parse(raw) is expected

    def test_direction(self):
        assert SortDirection.parse('DESC') is SortDirection.DESC
        assert SortDirection.parse('asc') is SortDirection.ASC
        assert SortDirection.parse('sideways') is SortDirection.ASC
        assert SortDirection.parse(None) is SortDirection.ASC


class TestPagingNormalization:

    @pytest.mark.parametrize('page, page_size, expected', [
        (1, 20, (1, 20)),
        (0, 20, (1, 20)),
        (-3, 20, (1, 20)),
        (2, 0, (2, 1)),
        (2, -5, (2, 1)),
        (1, 500, (1, MAX_PAGE_SIZE)),
        (None, None, (1, 20)),
    ])
    def test_clamping(self, page, page_size, expected):
        assert normalize_paging(page, page_size) == expected

    def test_spec_build_normalizes(self):
        spec = SearchSpec.build(page=0, page_size=1000, sort_by='bogus', query='  ')
        assert spec.page == 1
        assert spec.page_size == MAX_PAGE_SIZE
        assert spec.sort_by is SortKey.DEFAULT
        assert spec.query is None

    @pytest.mark.parametrize('total_items, page_size', [
        (0, 1), (1, 1), (19, 20), (20, 20), (21, 20), (101, 100), (7, 3),
    ])
    def test_total_pages(self, total_items, page_size):
        assert total_pages(total_items, page_size) == math.ceil(total_items / page_size)

    def test_total_pages_rejects_non_positive_page_size(self):
        with pytest.raises(ValueError):
            total_pages(10, 0)


class TestPaginate:

    @pytest.mark.parametrize('total, page, page_size', [
        (0, 1, 20), (5, 1, 20), (45, 1, 20), (45, 2, 20), (45, 3, 20),
        (45, 4, 20), (10, 7, 3), (100, 1, 100),
    ])
    def test_item_count_matches_window(self, total, page, page_size):
        items = list(range(total))
        result = paginate(items, page, page_size)
        expected = min(page_size, max(0, total - (page - 1) * page_size))
        assert 0 <= len(result.items) <= page_size
        assert len(result.items) == expected
        assert result.total_items == total
        assert result.total_pages == math.ceil(total / page_size)

    def test_page_flags(self):
        result = paginate(list(range(45)), 2, 20)
        assert result.items == list(range(20, 40))
        assert result.has_previous_page is True
        assert result.has_next_page is True

        last = paginate(list(range(45)), 3, 20)
        assert last.has_next_page is False

    def test_page_past_the_end_is_empty(self):
        result = paginate(list(range(5)), 9, 20)
        assert result.items == []
        assert result.total_items == 5


class TestSorting:

    def test_name_ascending(self):
        products = [product('Zeta'), product('Alpha'), product('Mid')]
        assert names(sort_products(products, 'name', 'asc')) == ['Alpha', 'Mid', 'Zeta']

    def test_name_descending_reverses_exactly(self):
        products = [product('Zeta'), product('Alpha'), product('Mid')]
        ascending = names(sort_products(products, 'name', 'asc'))
        descending = names(sort_products(products, 'name', 'desc'))
        assert descending == list(reversed(ascending))

    def test_default_is_display_order_then_name(self):
        products = [
            product('Beta', display_order=2),
            product('Gamma', display_order=1),
            product('Alpha', display_order=2),
        ]
        assert names(sort_products(products, None)) == ['Gamma', 'Alpha', 'Beta']

    def test_default_ignores_direction(self):
        products = [product('B', display_order=2), product('A', display_order=1)]
        assert names(sort_products(products, 'unknown', 'desc')) == ['A', 'B']

    def test_display_order_uses_name_as_tiebreak(self):
        products = [
            product('Charlie', display_order=1),
            product('Bravo', display_order=1),
            product('Alpha', display_order=0),
        ]
        assert names(sort_products(products, 'displayorder')) == ['Alpha', 'Bravo', 'Charlie']

    def test_descending_keeps_name_tiebreak_ascending(self):
        """Only the primary key is reversed; ties stay in ascending name order."""
        products = [
            product('Bravo', created_offset=1),
            product('Alpha', created_offset=1),
            product('Zulu', created_offset=0),
            product('Yankee', created_offset=2),
        ]
        result = names(sort_products(products, 'created', 'desc'))
        assert result == ['Yankee', 'Alpha', 'Bravo', 'Zulu']

    def test_updated(self):
        products = [product('Old', updated_offset=0), product('New', updated_offset=5)]
        assert names(sort_products(products, 'updated', 'desc')) == ['New', 'Old']

    def test_name_comparison_is_case_insensitive(self):
        products = [product('beta'), product('Alpha'), product('Gamma')]
        assert names(sort_products(products, 'name')) == ['Alpha', 'beta', 'Gamma']

    def test_input_is_not_mutated(self):
        products = [product('Zeta'), product('Alpha')]
        sort_products(products, 'name')
        assert names(products) == ['Zeta', 'Alpha']


class TestFiltering:

    def search(self, products, **kwargs):
        return names(search_catalog(SearchSpec.build(**kwargs), products))

    def test_inactive_products_never_listed(self):
        products = [product('Shown'), product('Hidden', is_active=False)]
        assert self.search(products) == ['Shown']

    def test_text_matches_name_localized_name_or_sku(self):
        products = [
            product('Ethiopia Yirgacheffe', sku='ETH-01'),
            product('House Blend', name_ar='قهوة إثيوبية', sku='HB-01'),
            product('Colombia', sku='COL-ETH'),
            product('Brazil', sku='BR-01'),
        ]
        assert self.search(products, query='ethiopia') == ['Ethiopia Yirgacheffe']
        assert self.search(products, query='إثيوبية') == ['House Blend']
        assert sorted(self.search(products, query='eth')) == ['Colombia', 'Ethiopia Yirgacheffe']

    def test_category_id_takes_precedence_over_slug(self):
        products = [
            product('One', category_id=1, category_slug='espresso'),
            product('Two', category_id=2, category_slug='filter'),
        ]
        assert self.search(products, category_id=2, category_slug='espresso') == ['Two']
        assert self.search(products, category_slug='espresso') == ['One']

    def test_unknown_category_yields_empty_page(self):
        products = [product('One')]
        page = search_catalog(SearchSpec.build(category_id=999), products)
        assert page.items == []
        assert page.total_items == 0
        assert page.total_pages == 0
        assert self.search(products, category_slug='nope') == []

    def test_featured_only(self):
        products = [product('Plain'), product('Star', is_featured=True)]
        assert self.search(products, featured_only=True) == ['Star']

    def test_in_stock_only_uses_active_variants(self):
        """An inactive variant with stock does not make the product in stock."""
        products = [
            product('Stocked', variants=[variant(stock=4)]),
            product('Empty', variants=[variant(stock=0)]),
            product('Inactive stock', variants=[variant(stock=3, is_active=False)]),
            product('No variants', variants=[]),
        ]
        assert self.search(products, in_stock_only=True) == ['Stocked']

    def test_price_range_uses_effective_price(self):
        products = [
            product('Cheap', variants=[variant(price='4.000')]),
            product('Discounted', variants=[variant(price='20.000', discount_price='9.000')]),
            product('Pricey', variants=[variant(price='30.000')]),
            product('Unpriced', variants=[]),
        ]
        assert self.search(products, min_price='5', max_price='10') == ['Discounted']
        assert self.search(products, min_price='5') == ['Discounted', 'Pricey']
        assert self.search(products, max_price='100') == ['Cheap', 'Discounted', 'Pricey']

    def test_filters_are_combined(self):
        products = [
            product('Ethiopia Star', is_featured=True, variants=[variant(stock=0)]),
            product('Ethiopia Plain'),
            product('Ethiopia Featured', is_featured=True),
        ]
        assert self.search(products, query='ethiopia', featured_only=True, in_stock_only=True) == [
            'Ethiopia Featured'
        ]

    def test_total_items_counts_before_pagination(self):
        products = [product(f'Coffee {i:02d}') for i in range(25)]
        page = search_catalog(SearchSpec.build(sort_by='name', page=2, page_size=10), products)
        assert page.total_items == 25
        assert page.total_pages == 3
        assert names(page) == [f'Coffee {i:02d}' for i in range(10, 20)]

    def test_cache_key_differs_per_spec(self):
        assert SearchSpec.build(page=1).cache_key != SearchSpec.build(page=2).cache_key
        assert SearchSpec.build(query='a').cache_key == SearchSpec.build(query=' a ').cache_key
