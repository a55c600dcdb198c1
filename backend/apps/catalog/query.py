"""
Catalog query engine.

Turns a `SearchSpec` into a page of products: filter, then sort, then
paginate. The engine is a pure function over an in-memory collection of
products that already carry their category and active variants, so it
can be tested without a database and never mutates its inputs.

    spec = SearchSpec.build(query='ethiopia', sort_by='name', page=2)
    page = search_catalog(spec, products)

Filtering composes a list of predicate closures (AND-combined). Sorting
maps a closed `SortKey` enum onto key functions; unknown sort values fall
back to display order then name.
"""

import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Callable, List, Optional, Sequence

from .pricing import resolved_price

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

Predicate = Callable[[object], bool]


class SortKey(Enum):
    NAME = 'name'
    CREATED = 'created'
    UPDATED = 'updated'
    DISPLAY_ORDER = 'displayorder'
    DEFAULT = 'default'

    @classmethod
    def parse(cls, value):
        """Total mapping from a client string; unknown values -> DEFAULT."""
        if isinstance(value, cls):
            return value
        normalized = (value or '').strip().lower().replace('_', '')
        try:
            return cls(normalized)
        except ValueError:
            return cls.DEFAULT


class SortDirection(Enum):
    ASC = 'asc'
    DESC = 'desc'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        return cls.DESC if (value or '').strip().lower() == 'desc' else cls.ASC


def normalize_paging(page, page_size):
    """Clamp page to >= 1 and page_size into [1, MAX_PAGE_SIZE]."""
    page = page if page and page > 0 else 1
    if page_size is None:
        page_size = DEFAULT_PAGE_SIZE
    page_size = max(1, min(int(page_size), MAX_PAGE_SIZE))
    return int(page), page_size


def total_pages(total_items, page_size):
    if page_size <= 0:
        raise ValueError("page_size must be greater than 0")
    return math.ceil(total_items / page_size)


@dataclass(frozen=True)
class SearchSpec:
    """Immutable, already-normalized product search parameters."""
    query: Optional[str] = None
    category_id: Optional[int] = None
    category_slug: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    featured_only: bool = False
    in_stock_only: bool = False
    sort_by: SortKey = SortKey.DEFAULT
    sort_direction: SortDirection = SortDirection.ASC
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def build(cls, query=None, category_id=None, category_slug=None,
              min_price=None, max_price=None, featured_only=False,
              in_stock_only=False, sort_by=None, sort_direction=None,
              page=1, page_size=DEFAULT_PAGE_SIZE):
        page, page_size = normalize_paging(page, page_size)
        return cls(
            query=(query or '').strip() or None,
            category_id=category_id,
            category_slug=(category_slug or '').strip() or None,
            min_price=Decimal(str(min_price)) if min_price is not None else None,
            max_price=Decimal(str(max_price)) if max_price is not None else None,
            featured_only=bool(featured_only),
            in_stock_only=bool(in_stock_only),
            sort_by=SortKey.parse(sort_by),
            sort_direction=SortDirection.parse(sort_direction),
            page=page,
            page_size=page_size,
        )

    @property
    def cache_key(self):
        return 'catalog:list:' + '|'.join(str(v) for v in (
            self.query, self.category_id, self.category_slug,
            self.min_price, self.max_price, self.featured_only,
            self.in_stock_only, self.sort_by.value, self.sort_direction.value,
            self.page, self.page_size,
        ))


@dataclass(frozen=True)
class Page:
    items: List = field(default_factory=list)
    current_page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total_items: int = 0
    total_pages: int = 0

    @property
    def has_previous_page(self):
        return self.current_page > 1

    @property
    def has_next_page(self):
        return self.current_page < self.total_pages


def variants_of(product):
    """Active variants attached to a product."""
    return list(product.active_variants)


def _is_active(product):
    return bool(product.is_active)


def _matches_text(needle):
    needle = needle.casefold()

    def predicate(product):
        return any(
            needle in (value or '').casefold()
            for value in (product.name, product.name_ar, product.sku)
        )
    return predicate


def _in_category(category_id):
    return lambda product: product.category_id == category_id


def _in_category_slug(slug):
    def predicate(product):
        category = product.category
        return category is not None and category.slug == slug
    return predicate


def _is_featured(product):
    return bool(product.is_featured)


def _has_stock(product):
    return any(v.is_active and v.stock_quantity > 0 for v in variants_of(product))


def _price_within(min_price, max_price):
    def predicate(product):
        price = resolved_price(variants_of(product))
        if price is None:
            return False
        if min_price is not None and price < min_price:
            return False
        if max_price is not None and price > max_price:
            return False
        return True
    return predicate


def build_filters(spec: SearchSpec) -> List[Predicate]:
    """Predicates a product must all satisfy to be listed."""
    filters = [_is_active]

    if spec.query:
        filters.append(_matches_text(spec.query))

    if spec.category_id is not None:
        filters.append(_in_category(spec.category_id))
    elif spec.category_slug:
        filters.append(_in_category_slug(spec.category_slug))

    if spec.featured_only:
        filters.append(_is_featured)

    if spec.in_stock_only:
        filters.append(_has_stock)

    if spec.min_price is not None or spec.max_price is not None:
        filters.append(_price_within(spec.min_price, spec.max_price))

    return filters


def apply_filters(products: Sequence, filters: Sequence[Predicate]) -> list:
    return [p for p in products if all(check(p) for check in filters)]


def _name_key(product):
    return (product.name or '').casefold()


_PRIMARY_KEYS = {
    SortKey.NAME: _name_key,
    SortKey.CREATED: lambda p: p.created_at,
    SortKey.UPDATED: lambda p: p.updated_at,
    SortKey.DISPLAY_ORDER: lambda p: p.display_order,
}


def sort_products(products: Sequence, sort_by=SortKey.DEFAULT,
                  direction=SortDirection.ASC) -> list:
    """
    Order products by the requested key with name as the secondary key.

    The direction applies to the primary key only; the name tiebreak is
    always ascending. DEFAULT ignores the direction entirely and orders
    by display_order then name.
    """
    sort_by = SortKey.parse(sort_by)
    direction = SortDirection.parse(direction)

    # Stable sorts: secondary key first, then the primary key.
    ordered = sorted(products, key=_name_key)
    if sort_by is SortKey.DEFAULT:
        return sorted(ordered, key=_PRIMARY_KEYS[SortKey.DISPLAY_ORDER])
    return sorted(
        ordered,
        key=_PRIMARY_KEYS[sort_by],
        reverse=direction is SortDirection.DESC,
    )


def paginate(items: Sequence, page: int, page_size: int) -> Page:
    """Slice an already-sorted sequence into a page."""
    page, page_size = normalize_paging(page, page_size)
    skip = (page - 1) * page_size
    total = len(items)
    return Page(
        items=list(items[skip:skip + page_size]),
        current_page=page,
        page_size=page_size,
        total_items=total,
        total_pages=total_pages(total, page_size),
    )


def search_catalog(spec: SearchSpec, products: Sequence) -> Page:
    """Filter, sort and paginate `products` according to `spec`."""
    matched = apply_filters(products, build_filters(spec))
    ordered = sort_products(matched, spec.sort_by, spec.sort_direction)
    return paginate(ordered, spec.page, spec.page_size)
