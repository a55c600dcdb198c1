"""
Pagination classes shared by all API list endpoints.

Every paginated response uses the same envelope as the catalog listing:
items, current_page, page_size, total_items, total_pages.
"""

import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardResultsSetPagination(PageNumberPagination):
    """Page-number pagination with a client-adjustable page size (max 100)."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100

    def get_paginated_response(self, data):
        total_items = self.page.paginator.count
        page_size = self.page.paginator.per_page
        return Response({
            'items': data,
            'current_page': self.page.number,
            'page_size': page_size,
            'total_items': total_items,
            'total_pages': math.ceil(total_items / page_size) if page_size else 0,
            'has_previous_page': self.page.has_previous(),
            'has_next_page': self.page.has_next(),
        })
