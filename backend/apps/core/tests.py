"""
Tests for core app: error envelope, pagination and health check.
"""

import pytest
from rest_framework import exceptions

from .exceptions import Conflict, IntegrityConflict, NotFound, ValidationFailed, api_exception_handler


class TestExceptionHandler:
    def test_domain_errors_use_envelope(self):
        response = api_exception_handler(NotFound('Product not found.'), {})

        assert response.status_code == 404
        assert response.data == {'success': False, 'message': 'Product not found.', 'errors': {}}

    def test_integrity_conflict_names_the_field(self):
        response = api_exception_handler(IntegrityConflict('slug'), {})

        assert response.status_code == 409
        assert response.data['errors'] == {'slug': ['slug already exists.']}

    def test_validation_failed_for_field(self):
        exc = ValidationFailed.for_field('quantity', 'Quantity must be 0 or greater.')

        response = api_exception_handler(exc, {})

        assert response.status_code == 400
        assert response.data['errors'] == {'quantity': ['Quantity must be 0 or greater.']}

    def test_drf_validation_error(self):
        exc = exceptions.ValidationError({'name': ['This field is required.']})

        response = api_exception_handler(exc, {})

        assert response.status_code == 400
        assert response.data['message'] == 'Validation failed.'
        assert response.data['errors'] == {'name': ['This field is required.']}

    def test_conflict_is_409(self):
        assert api_exception_handler(Conflict('Nope.'), {}).status_code == 409

    def test_unhandled_errors_are_left_to_django(self):
        assert api_exception_handler(RuntimeError('boom'), {'view': None}) is None


@pytest.mark.django_db
class TestCoreViews:
    def test_health_check(self, client):
        response = client.get('/health/')

        assert response.status_code == 200
        assert response.json()['checks'] == {'database': 'ok', 'cache': 'ok'}

    def test_api_root(self, api_client):
        response = api_client.get('/api/')

        assert response.status_code == 200
        assert response.data['products'].endswith('/api/v1/products/')
