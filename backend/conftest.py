"""
Shared pytest fixtures.

App test modules define their own data fixtures; the ones here are the
clients and accounts every app needs.
"""

import pytest
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def clear_cache():
    """Cached catalog and content responses must not leak between tests."""
    from django.core.cache import cache

    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """API client fixture."""
    return APIClient()


@pytest.fixture
def customer(db, django_user_model):
    """A registered customer."""
    from django.contrib.auth.models import Group
    from apps.users import services
    from apps.users.models import CUSTOMER_ROLE

    services.ensure_system_roles()
    user = django_user_model.objects.create_user(
        email='customer@example.com',
        username='customer',
        password='testpass123',
        first_name='Salim',
        last_name='Customer'
    )
    user.groups.add(Group.objects.get(name=CUSTOMER_ROLE))
    return user


@pytest.fixture
def admin_user(db, django_user_model):
    """A user holding the Admin role (and therefore is_staff)."""
    from apps.users import services
    from apps.users.models import ADMIN_ROLE

    services.ensure_system_roles()
    user = django_user_model.objects.create_user(
        email='admin@example.com',
        username='admin',
        password='testpass123',
    )
    return services.assign_role(user.id, ADMIN_ROLE)


@pytest.fixture
def admin_client(api_client, admin_user):
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def customer_client(api_client, customer):
    api_client.force_authenticate(user=customer)
    return api_client
