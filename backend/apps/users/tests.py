"""
Tests for users app.

Best practices demonstrated:
- Use pytest fixtures
- Test registration, profile and role management through the API
- Test the role deletion rules in the service layer
"""

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group

from apps.core.exceptions import Conflict, IntegrityConflict, ValidationFailed
from . import services
from .models import ADMIN_ROLE, CUSTOMER_ROLE, STAFF_ROLE

User = get_user_model()


@pytest.mark.django_db
class TestUserModel:
    def test_user_str_and_full_name(self, customer):
        assert str(customer) == 'customer@example.com'
        assert customer.full_name == 'Salim Customer'

    def test_roles(self, customer):
        assert customer.role_names == [CUSTOMER_ROLE]
        assert customer.has_role(CUSTOMER_ROLE)
        assert not customer.has_role(ADMIN_ROLE)


@pytest.mark.django_db
class TestRoleServices:
    def test_admin_role_grants_staff(self, customer):
        user = services.assign_role(customer.id, ADMIN_ROLE)
        assert user.is_staff

        user = services.remove_role(customer.id, ADMIN_ROLE)
        assert not user.is_staff

    def test_system_roles_cannot_be_deleted(self, db):
        services.ensure_system_roles()
        for name in (ADMIN_ROLE, STAFF_ROLE, CUSTOMER_ROLE):
            with pytest.raises(Conflict):
                services.delete_role(Group.objects.get(name=name).id)

    def test_role_with_users_cannot_be_deleted(self, customer):
        role = services.create_role('Wholesale')
        customer.groups.add(role)

        with pytest.raises(Conflict) as excinfo:
            services.delete_role(role.id)
        assert excinfo.value.message == 'Cannot delete role that has assigned users.'

        customer.groups.remove(role)
        services.delete_role(role.id)
        assert not Group.objects.filter(name='Wholesale').exists()

    def test_duplicate_role_name(self, db):
        services.create_role('Barista')
        with pytest.raises(IntegrityConflict):
            services.create_role('barista')

    def test_cannot_lock_self(self, admin_user):
        with pytest.raises(ValidationFailed):
            services.lock_user(admin_user.id, acting_user=admin_user)

    def test_lock_and_unlock(self, admin_user, customer):
        assert not services.lock_user(customer.id, acting_user=admin_user).is_active
        assert services.unlock_user(customer.id).is_active

    def test_user_stats(self, admin_user, customer):
        services.lock_user(customer.id, acting_user=admin_user)

        stats = services.user_stats()

        assert stats['total_users'] == 2
        assert stats['locked_users'] == 1
        assert stats['role_counts'][ADMIN_ROLE] == 1
        assert stats['role_counts'][CUSTOMER_ROLE] == 1


@pytest.mark.django_db
class TestUserAPI:
    def test_register(self, api_client):
        response = api_client.post('/api/v1/users/', {
            'email': 'new@example.com',
            'username': 'newuser',
            'password': 'Arabica!2024',
            'password_confirm': 'Arabica!2024',
            'preferred_language': 'ar',
        }, format='json')

        assert response.status_code == 201
        assert response.data['roles'] == [CUSTOMER_ROLE]
        assert User.objects.get(email='new@example.com').check_password('Arabica!2024')

    def test_register_password_mismatch(self, api_client):
        response = api_client.post('/api/v1/users/', {
            'email': 'new@example.com',
            'username': 'newuser',
            'password': 'Arabica!2024',
            'password_confirm': 'Robusta!2024',
        }, format='json')

        assert response.status_code == 400
        assert 'password_confirm' in response.data['errors']

    def test_login_records_login_date(self, api_client, customer):
        response = api_client.post('/api/v1/auth/token/', {
            'email': 'customer@example.com',
            'password': 'testpass123',
        }, format='json')

        assert response.status_code == 200
        assert 'access' in response.data
        customer.refresh_from_db()
        assert customer.last_login_date is not None

    def test_me(self, customer_client):
        response = customer_client.get('/api/v1/users/me/')

        assert response.status_code == 200
        assert response.data['email'] == 'customer@example.com'

    def test_me_requires_authentication(self, api_client):
        response = api_client.get('/api/v1/users/me/')

        assert response.status_code == 401
        assert response.data['success'] is False

    def test_update_profile(self, customer_client):
        response = customer_client.patch('/api/v1/users/update_profile/', {'phone': '+96890000000'}, format='json')

        assert response.status_code == 200
        assert response.data['phone'] == '+96890000000'

    def test_list_requires_admin(self, customer_client):
        assert customer_client.get('/api/v1/users/').status_code == 403

    def test_admin_search(self, admin_client, customer):
        response = admin_client.get('/api/v1/users/', {'role': CUSTOMER_ROLE})

        assert response.status_code == 200
        assert [u['email'] for u in response.data['items']] == ['customer@example.com']

    def test_assign_and_remove_role(self, admin_client, customer):
        response = admin_client.post(f'/api/v1/users/{customer.id}/roles/', {'role': STAFF_ROLE}, format='json')
        assert response.status_code == 200
        assert response.data['roles'] == [CUSTOMER_ROLE, STAFF_ROLE]

        response = admin_client.delete(f'/api/v1/users/{customer.id}/roles/{STAFF_ROLE}/')
        assert response.data['roles'] == [CUSTOMER_ROLE]

    def test_assign_unknown_role(self, admin_client, customer):
        response = admin_client.post(f'/api/v1/users/{customer.id}/roles/', {'role': 'Nope'}, format='json')

        assert response.status_code == 404

    def test_delete_system_role_is_a_conflict(self, admin_client):
        role = Group.objects.get(name=ADMIN_ROLE)

        response = admin_client.delete(f'/api/v1/roles/{role.id}/')

        assert response.status_code == 409
        assert response.data['success'] is False

    def test_list_roles(self, admin_client, customer):
        response = admin_client.get('/api/v1/roles/')

        roles = {r['name']: r for r in response.data}
        assert roles[CUSTOMER_ROLE]['user_count'] == 1
        assert roles[CUSTOMER_ROLE]['is_system_role'] is True
