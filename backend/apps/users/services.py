"""
Account and role management.

Roles are Django groups. The three system roles always exist and can
never be deleted; any role still held by a user cannot be deleted either.
"""

import logging

from django.contrib.auth.models import Group
from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from apps.core.exceptions import Conflict, IntegrityConflict, NotFound, ValidationFailed
from .models import ADMIN_ROLE, CUSTOMER_ROLE, SYSTEM_ROLES, User

logger = logging.getLogger(__name__)


def ensure_system_roles():
    for name in SYSTEM_ROLES:
        Group.objects.get_or_create(name=name)


def get_user(user_id):
    user = User.objects.filter(pk=user_id).first()
    if user is None:
        raise NotFound('User not found.')
    return user


def _get_role(name):
    role = Group.objects.filter(name=name).first()
    if role is None:
        raise NotFound(f"Role '{name}' not found.")
    return role


@transaction.atomic
def register_user(data):
    """Create a customer account. `data` is already validated."""
    password = data.pop('password')
    data.pop('password_confirm', None)
    user = User.objects.create_user(password=password, **data)

    ensure_system_roles()
    user.groups.add(_get_role(CUSTOMER_ROLE))
    logger.info(f"Registered user {user.email} (ID: {user.id})")
    return user


def record_login(user):
    user.last_login_date = timezone.now()
    user.save(update_fields=['last_login_date'])


def search_users(search=None, role=None, is_active=None):
    queryset = User.objects.prefetch_related('groups').order_by('-date_joined')
    if search:
        queryset = queryset.filter(
            Q(email__icontains=search)
            | Q(username__icontains=search)
            | Q(first_name__icontains=search)
            | Q(last_name__icontains=search)
            | Q(phone__icontains=search)
        )
    if role:
        queryset = queryset.filter(groups__name=role)
    if is_active is not None:
        queryset = queryset.filter(is_active=is_active)
    return queryset.distinct()


def _sync_staff_flag(user):
    is_admin = user.groups.filter(name=ADMIN_ROLE).exists()
    if user.is_staff != is_admin and not user.is_superuser:
        user.is_staff = is_admin
        user.save(update_fields=['is_staff'])


@transaction.atomic
def assign_role(user_id, role_name):
    user = get_user(user_id)
    role = _get_role(role_name)
    user.groups.add(role)
    _sync_staff_flag(user)
    logger.info(f"Assigned role {role.name} to {user.email}")
    return user


@transaction.atomic
def remove_role(user_id, role_name):
    user = get_user(user_id)
    role = _get_role(role_name)
    user.groups.remove(role)
    _sync_staff_flag(user)
    logger.info(f"Removed role {role.name} from {user.email}")
    return user


def lock_user(user_id, acting_user=None):
    user = get_user(user_id)
    if acting_user is not None and acting_user.pk == user.pk:
        raise ValidationFailed.for_field('user', 'You cannot lock your own account.')
    user.is_active = False
    user.save(update_fields=['is_active'])
    logger.warning(f"Locked user {user.email}")
    return user


def unlock_user(user_id):
    user = get_user(user_id)
    user.is_active = True
    user.save(update_fields=['is_active'])
    logger.info(f"Unlocked user {user.email}")
    return user


def user_stats():
    total = User.objects.count()
    active = User.objects.filter(is_active=True).count()
    counts = role_user_counts()
    return {
        'total_users': total,
        'active_users': active,
        'locked_users': total - active,
        'role_counts': counts,
    }


def roles_with_counts():
    return Group.objects.annotate(user_count=Count('user')).order_by('name')


def role_user_counts():
    return {role.name: role.user_count for role in roles_with_counts()}


def is_system_role(name):
    return name in SYSTEM_ROLES


def create_role(name):
    name = (name or '').strip()
    if not name:
        raise ValidationFailed.for_field('name', 'Role name is required.')
    if Group.objects.filter(name__iexact=name).exists():
        raise IntegrityConflict('name', f"Role '{name}' already exists.")
    role = Group.objects.create(name=name)
    logger.info(f"Created role {name}")
    return role


@transaction.atomic
def delete_role(role_id):
    role = Group.objects.filter(pk=role_id).annotate(user_count=Count('user')).first()
    if role is None:
        raise NotFound('Role not found.')
    if is_system_role(role.name):
        raise Conflict(f"'{role.name}' is a system role and cannot be deleted.")
    if role.user_count:
        raise Conflict('Cannot delete role that has assigned users.')
    name = role.name
    role.delete()
    logger.info(f"Deleted role {name}")
