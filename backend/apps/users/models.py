"""
User model.

Best practices demonstrated:
- Custom user model from the start
- Email as the login identifier
- Roles expressed as Django groups
- Proper field indexing
"""

from django.contrib.auth.models import AbstractUser
from django.db import models

ADMIN_ROLE = 'Admin'
STAFF_ROLE = 'Staff'
CUSTOMER_ROLE = 'Customer'
SYSTEM_ROLES = (ADMIN_ROLE, STAFF_ROLE, CUSTOMER_ROLE)


class User(AbstractUser):
    """
    Storefront account.

    Roles are groups; `is_staff` follows membership of the Admin role so
    DRF's IsAdminUser guards the admin endpoints.
    """

    class Language(models.TextChoices):
        ENGLISH = 'en', 'English'
        ARABIC = 'ar', 'Arabic'

    email = models.EmailField(unique=True, db_index=True)
    phone = models.CharField(max_length=20, blank=True)
    preferred_language = models.CharField(
        max_length=2,
        choices=Language.choices,
        default=Language.ENGLISH
    )
    is_verified = models.BooleanField(default=False)
    last_login_date = models.DateTimeField(null=True, blank=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['email', 'is_active'], name='users_email_active_idx'),
            models.Index(fields=['is_verified'], name='users_verified_idx'),
        ]

    def __str__(self):
        return self.email

    @property
    def full_name(self):
        """Return the user's full name."""
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def role_names(self):
        return sorted(group.name for group in self.groups.all())

    def has_role(self, name):
        return self.groups.filter(name=name).exists()
