from django.db import migrations

SYSTEM_ROLES = ('Admin', 'Staff', 'Customer')


def create_system_roles(apps, schema_editor):
    Group = apps.get_model('auth', 'Group')
    for name in SYSTEM_ROLES:
        Group.objects.get_or_create(name=name)


def remove_system_roles(apps, schema_editor):
    Group = apps.get_model('auth', 'Group')
    Group.objects.filter(name__in=SYSTEM_ROLES, user__isnull=True).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('users', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_system_roles, remove_system_roles),
    ]
