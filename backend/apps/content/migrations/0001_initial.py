from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='FAQCategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('display_order', models.IntegerField(db_index=True, default=0)),
                ('name', models.CharField(max_length=200)),
                ('name_ar', models.CharField(blank=True, max_length=200)),
                ('slug', models.SlugField(max_length=200, unique=True)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
            ],
            options={
                'verbose_name': 'FAQ category',
                'verbose_name_plural': 'FAQ categories',
                'db_table': 'faq_categories',
                'ordering': ['display_order', 'id'],
            },
        ),
        migrations.CreateModel(
            name='Setting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('key', models.CharField(max_length=100, unique=True)),
                ('value', models.TextField(blank=True)),
                ('description', models.CharField(blank=True, max_length=500)),
                ('description_ar', models.CharField(blank=True, max_length=500)),
                ('category', models.CharField(db_index=True, default='General', max_length=50)),
                ('data_type', models.CharField(choices=[('text', 'Text'), ('image', 'Image'), ('boolean', 'Boolean'), ('number', 'Number')], default='text', max_length=10)),
                ('is_required', models.BooleanField(default=False)),
            ],
            options={
                'db_table': 'settings',
                'ordering': ['category', 'key'],
            },
        ),
        migrations.CreateModel(
            name='Slide',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('display_order', models.IntegerField(db_index=True, default=0)),
                ('title', models.CharField(max_length=200)),
                ('title_ar', models.CharField(blank=True, max_length=200)),
                ('subtitle', models.CharField(blank=True, max_length=500)),
                ('subtitle_ar', models.CharField(blank=True, max_length=500)),
                ('image_path', models.CharField(max_length=500)),
                ('button_text', models.CharField(blank=True, max_length=100)),
                ('button_text_ar', models.CharField(blank=True, max_length=100)),
                ('button_url', models.CharField(blank=True, max_length=500)),
                ('background_color', models.CharField(blank=True, max_length=50)),
                ('text_color', models.CharField(default='text-white', max_length=50)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
            ],
            options={
                'db_table': 'slides',
                'ordering': ['display_order', 'id'],
            },
        ),
        migrations.CreateModel(
            name='FAQ',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('display_order', models.IntegerField(db_index=True, default=0)),
                ('question', models.CharField(max_length=500)),
                ('question_ar', models.CharField(blank=True, max_length=500)),
                ('answer', models.TextField()),
                ('answer_ar', models.TextField(blank=True)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('category', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='faqs', to='content.faqcategory')),
            ],
            options={
                'verbose_name': 'FAQ',
                'db_table': 'faqs',
                'ordering': ['display_order', 'id'],
            },
        ),
    ]
