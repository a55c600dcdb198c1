"""Content admin configuration."""

from django.contrib import admin
from .models import FAQ, FAQCategory, Setting, Slide


@admin.register(Slide)
class SlideAdmin(admin.ModelAdmin):
    list_display = ['title', 'display_order', 'is_active', 'updated_at']
    list_filter = ['is_active']
    list_editable = ['display_order', 'is_active']
    search_fields = ['title', 'title_ar']


class FAQInline(admin.TabularInline):
    model = FAQ
    extra = 0
    fields = ['question', 'display_order', 'is_active']


@admin.register(FAQCategory)
class FAQCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'display_order', 'is_active']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [FAQInline]


@admin.register(FAQ)
class FAQAdmin(admin.ModelAdmin):
    list_display = ['question', 'category', 'display_order', 'is_active']
    list_filter = ['is_active', 'category']
    search_fields = ['question', 'question_ar', 'answer']


@admin.register(Setting)
class SettingAdmin(admin.ModelAdmin):
    list_display = ['key', 'category', 'data_type', 'is_required', 'updated_at']
    list_filter = ['category', 'data_type', 'is_required']
    search_fields = ['key', 'description']
