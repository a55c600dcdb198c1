"""Content URLs, mounted at /api/v1/content/."""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import FAQCategoryViewSet, FAQViewSet, SettingViewSet, SlideViewSet

app_name = 'content'

router = DefaultRouter()
router.register(r'slides', SlideViewSet, basename='slide')
router.register(r'faq-categories', FAQCategoryViewSet, basename='faq-category')
router.register(r'faqs', FAQViewSet, basename='faq')
router.register(r'settings', SettingViewSet, basename='setting')

urlpatterns = [
    path('', include(router.urls)),
]
