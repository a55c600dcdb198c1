"""
User and role URLs using ViewSet routers.

Best practice: Use routers for ViewSet-based views.
"""

from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import RoleViewSet, UserViewSet

app_name = 'users'

router = SimpleRouter()
router.register(r'users', UserViewSet, basename='user')
router.register(r'roles', RoleViewSet, basename='role')

urlpatterns = [
    path('', include(router.urls)),
]
