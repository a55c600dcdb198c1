"""
URL configuration demonstrating best practices:
- API versioning
- Proper URL namespacing
- Admin URL customization for security
- Health check endpoint
"""

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from rest_framework_simplejwt.views import TokenRefreshView, TokenVerifyView

from apps.core.views import health_check, api_root
from apps.users.views import LoginView

# Customize admin URL for security (configure in production settings)
admin_url = getattr(settings, 'ADMIN_URL', 'admin/')

urlpatterns = [
    path(admin_url, admin.site.urls),

    path('health/', health_check, name='health-check'),

    path('api/', api_root, name='api-root'),

    path('api/v1/', include([
        path('auth/', include([
            path('token/', LoginView.as_view(), name='token_obtain_pair'),
            path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
            path('token/verify/', TokenVerifyView.as_view(), name='token_verify'),
        ])),

        path('content/', include('apps.content.urls')),
        path('cart/', include('apps.cart.urls')),
        path('', include('apps.users.urls')),
        path('', include('apps.catalog.urls')),
    ])),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

    if 'debug_toolbar' in settings.INSTALLED_APPS:
        urlpatterns += [
            path('__debug__/', include('debug_toolbar.urls')),
        ]

admin.site.site_header = 'Coffee Shop Administration'
admin.site.site_title = 'Coffee Shop Admin'
admin.site.index_title = 'Catalog, content and customers'
