"""
Core views providing health checks and API root.
"""

from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response


def health_check(request):
    """
    Health check endpoint for monitoring.

    Checks:
    - Database connectivity
    - Redis/Cache connectivity

    Returns appropriate HTTP status codes:
    - 200: All systems operational
    - 503: Service unavailable (database or cache down)
    """
    health_status = {
        'status': 'healthy',
        'checks': {}
    }

    # Check database
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        health_status['checks']['database'] = 'ok'
    except Exception as e:
        health_status['checks']['database'] = 'error'
        health_status['status'] = 'unhealthy'
        health_status['checks']['database_error'] = str(e)

    # Check Redis/Cache
    try:
        cache.set('health_check', 'ok', 10)
        if cache.get('health_check') == 'ok':
            health_status['checks']['cache'] = 'ok'
        else:
            health_status['checks']['cache'] = 'error'
            health_status['status'] = 'unhealthy'
    except Exception as e:
        health_status['checks']['cache'] = 'error'
        health_status['status'] = 'unhealthy'
        health_status['checks']['cache_error'] = str(e)

    status_code = 200 if health_status['status'] == 'healthy' else 503

    return JsonResponse(health_status, status=status_code)


@api_view(['GET'])
@permission_classes([AllowAny])
def api_root(request, format=None):
    """
    API root endpoint listing the v1 resources.
    """
    base = request.build_absolute_uri('/api/v1/')
    return Response({
        'auth': f'{base}auth/token/',
        'users': f'{base}users/',
        'products': f'{base}products/',
        'categories': f'{base}categories/',
        'reviews': f'{base}reviews/',
        'content': f'{base}content/',
        'cart': f'{base}cart/',
        'health': request.build_absolute_uri('/health/'),
    })
