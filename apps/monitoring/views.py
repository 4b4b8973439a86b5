"""
Health monitoring for the sticker registry.
Reports whether the backing store and cache are reachable.
"""

import time
from django.http import JsonResponse
from django.views import View
from django.db import connection
from django.core.cache import cache
from django.conf import settings
from django.utils import timezone
import logging

from apps.core.exceptions import CoreError
from apps.core.storage import OperationContext, guarded

logger = logging.getLogger(__name__)


class HealthCheckView(View):
    """
    Health check endpoint for monitoring system status.
    """

    def get(self, request):
        """Return system health status."""
        start_time = time.time()

        health_data = {
            'status': 'healthy',
            'timestamp': timezone.now().isoformat(),
            'version': getattr(settings, 'VERSION', '1.0.0'),
            'checks': {}
        }

        # Database health check, bounded by the operation timeout
        context = OperationContext.with_timeout(getattr(settings, 'CORE_OPERATION_TIMEOUT', None))
        try:
            with guarded('health_check', context=context):
                with connection.cursor() as cursor:
                    cursor.execute("SELECT 1")
            health_data['checks']['database'] = {
                'status': 'healthy',
                'response_time_ms': round((time.time() - start_time) * 1000, 2)
            }
        except CoreError as e:
            health_data['checks']['database'] = {
                'status': 'unhealthy',
                'error': e.message
            }
            health_data['status'] = 'unhealthy'

        # Cache health check
        try:
            cache_start = time.time()
            cache.set('health_check', 'ok', 10)
            if cache.get('health_check') != 'ok':
                raise ValueError("Cache round-trip failed")
            health_data['checks']['cache'] = {
                'status': 'healthy',
                'response_time_ms': round((time.time() - cache_start) * 1000, 2)
            }
        except Exception as e:
            logger.warning(f"Cache health check failed: {e}")
            health_data['checks']['cache'] = {
                'status': 'unhealthy',
                'error': str(e)
            }
            health_data['status'] = 'unhealthy'

        # Overall response time
        health_data['response_time_ms'] = round((time.time() - start_time) * 1000, 2)

        # Set HTTP status based on health
        status_code = 200 if health_data['status'] == 'healthy' else 503

        return JsonResponse(health_data, status=status_code)


class LivenessView(View):
    """
    Liveness endpoint: the process is up and serving requests.
    """

    def get(self, request):
        """Check if application is alive."""
        return JsonResponse({
            'status': 'alive',
            'timestamp': timezone.now().isoformat()
        })
