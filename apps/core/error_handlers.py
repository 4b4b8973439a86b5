"""
Error handling for the sticker registry API.
Maps core failures to HTTP responses and logs them.
"""

from django.http import JsonResponse
from django.views.decorators.cache import never_cache
from rest_framework.views import exception_handler
from rest_framework.response import Response
import logging

from apps.core.exceptions import CoreError, ValidationViolation

logger = logging.getLogger(__name__)


def error_payload(error, status_code, **extra):
    payload = {'error': error, 'status_code': status_code}
    payload.update(extra)
    return payload


def api_exception_handler(exc, context):
    """
    DRF exception handler.

    Core failures are mapped by type (``status_code`` on the exception
    class); everything else falls back to DRF's default handling.
    """
    if isinstance(exc, CoreError):
        request = context.get('request')
        path = getattr(request, 'path', '')
        if exc.status_code >= 500:
            logger.error(f"{exc.code} for path: {path} - {exc.message}")
        else:
            logger.warning(f"{exc.code} for path: {path} - {exc.message}")

        extra = {'code': exc.code}
        if isinstance(exc, ValidationViolation) and exc.message_dict:
            extra['errors'] = exc.message_dict
        return Response(error_payload(exc.message, exc.status_code, **extra), status=exc.status_code)

    return exception_handler(exc, context)


@never_cache
def handler404(request, exception=None):
    """Custom 404 error handler."""
    logger.warning(f"404 error for path: {request.path} from IP: {request.META.get('REMOTE_ADDR')}")
    return JsonResponse(error_payload('Resource not found', 404, path=request.path), status=404)


@never_cache
def handler500(request):
    """Custom 500 error handler."""
    logger.error(f"500 error for path: {request.path} from IP: {request.META.get('REMOTE_ADDR')}")
    return JsonResponse(
        error_payload(
            'Internal server error', 500,
            message='An unexpected error occurred. Please try again later.',
        ),
        status=500,
    )
