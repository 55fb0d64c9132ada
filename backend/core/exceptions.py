"""JSON error envelope for every failure the API can produce.

    {"success": false, "message": "...", "reason": "...", "errors": {...}}

``errors`` carries field-level validation messages; ``stack`` is added
outside production.
"""

import logging
import math
import traceback

from django.conf import settings
from django.core.exceptions import PermissionDenied, ValidationError as DjangoValidationError
from django.db import IntegrityError, OperationalError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def _show_stack():
    return settings.DEBUG or settings.ENVIRONMENT != 'production'


def error_body(message, reason=None, errors=None, exc=None, **extra):
    body = {'success': False, 'message': message}
    if reason:
        body['reason'] = reason
    if errors:
        body['errors'] = errors
    body.update(extra)
    if exc is not None and _show_stack():
        body['stack'] = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return body


def _normalise(exc):
    if isinstance(exc, DjangoValidationError):
        return exceptions.ValidationError(detail=as_serializer_error(exc))
    if isinstance(exc, Http404):
        return exceptions.NotFound('Resource not found')
    if isinstance(exc, PermissionDenied):
        return exceptions.PermissionDenied()
    return exc


def api_exception_handler(exc, context):
    exc = _normalise(exc)

    if isinstance(exc, IntegrityError):
        logger.warning('integrity error: %s', exc)
        return Response(
            error_body('Request conflicts with stored data', reason='conflict', exc=exc),
            status=status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, OperationalError):
        logger.error('database unavailable: %s', exc)
        return Response(
            error_body('Database connection error', reason='service_unavailable', exc=exc),
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    response = drf_exception_handler(exc, context)
    if response is None:
        view = context.get('view')
        logger.error('unhandled error in %s', type(view).__name__, exc_info=exc)
        return Response(
            error_body('Server Error', reason='server_error', exc=exc),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.ValidationError):
        detail = exc.detail if isinstance(exc.detail, dict) else {'non_field_errors': exc.detail}
        response.data = error_body('Validation failed', reason='invalid', errors=detail, exc=exc)
        return response

    codes = exc.get_codes()
    extra = {}
    if isinstance(exc, exceptions.Throttled) and exc.wait is not None:
        extra['retry_after'] = math.ceil(exc.wait)
    response.data = error_body(
        str(exc.detail),
        reason=codes if isinstance(codes, str) else None,
        exc=exc,
        **extra,
    )
    return response
