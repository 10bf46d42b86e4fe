"""
Unified exception handler.

Hooked into DRF through the EXCEPTION_HANDLER setting. Every failure leaves
the API in one shape so clients can branch on a single field:

{
    "type":    "validation_error" | "not_found" | "conflict" | "error",
    "code":    "PATIENT_DUPLICATE",
    "message": "Patient already exists ...",
    "detail":  { ... }  // optional
}

Successful responses never carry a "type" field.
"""
import logging

from django.http import JsonResponse
from rest_framework.exceptions import ParseError
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.views import exception_handler as drf_default_handler

from .exceptions import BaseAppException

logger = logging.getLogger(__name__)


def unified_exception_handler(exc, context):
    """
    DRF exception handler entry point.

    Priority:
    1. BaseAppException and subclasses -> unified body
    2. DRF ValidationError / ParseError -> converted to the unified body
    3. anything else -> DRF default handling
    """

    # --- 1. our own hierarchy ---
    if isinstance(exc, BaseAppException):
        if exc.http_status >= 500:
            logger.error('Application error: type=%s code=%s', exc.type, exc.code, exc_info=exc)
        else:
            logger.warning('Request rejected: type=%s code=%s', exc.type, exc.code)

        body = {
            'type': exc.type,
            'code': exc.code,
            'message': exc.message,
        }
        if exc.detail is not None:
            body['detail'] = exc.detail
        return JsonResponse(body, status=exc.http_status)

    # --- 2. DRF's own request errors ---
    if isinstance(exc, (DRFValidationError, ParseError)):
        body = {
            'type': 'validation_error',
            'code': 'VALIDATION_ERROR',
            'message': 'Request validation failed',
            'detail': exc.detail,
        }
        return JsonResponse(body, status=400)

    # --- 3. everything else ---
    return drf_default_handler(exc, context)
