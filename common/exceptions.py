"""
Typed API errors and the envelope exception handler.

Every error leaving the API is rendered as::

    {"success": false, "message": "...", "code": "..."}

By default the HTTP status is 200 so existing clients can keep branching on
``success``; set ``HMS_ERROR_STATUS_CODES=True`` to send the real status.
"""
import logging

from django.conf import settings
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = 'Not Authorized Login Again'


class HMSError(exceptions.APIException):
    """Base class for errors raised by the domain services."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request failed'
    default_code = 'error'


class NotFound(HMSError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found'
    default_code = 'not_found'


class ValidationError(HMSError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid request data'
    default_code = 'validation_error'


class Unauthorized(HMSError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = UNAUTHORIZED_MESSAGE
    default_code = 'unauthorized'


class Forbidden(HMSError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Unauthorized action'
    default_code = 'forbidden'


def envelope_status(real_status):
    """Status code to put on an error envelope."""
    if getattr(settings, 'HMS_ERROR_STATUS_CODES', False):
        return real_status
    return status.HTTP_200_OK


def error_envelope(message, code, real_status, errors=None):
    payload = {'success': False, 'message': message, 'code': code}
    if errors is not None:
        payload['errors'] = errors
    return payload, envelope_status(real_status)


def _first_error(data):
    """Flatten a serializer error structure down to one readable line."""
    if isinstance(data, dict):
        for field, value in data.items():
            message = _first_error(value)
            if field in ('non_field_errors', 'detail'):
                return message
            return f"{field}: {message}"
    if isinstance(data, (list, tuple)) and data:
        return _first_error(data[0])
    return str(data)


def envelope_exception_handler(exc, context):
    """DRF ``EXCEPTION_HANDLER`` producing the ``{success, message}`` envelope."""
    response = drf_exception_handler(exc, context)
    view = context.get('view')
    view_name = view.__class__.__name__ if view else 'unknown view'

    if response is None:
        logger.exception(f"Unhandled error in {view_name}", exc_info=exc)
        payload, status_code = error_envelope(
            'Something went wrong', 'server_error', status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        return Response(payload, status=status_code)

    errors = None
    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        code = 'unauthorized'
        message = UNAUTHORIZED_MESSAGE
    elif isinstance(exc, HMSError):
        code = exc.default_code
        message = str(exc.detail)
    elif isinstance(exc, exceptions.ValidationError):
        code = 'validation_error'
        errors = response.data
        message = _first_error(response.data)
    elif isinstance(exc, exceptions.PermissionDenied):
        code = 'forbidden'
        message = str(exc.detail)
    elif response.status_code == status.HTTP_404_NOT_FOUND:
        code = 'not_found'
        message = str(getattr(exc, 'detail', 'Not found'))
    else:
        code = getattr(exc, 'default_code', 'error')
        message = str(getattr(exc, 'detail', exc))

    if response.status_code >= 500:
        logger.error(f"{view_name} failed: {message}")
    else:
        logger.warning(f"{view_name} rejected request: {message}")

    payload, status_code = error_envelope(message, code, response.status_code, errors)
    return Response(payload, status=status_code)
