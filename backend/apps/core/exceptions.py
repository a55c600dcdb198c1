"""
Domain exceptions and the API error envelope.

Services raise these exceptions; the DRF exception handler below turns
every error (ours and DRF's own) into a single response shape:

    {"success": false, "message": "...", "errors": {...}}

Best practices demonstrated:
- Exceptions carry the HTTP status they map to
- One place formats error responses
- Unexpected errors are logged with a traceback
"""

import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class CatalogError(exceptions.APIException):
    """Base class for errors raised by the service layer."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request could not be processed.'
    default_code = 'error'

    def __init__(self, message=None, errors=None):
        self.message = message or str(self.default_detail)
        self.errors = errors or {}
        super().__init__(detail=self.message)


class ValidationFailed(CatalogError):
    """Malformed or out-of-range input. `errors` maps field -> messages."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Validation failed.'
    default_code = 'validation_failed'

    @classmethod
    def for_field(cls, field, message):
        return cls(message, errors={field: [message]})


class NotFound(CatalogError):
    """A referenced entity does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class Conflict(CatalogError):
    """A guarded transition is not permitted in the current state."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Operation not permitted.'
    default_code = 'conflict'


class IntegrityConflict(Conflict):
    """A unique value (SKU, slug, key) is already taken."""
    default_detail = 'Value already exists.'
    default_code = 'integrity_conflict'

    def __init__(self, field, message=None):
        self.field = field
        message = message or f'{field} already exists.'
        super().__init__(message, errors={field: [message]})


def _flatten_message(detail):
    """Pick a human-readable message out of a DRF error detail."""
    if isinstance(detail, dict):
        if 'detail' in detail:
            return str(detail['detail'])
        return 'Validation failed.'
    if isinstance(detail, list):
        return str(detail[0]) if detail else 'Validation failed.'
    return str(detail)


def api_exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER producing the error envelope.

    Configured in settings as REST_FRAMEWORK['EXCEPTION_HANDLER'].
    """
    if isinstance(exc, CatalogError):
        return _envelope(exc.status_code, exc.message, exc.errors, exc)

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(
            f"Unhandled exception in {view.__class__.__name__ if view else 'unknown view'}: {exc}",
            exc_info=True
        )
        return None

    detail = response.data
    if isinstance(exc, exceptions.ValidationError):
        errors = detail if isinstance(detail, dict) else {'non_field_errors': detail}
        message = 'Validation failed.'
    elif isinstance(exc, Http404):
        errors = {}
        message = 'Not found.'
    elif isinstance(exc, PermissionDenied):
        errors = {}
        message = 'You do not have permission to perform this action.'
    else:
        errors = {}
        message = _flatten_message(detail)

    response.data = {
        'success': False,
        'message': message,
        'errors': errors,
    }
    return response


def _envelope(status_code, message, errors, exc):
    if isinstance(exc, Conflict):
        logger.warning(f"{exc.__class__.__name__}: {message}")

    return Response(
        {'success': False, 'message': message, 'errors': errors},
        status=status_code
    )
