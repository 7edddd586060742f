"""
Custom DRF exception handler.

Every error leaves the API in one envelope:

    {
        "success": false,
        "error": {"code": "conflict", "message": "...", "details": {...}}
    }

The handler also keeps CORS working with cookie based JWT auth: DRF adds a
'WWW-Authenticate: Bearer realm="api"' header to 401 responses, which makes
browsers drop the response before CORS headers are read. The header is
removed from 401 responses.

Exceptions DRF does not know about (anything that escaped a view) are logged
and rendered as a generic 500 so store or library error text never reaches
the client.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import InternalError

logger = logging.getLogger(__name__)


def _first_message(detail):
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return ''
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def _error_code(exc, response):
    codes = getattr(exc, 'get_codes', None)
    if codes is not None:
        codes = codes()
        if isinstance(codes, str):
            return codes
    if response.status_code == status.HTTP_400_BAD_REQUEST:
        return 'invalid'
    return getattr(exc, 'default_code', 'error')


def custom_exception_handler(exc, context):
    """
    Wrap DRF's default handler with the common error envelope.

    Args:
        exc: The exception that was raised
        context: Dictionary with 'view' and 'request' keys

    Returns:
        Response with the error envelope
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {exc}")
        internal = InternalError()
        return Response(
            {
                'success': False,
                'error': {
                    'code': internal.default_code,
                    'message': str(internal.detail),
                    'details': None,
                },
            },
            status=internal.status_code,
        )

    # cookie auth: the header breaks CORS on 401
    if response.status_code == status.HTTP_401_UNAUTHORIZED:
        response.headers.pop('WWW-Authenticate', None)

    detail = response.data
    details = detail if isinstance(detail, (dict, list)) and not (
        isinstance(detail, dict) and set(detail.keys()) == {'detail'}
    ) else None

    response.data = {
        'success': False,
        'error': {
            'code': _error_code(exc, response),
            'message': _first_message(detail),
            'details': details,
        },
    }
    return response
