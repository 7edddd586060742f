"""
Domain errors raised by the registration, team and catalog services.

Each class is a DRF ``APIException`` so the API layer renders it with a stable
status code without any per-view try/except. Services must raise one of these
and nothing else; database errors are translated before they leave a service.
"""

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException


class FestHubError(APIException):
    """Base class for every error the services raise on purpose."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _('The request could not be completed.')
    default_code = 'error'
    kind = 'Error'


class NotFoundError(FestHubError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = _('The requested resource was not found.')
    default_code = 'not_found'
    kind = 'NotFound'


class ValidationFailed(FestHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _('Invalid input.')
    default_code = 'invalid'
    kind = 'ValidationError'


class ConflictError(FestHubError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = _('The request conflicts with existing data.')
    default_code = 'conflict'
    kind = 'Conflict'


class ForbiddenError(FestHubError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = _('You do not have permission to perform this action.')
    default_code = 'forbidden'
    kind = 'Forbidden'


class InternalError(FestHubError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = _('An unexpected error occurred. Please try again later.')
    default_code = 'internal_error'
    kind = 'Internal'


class UnauthenticatedError(FestHubError):
    """Bad credentials or a missing/expired refresh token on the auth endpoints."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = _('Authentication credentials were not valid.')
    default_code = 'unauthenticated'
    kind = 'Unauthenticated'
