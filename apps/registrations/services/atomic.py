"""
Helpers shared by the registration and team services.

``translate_store_errors`` wraps an atomic block so callers only ever see the
domain errors of ``core.exceptions``:

    with translate_store_errors("join_team", conflict="Already registered"), transaction.atomic():
        ...

The atomic block is entered inside the translator, so the transaction has
already rolled back by the time an error is translated.
"""
import logging
import uuid
from contextlib import contextmanager

from django.db import DatabaseError, IntegrityError

from apps.users.api.serializers import PersonalInfoSerializer
from core.exceptions import FestHubError, ConflictError, InternalError, ValidationFailed

logger = logging.getLogger(__name__)


@contextmanager
def translate_store_errors(operation, conflict="The request conflicts with an existing registration"):
    try:
        yield
    except FestHubError:
        raise
    except IntegrityError as exc:
        # a unique/check constraint caught a concurrent writer
        logger.warning(f"{operation}: integrity error translated to conflict ({exc})")
        raise ConflictError(conflict) from exc
    except DatabaseError as exc:
        logger.exception(f"{operation}: unexpected database error")
        raise InternalError() from exc


def validate_personal_info(personal_info):
    """
    Returns:
        dict: cleaned personal info fields

    Raises:
        ValidationFailed: with per-field messages
    """
    serializer = PersonalInfoSerializer(data=personal_info or {})
    if not serializer.is_valid():
        raise ValidationFailed(serializer.errors)
    return serializer.validated_data


def parse_uuid(value):
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None
