from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError

from core.exceptions import NotFoundError


def get_or_not_found(queryset, message, **lookup):
    """
    Fetch one row or raise ``NotFoundError(message)``.

    Malformed ids (e.g. a non-UUID string) are treated as missing rows rather
    than leaking a database conversion error.

    Args:
        queryset: model class, manager or queryset to search
        message: human readable message for the 404
        **lookup: filter arguments
    """
    if hasattr(queryset, "_default_manager"):
        queryset = queryset._default_manager.all()
    try:
        return queryset.get(**lookup)
    except (ObjectDoesNotExist, ValueError, DjangoValidationError):
        raise NotFoundError(message)
