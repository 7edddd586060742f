"""
Ticket and team codes, and the QR images printed on tickets.

QR codes are stored as base64 PNG data URLs on the registration so ticket
views and emails never need to render them again.
"""
import base64
import io
import logging
import secrets
import string
import uuid

import qrcode
from django.conf import settings

from core.exceptions import InternalError

logger = logging.getLogger(__name__)

TEAM_CODE_ALPHABET = string.ascii_uppercase + string.digits

QR_ERROR_CORRECTION = qrcode.constants.ERROR_CORRECT_M
QR_BOX_SIZE = 8
QR_BORDER = 2


def new_ticket_code(prefix):
    """
    Returns:
        str: e.g. ``FEST-0b7e...``; uuid4 makes collisions practically impossible
        and the unique column rejects the rest
    """
    return f"{prefix}-{uuid.uuid4()}"


def new_team_code(length=None):
    length = length or settings.FESTHUB_TEAM_CODE_LENGTH
    return "".join(secrets.choice(TEAM_CODE_ALPHABET) for _ in range(length))


def encode_ticket_qr(ticket):
    """
    Encode a ticket code as a ``data:image/png;base64,...`` URL.

    A QR failure aborts the registration that asked for it; callers generate
    the image before writing anything.

    Raises:
        InternalError: the image could not be produced
    """
    try:
        image = qrcode.make(ticket, error_correction=QR_ERROR_CORRECTION, box_size=QR_BOX_SIZE, border=QR_BORDER)
        buffer = io.BytesIO()
        image.save(buffer, "PNG")
    except Exception as exc:
        logger.exception(f"QR generation failed for ticket {ticket}: {exc}")
        raise InternalError("Could not generate the ticket QR code")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def issue_ticket(prefix):
    """
    Returns:
        tuple: (ticket code, QR data URL)
    """
    ticket = new_ticket_code(prefix)
    return ticket, encode_ticket_qr(ticket)
