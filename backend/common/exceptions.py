"""
Error taxonomy shared by the delivery services, and its translation to HTTP.

Services raise subclasses of the kinds below; only the DRF exception
handler at the bottom of this module knows about status codes.
"""

import logging

from django.db import IntegrityError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class DeliveryServiceError(Exception):
    """Base class for every error raised by the delivery core."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "delivery_error"


class NotFoundError(DeliveryServiceError):
    """An order, rider, partner or wallet does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "not_found"


class InvalidStateError(DeliveryServiceError):
    """The entity is not in a state that permits the operation; re-fetch before retrying."""
    status_code = status.HTTP_409_CONFLICT
    default_code = "invalid_state"


class RejectedError(DeliveryServiceError):
    """A user-actionable rejection, never a transient failure."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_code = "rejected"


class LedgerIntegrityError(DeliveryServiceError):
    """Data that must exist is missing. Fatal, surfaced as an internal error."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "integrity_error"


def delivery_exception_handler(exc, context):
    """DRF EXCEPTION_HANDLER translating the delivery error taxonomy."""
    if isinstance(exc, DeliveryServiceError):
        if isinstance(exc, LedgerIntegrityError):
            logger.error("Ledger integrity failure: %s", exc, exc_info=exc)
            message = "Internal server error"
        else:
            message = str(exc)
        code = getattr(exc, "code", None) or exc.default_code
        return Response({"error": message, "code": code}, status=exc.status_code)

    if isinstance(exc, IntegrityError):
        logger.warning("Database integrity violation: %s", exc)
        return Response(
            {"error": "Record already exists", "code": "conflict"},
            status=status.HTTP_409_CONFLICT,
        )

    return exception_handler(exc, context)
