# apps/core/exceptions.py
import logging

from django.conf import settings
from django.db import DatabaseError
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response
from rest_framework import status

from apps.core.api_exceptions import UpstreamError

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Thin wrapper around DRF's default handler:
    - Uses default mapping
    - Store failures are surfaced as UpstreamError
    - Normalizes payload to {"message": "...", "error": ...}
    - 5xx detail only leaves the server when DEBUG is on
    """
    if isinstance(exc, DatabaseError):
        logger.error(f"[API] store failure: {exc}", exc_info=True)
        exc = UpstreamError(detail=str(exc))

    resp = drf_exception_handler(exc, context)
    if resp is None:
        # Not handled by DRF default (e.g., plain Exception)
        logger.exception("[API] unhandled error", exc_info=exc)
        return Response(
            {
                "message": "An unexpected error occurred.",
                "error": str(exc) if settings.DEBUG else None,
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if resp.status_code >= 500:
        return Response(
            {
                "message": UpstreamError.default_detail,
                "error": resp.data if settings.DEBUG else None,
            },
            status=resp.status_code,
        )

    data = resp.data
    # Normalize common shapes
    message = None
    if isinstance(data, dict):
        message = data.get("detail") or data.get("message")
        if message is None and data:
            first = next(iter(data.values()))
            message = first[0] if isinstance(first, list) and first else first
    elif isinstance(data, list) and data:
        message = data[0]

    normalized = {
        "message": message or "Request failed.",
        "error": data,
    }
    return Response(normalized, status=resp.status_code)
