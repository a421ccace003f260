# apps/training/views/errors.py
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from ..exceptions import TrainingError

logger = logging.getLogger(__name__)


def training_exception_handler(exc, context):
    """
    Renders engine errors as {"error": <code>, "detail": <message>} with
    the status the error declares. Anything else goes to DRF's handler.
    """
    if isinstance(exc, TrainingError):
        view = context.get("view")
        logger.info(f"{exc.code} in {view.__class__.__name__ if view else 'view'}: {exc.detail}")
        return Response({"error": exc.code, "detail": exc.detail}, status=exc.http_status)
    return exception_handler(exc, context)


def invalid_payload(errors):
    return Response({"error": "invalid_payload", "detail": errors}, status=status.HTTP_400_BAD_REQUEST)
