"""Uniform response envelope and the single fault-translation point.

Every response body has the shape::

    {"message": "...", <payload key>: ..., "errorMessage": ""}

``EnvelopeExceptionMixin`` hooks DRF's ``handle_exception`` so views
raise typed errors and never build fault envelopes themselves.
"""

from __future__ import annotations

from typing import Any, Dict

import structlog
from django.conf import settings
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response

from modules.core.exceptions import NotFoundError

logger = structlog.get_logger(__name__)

REDACTED_FAULT = "Internal server error."


def envelope(message: str, error_message: str = "", **payload: Any) -> Dict[str, Any]:
    """Build ``{"message", **payload, "errorMessage"}`` in that key order."""
    body: Dict[str, Any] = {"message": message}
    body.update(payload)
    body["errorMessage"] = error_message
    return body


def describe_validation_error(exc: PydanticValidationError) -> str:
    """Flatten Pydantic errors into ``field: message; ...``."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "body"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


class EnvelopeExceptionMixin:
    """Render every fault raised by a view action as an envelope.

    Subclasses declare:

    - ``failure_messages``: action name -> message used for 400/500 bodies.
    - ``default_failure_message``: fallback for unlisted actions.
    - ``failure_payload``: extra keys merged into failure bodies
      (override ``get_failure_payload`` for per-action control).
    - ``get_not_found_body(exc)``: body for ``NotFoundError``.
    """

    failure_messages: Dict[str, str] = {}
    default_failure_message = "An error occurred while processing the request."
    failure_payload: Dict[str, Any] = {}

    def get_failure_message(self) -> str:
        action = getattr(self, "action", None)
        return self.failure_messages.get(action, self.default_failure_message)

    def get_failure_payload(self) -> Dict[str, Any]:
        return dict(self.failure_payload)

    def get_not_found_body(self, exc: NotFoundError) -> Dict[str, Any]:
        return envelope("Resource not found.", error_message=str(exc))

    def failure_body(self, error_message: str) -> Dict[str, Any]:
        return envelope(
            self.get_failure_message(),
            error_message=error_message,
            **self.get_failure_payload(),
        )

    def handle_exception(self, exc: Exception) -> Response:
        action = getattr(self, "action", None)

        if isinstance(exc, NotFoundError):
            logger.info("request.not_found", action=action, detail=str(exc))
            return Response(self.get_not_found_body(exc), status=status.HTTP_404_NOT_FOUND)

        if isinstance(exc, PydanticValidationError):
            detail = describe_validation_error(exc)
            logger.warning("request.validation_failed", action=action, detail=detail)
            return Response(self.failure_body(detail), status=status.HTTP_400_BAD_REQUEST)

        if isinstance(exc, APIException):
            # Parse errors, unsupported media types, disallowed methods.
            response = super().handle_exception(exc)
            response.data = self.failure_body(str(exc.detail))
            logger.warning(
                "request.rejected",
                action=action,
                status_code=response.status_code,
            )
            return response

        logger.exception("request.failed", action=action, error=str(exc))
        return Response(
            self.failure_body(self._fault_text(exc)),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @staticmethod
    def _fault_text(exc: Exception) -> str:
        if getattr(settings, "EXPOSE_FAULT_DETAILS", True):
            return str(exc)
        return REDACTED_FAULT

