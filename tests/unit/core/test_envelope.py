"""Unit tests for the response envelope and the fault-translation mixin."""

from __future__ import annotations

import pytest
from django.db import DatabaseError
from django.test import override_settings
from pydantic import BaseModel, ValidationError
from rest_framework.exceptions import ParseError
from rest_framework.test import APIRequestFactory
from rest_framework.views import APIView

from modules.core.envelope import (
    REDACTED_FAULT,
    EnvelopeExceptionMixin,
    describe_validation_error,
    envelope,
)
from modules.core.exceptions import NotFoundError, StorageUnavailable

pytestmark = pytest.mark.unit


class _Payload(BaseModel):
    quantity: int


class _RaisingView(EnvelopeExceptionMixin, APIView):
    """Raises whatever exception the test puts on the class."""

    authentication_classes: list = []
    permission_classes: list = []
    default_failure_message = "Operation failed."
    failure_payload = {"ProductCode": ""}
    to_raise: Exception = RuntimeError("boom")

    def get(self, request):
        raise self.to_raise


def _call(exc: Exception):
    view = type("View", (_RaisingView,), {"to_raise": exc}).as_view()
    request = APIRequestFactory().get("/anything")
    response = view(request)
    return response


def _validation_error() -> ValidationError:
    try:
        _Payload.model_validate({"quantity": "many"})
    except ValidationError as exc:
        return exc
    raise AssertionError("expected a validation error")


class TestEnvelope:
    def test_success_shape(self):
        body = envelope("Done.", ProductCode="PRD-1")
        assert body == {"message": "Done.", "ProductCode": "PRD-1", "errorMessage": ""}

    def test_key_order_is_message_payload_error(self):
        body = envelope("Done.", error_message="nope", Product={})
        assert list(body) == ["message", "Product", "errorMessage"]

    def test_describe_validation_error_names_field(self):
        text = describe_validation_error(_validation_error())
        assert text.startswith("quantity: ")


class TestEnvelopeExceptionMixin:
    def test_not_found_is_404(self):
        response = _call(NotFoundError("missing"))
        assert response.status_code == 404
        assert response.data == {
            "message": "Resource not found.",
            "errorMessage": "missing",
        }

    def test_validation_error_is_400_with_detail(self):
        response = _call(_validation_error())
        assert response.status_code == 400
        assert response.data["message"] == "Operation failed."
        assert response.data["ProductCode"] == ""
        assert "quantity" in response.data["errorMessage"]

    def test_parse_error_keeps_its_status(self):
        response = _call(ParseError("JSON parse error"))
        assert response.status_code == 400
        assert response.data["errorMessage"] == "JSON parse error"

    def test_unknown_fault_is_500_with_message(self):
        response = _call(RuntimeError("disk on fire"))
        assert response.status_code == 500
        assert response.data == {
            "message": "Operation failed.",
            "ProductCode": "",
            "errorMessage": "disk on fire",
        }

    def test_storage_faults_are_500(self):
        assert _call(StorageUnavailable("db down")).status_code == 500
        assert _call(DatabaseError("constraint")).status_code == 500

    @override_settings(EXPOSE_FAULT_DETAILS=False)
    def test_fault_text_redacted_when_disabled(self):
        response = _call(RuntimeError("secret internals"))
        assert response.status_code == 500
        assert response.data["errorMessage"] == REDACTED_FAULT
