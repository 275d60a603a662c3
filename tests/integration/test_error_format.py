"""Integration tests for the enveloped error responses."""

from unittest.mock import patch

import pytest
from django.db import OperationalError
from django.test import override_settings

from modules.core.envelope import REDACTED_FAULT
from modules.core.exceptions import StorageUnavailable
from modules.products.services import ProductService

pytestmark = pytest.mark.integration


class TestEnvelopedErrors:
    def test_malformed_json_is_400(self, api_client):
        response = api_client.post("/products", data="{", content_type="application/json")
        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Product creation failed."
        assert data["ProductCode"] == ""
        assert data["errorMessage"]

    def test_unsupported_media_type_is_enveloped(self, api_client):
        response = api_client.post("/products", data="name=x", content_type="text/plain")
        assert response.status_code == 415
        assert set(response.json()) == {"message", "ProductCode", "errorMessage"}

    def test_json_array_body_is_400(self, api_client):
        response = api_client.post("/products", data=[1, 2], format="json")
        assert response.status_code == 400

    def test_unexpected_fault_is_500_with_text(self, api_client):
        with patch.object(ProductService, "list_products", side_effect=RuntimeError("boom")):
            response = api_client.get("/products")
        assert response.status_code == 500
        assert response.json() == {
            "message": "An error occurred while retrieving the products.",
            "errorMessage": "boom",
        }

    def test_storage_outage_is_500(self, api_client):
        with patch.object(
            ProductService,
            "create_product",
            side_effect=StorageUnavailable("database unavailable"),
        ):
            response = api_client.post(
                "/products",
                {"name": "Widget", "wholesalePrice": "1.00", "retailPrice": "2.00"},
                format="json",
            )
        assert response.status_code == 500
        assert response.json()["message"] == "Product creation failed."
        assert response.json()["errorMessage"] == "database unavailable"

    def test_database_error_during_lookup_is_500(self, api_client):
        with patch(
            "modules.products.repositories.django_repository.Product.objects.filter",
            side_effect=OperationalError("connection refused"),
        ):
            response = api_client.get(
                "/products/0191f0a0-0000-7000-8000-000000000000"
            )
        assert response.status_code == 500
        assert response.json()["errorMessage"] == "connection refused"

    @override_settings(EXPOSE_FAULT_DETAILS=False)
    def test_fault_text_redacted_when_disabled(self, api_client):
        with patch.object(ProductService, "get_product", side_effect=RuntimeError("secret")):
            response = api_client.get("/products/0191f0a0-0000-7000-8000-000000000000")
        assert response.status_code == 500
        assert response.json()["errorMessage"] == REDACTED_FAULT
