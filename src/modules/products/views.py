"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.  Each
action maps the request into a DTO, makes one service call and wraps
the result in the response envelope.  Faults are translated once, by
``EnvelopeExceptionMixin.handle_exception``.
"""

from __future__ import annotations

from typing import Any, Dict

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.parsers import JSONParser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.reverse import reverse
from rest_framework.viewsets import ViewSet

from modules.core.envelope import EnvelopeExceptionMixin, envelope
from modules.core.exceptions import NotFoundError
from modules.products.dtos import (
    CreateProductDTO,
    CreateProductImageDTO,
    ProductImageOutputDTO,
    ProductOutputDTO,
    ProductQueryDTO,
    UpdateProductDTO,
    UpdateQuantityDTO,
)
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

COLLECTION_ACTIONS = {"list", "search"}


class ProductViewSet(EnvelopeExceptionMixin, ViewSet):
    """ViewSet for Product CRUD operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).  The
    service is built per request (DRF instantiates the view per request).
    """

    parser_classes = [JSONParser]

    failure_messages = {
        "list": "An error occurred while retrieving the products.",
        "search": "An error occurred while retrieving the products.",
        "retrieve": "An error occurred while retrieving the product.",
        "create": "Product creation failed.",
        "update": "An error occurred while updating the product.",
        "destroy": "An error occurred while deleting the product.",
        "quantity": "An error occurred while updating the product quantity.",
        "code": "An error occurred while generating a product code.",
        "images": "An error occurred while adding the product image.",
    }

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_failure_payload(self) -> Dict[str, Any]:
        if getattr(self, "action", None) in COLLECTION_ACTIONS:
            return {}
        return {"ProductCode": ""}

    def get_not_found_body(self, exc: NotFoundError) -> Dict[str, Any]:
        return envelope(
            "Product not found.",
            error_message="Invalid product ID.",
            ProductCode="",
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /products"""
        products = self._service.list_products()
        if not products:
            return Response(
                envelope("No products found.", error_message="No data available."),
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(
            envelope(
                "Products retrieved successfully.",
                Products=[ProductOutputDTO.from_entity(p).to_json() for p in products],
            )
        )

    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request: Request) -> Response:
        """GET /products/search

        Query parameters: ``searchText``, ``category``,
        ``minWholesalePrice``, ``maxWholesalePrice``, ``minRetailPrice``,
        ``maxRetailPrice``, ``quantity``, ``sortBy``, ``sortDescending``,
        ``pageNumber``, ``pageSize``.  An empty result is still a 200.
        """
        query = ProductQueryDTO.model_validate(request.query_params.dict())
        products = self._service.search_products(query)
        return Response(
            envelope(
                "Products retrieved successfully.",
                Products=[ProductOutputDTO.from_entity(p).to_json() for p in products],
            )
        )

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /products/{pk}"""
        product = self._service.get_product(pk)
        return Response(
            envelope(
                "Product retrieved successfully.",
                Product=ProductOutputDTO.from_entity(product).to_json(),
            )
        )

    @action(detail=False, methods=["get"], url_path="code")
    def code(self, request: Request) -> Response:
        """GET /products/code"""
        return Response(
            envelope(
                "Product code generated successfully.",
                ProductCode=self._service.next_product_code(),
            )
        )

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /products"""
        dto = CreateProductDTO.model_validate(request.data)
        product = self._service.create_product(dto)
        location = reverse("product-detail", kwargs={"pk": str(product.id)}, request=request)
        return Response(
            envelope("Product created successfully.", ProductCode=product.product_code),
            status=status.HTTP_201_CREATED,
            headers={"Location": location},
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /products/{pk}"""
        dto = UpdateProductDTO.model_validate(request.data)
        product = self._service.update_product(pk, dto)
        return Response(
            envelope("Product updated successfully.", ProductCode=product.product_code)
        )

    @action(detail=True, methods=["patch"], url_path="quantity")
    def quantity(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /products/{pk}/quantity

        Accepts ``{"quantity": N}``.
        """
        dto = UpdateQuantityDTO.model_validate(request.data)
        product = self._service.update_product_quantity(pk, dto)
        return Response(
            envelope(
                "Product quantity updated successfully.",
                ProductCode=product.product_code,
            )
        )

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /products/{pk} (soft delete)"""
        product = self._service.delete_product(pk)
        return Response(
            envelope("Product deleted successfully.", ProductCode=product.product_code)
        )

    @action(detail=True, methods=["post"], url_path="images")
    def images(self, request: Request, pk: str | None = None) -> Response:
        """POST /products/{pk}/images"""
        dto = CreateProductImageDTO.model_validate(request.data)
        image = self._service.add_product_image(pk, dto)
        return Response(
            envelope(
                "Product image added successfully.",
                Image=ProductImageOutputDTO.from_entity(image).to_json(),
            ),
            status=status.HTTP_201_CREATED,
        )
