"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising HTTP-level exceptions; the Service Layer decides
how to translate a missing entity into an API response.  Connectivity
failures surface as ``StorageUnavailable``.
"""

from __future__ import annotations

import secrets
from typing import Any, Dict, List, Optional

import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from modules.core.exceptions import translate_storage_errors
from modules.products.constants import (
    DEFAULT_SORT_FIELD,
    PRODUCT_CODE_MAX_RETRIES,
    PRODUCT_CODE_PREFIX,
    SORTABLE_FIELDS,
)
from modules.products.dtos import ProductQueryDTO
from modules.products.exceptions import ProductCodeGenerationError, ProductNotFound
from modules.products.filters import ProductFilter
from modules.products.models import Product, ProductImage
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Generic contract
    # ------------------------------------------------------------------

    @translate_storage_errors
    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    @translate_storage_errors
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"is_active": True}
            {"name__icontains": "widget"}
        """
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @translate_storage_errors
    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info(
            "product.saved",
            product_id=str(entity.id),
            product_code=entity.product_code,
        )
        return entity

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_all_products(self) -> List[Product]:
        return self.list({"is_active": True})

    def get_product_by_id(self, id: str) -> Optional[Product]:
        return self.get_by_id(id)

    @translate_storage_errors
    def get_filtered_products(self, query: ProductQueryDTO) -> List[Product]:
        """Apply filters, then ordering, then offset pagination.

        Only active products are considered.  A page past the end of the
        result set yields an empty list.
        """
        filterset = ProductFilter(
            data=self._filter_data(query),
            queryset=Product.objects.active(),
        )
        queryset = filterset.qs

        order_field = (
            SORTABLE_FIELDS[query.sort_by.lower()] if query.sort_by else DEFAULT_SORT_FIELD
        )
        direction = "-" if query.sort_descending else ""
        queryset = queryset.order_by(f"{direction}{order_field}", f"{direction}id")

        if query.is_paginated:
            page_size = self._clamp_page_size(query.page_size)
            page_number = max(query.page_number or 1, 1)
            offset = (page_number - 1) * page_size
            # A page past the end is empty; its OFFSET never reaches the database.
            if offset >= queryset.count():
                return []
            queryset = queryset[offset : offset + page_size]

        return list(queryset)

    @staticmethod
    def _filter_data(query: ProductQueryDTO) -> Dict[str, Any]:
        data = {
            "search": query.search_text,
            "category": query.category,
            "min_wholesale_price": query.min_wholesale_price,
            "max_wholesale_price": query.max_wholesale_price,
            "min_retail_price": query.min_retail_price,
            "max_retail_price": query.max_retail_price,
            "quantity": query.quantity,
        }
        return {key: value for key, value in data.items() if value is not None}

    @staticmethod
    def _clamp_page_size(page_size: Optional[int]) -> int:
        max_size = settings.MAX_PAGE_SIZE
        if page_size is None:
            return min(settings.DEFAULT_PAGE_SIZE, max_size)
        return min(max(page_size, 1), max_size)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @translate_storage_errors
    @transaction.atomic
    def create_product(self, product: Product) -> Product:
        """Assign a fresh product code and insert the product."""
        product.product_code = self.get_product_code()
        product.save()
        logger.info(
            "product.inserted",
            product_id=str(product.id),
            product_code=product.product_code,
        )
        return product

    @translate_storage_errors
    @transaction.atomic
    def update_product(self, id: str, product: Product) -> Optional[Product]:
        """Copy every non-key field of ``product`` onto the stored row.

        ``created_on`` is never copied.  Returns ``None`` when ``id`` does
        not resolve.
        """
        stored = self.get_by_id(id)
        if stored is None:
            return None
        for field in Product._meta.concrete_fields:
            if field.primary_key or field.name == "created_on":
                continue
            setattr(stored, field.attname, getattr(product, field.attname))
        stored.save()
        logger.info(
            "product.saved",
            product_id=str(stored.id),
            product_code=stored.product_code,
        )
        return stored

    @translate_storage_errors
    @transaction.atomic
    def update_product_quantity(
        self, id: str, updated_product: Product
    ) -> Optional[Product]:
        """Write only ``quantity`` (plus ``updated_on``) to the stored row."""
        stored = self.get_by_id(id)
        if stored is None:
            return None
        stored.quantity = updated_product.quantity
        if updated_product.updated_on is not None:
            stored.updated_on = updated_product.updated_on
        else:
            stored.touch()
        stored.save(update_fields=["quantity"])
        logger.info(
            "product.quantity_saved",
            product_id=str(stored.id),
            quantity=stored.quantity,
        )
        return stored

    @translate_storage_errors
    @transaction.atomic
    def insert_product_image(self, image: ProductImage) -> None:
        if self.get_by_id(str(image.product_id)) is None:
            raise ProductNotFound(f"Product {image.product_id} not found.")
        image.save()
        logger.info(
            "product.image_inserted",
            product_id=str(image.product_id),
            image_id=str(image.id),
        )

    # ------------------------------------------------------------------
    # Product code generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_product_code(prefix: str = PRODUCT_CODE_PREFIX) -> str:
        """Generate a candidate code: ``PRD-YYYYMMDD-XXXXXX``."""
        now = timezone.now()
        suffix = secrets.token_hex(3).upper()
        return f"{prefix}-{now:%Y%m%d}-{suffix}"

    @translate_storage_errors
    def get_product_code(self) -> str:
        """Return a generated code not yet used by any product.

        Raises:
            ProductCodeGenerationError: after ``PRODUCT_CODE_MAX_RETRIES``
                consecutive collisions.
        """
        prefix = getattr(settings, "PRODUCT_CODE_PREFIX", PRODUCT_CODE_PREFIX)
        retries = getattr(settings, "PRODUCT_CODE_MAX_RETRIES", PRODUCT_CODE_MAX_RETRIES)
        for _attempt in range(retries):
            candidate = self.generate_product_code(prefix)
            if not Product.objects.filter(product_code=candidate).exists():
                return candidate
            logger.warning("product.code_collision", candidate=candidate)
        raise ProductCodeGenerationError(
            f"Failed to generate unique product_code after {retries} attempts"
        )
