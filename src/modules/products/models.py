"""Product and ProductImage models.

Business rules implemented:
- ``product_code`` is unique and assigned by the store on creation.
- Prices are non-negative (application + DB constraint).
- Quantity is non-negative (PositiveIntegerField).
- Soft delete via ``is_active`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel, SoftDeleteModel
from modules.products.constants import (
    ALT_TEXT_MAX_LENGTH,
    IMAGE_URL_MAX_LENGTH,
    NAME_MAX_LENGTH,
)

logger = structlog.get_logger(__name__)


class Product(SoftDeleteModel):
    """Product aggregate root.

    ``product_code`` is the human-facing identifier (format
    ``PRD-YYYYMMDD-XXXXXX``); the UUIDv7 ``id`` is used for API look-ups.
    """

    product_code = models.CharField(max_length=32, unique=True, editable=False)
    name = models.CharField(max_length=NAME_MAX_LENGTH)
    category = models.PositiveIntegerField(default=0, db_index=True)
    description = models.TextField(blank=True, default="")
    wholesale_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    retail_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    quantity = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["created_on", "id"]
        indexes = [
            models.Index(fields=["is_active", "created_on"], name="products_active_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(wholesale_price__gte=0),
                name="products_wholesale_price_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(retail_price__gte=0),
                name="products_retail_price_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        errors = {}
        if self.wholesale_price is not None and self.wholesale_price < 0:
            errors["wholesale_price"] = "Wholesale price cannot be negative."
        if self.retail_price is not None and self.retail_price < 0:
            errors["retail_price"] = "Retail price cannot be negative."
        if errors:
            raise ValidationError(errors)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                product_code=self.product_code,
                name=self.name,
            )

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.product_code} - {self.name}"


class ProductImage(BaseModel):
    """Image metadata attached to exactly one product."""

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="images",
    )
    image_url = models.CharField(max_length=IMAGE_URL_MAX_LENGTH)
    alt_text = models.CharField(max_length=ALT_TEXT_MAX_LENGTH, blank=True, default="")

    class Meta:
        db_table = "product_images"
        ordering = ["created_on", "id"]

    def __str__(self) -> str:
        return f"{self.product_id}: {self.image_url}"
