"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (Views) and the
Service layer.  DTOs are immutable (``frozen=True``).

Public field names are camelCase (``wholesalePrice``); the snake_case
Python names are accepted as well.

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
- ``UpdateQuantityDTO``: input for the quantity-only update.
- ``CreateProductImageDTO``: input for attaching an image.
- ``ProductQueryDTO``: filter / sort / pagination parameters.
- ``ProductOutputDTO`` / ``ProductImageOutputDTO``: outbound shapes.

Neither input DTO declares ``productId`` or ``productCode``: those are
never caller-writable, and unknown keys are ignored.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from modules.products.constants import (
    ALT_TEXT_MAX_LENGTH,
    IMAGE_URL_MAX_LENGTH,
    MAX_COUNT,
    NAME_MAX_LENGTH,
    SORTABLE_FIELDS,
)

if TYPE_CHECKING:
    from modules.products.models import Product, ProductImage


Money = Annotated[Decimal, Field(max_digits=12, decimal_places=2)]
Count = Annotated[int, Field(le=MAX_COUNT)]
Name = Annotated[str, Field(max_length=NAME_MAX_LENGTH)]

_DTO_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


def _non_negative(v, label: str):
    if v is not None and v < 0:
        raise ValueError(f"{label} cannot be negative.")
    return v


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` is a non-empty string (stripped) of at most 255 characters.
    - prices are non-negative decimals.
    - ``quantity`` and ``category`` are non-negative and fit the
      integer columns (``MAX_COUNT``).
    """

    model_config = _DTO_CONFIG

    name: Name
    category: Count = 0
    description: str = ""
    wholesale_price: Money
    retail_price: Money
    quantity: Count = 0

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()

    @field_validator("wholesale_price")
    @classmethod
    def wholesale_price_non_negative(cls, v: Decimal) -> Decimal:
        return _non_negative(v, "Wholesale price")

    @field_validator("retail_price")
    @classmethod
    def retail_price_non_negative(cls, v: Decimal) -> Decimal:
        return _non_negative(v, "Retail price")

    @field_validator("quantity")
    @classmethod
    def quantity_non_negative(cls, v: int) -> int:
        return _non_negative(v, "Quantity")

    @field_validator("category")
    @classmethod
    def category_non_negative(cls, v: int) -> int:
        return _non_negative(v, "Category")


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only the fields present in the request
    (``model_fields_set``) are merged onto the stored product.
    """

    model_config = _DTO_CONFIG

    name: Name | None = None
    category: Count | None = None
    description: str | None = None
    wholesale_price: Money | None = None
    retail_price: Money | None = None
    quantity: Count | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip() if v is not None else v

    @field_validator("wholesale_price")
    @classmethod
    def wholesale_price_non_negative(cls, v: Decimal | None) -> Decimal | None:
        return _non_negative(v, "Wholesale price")

    @field_validator("retail_price")
    @classmethod
    def retail_price_non_negative(cls, v: Decimal | None) -> Decimal | None:
        return _non_negative(v, "Retail price")

    @field_validator("quantity")
    @classmethod
    def quantity_non_negative(cls, v: int | None) -> int | None:
        return _non_negative(v, "Quantity")

    @field_validator("category")
    @classmethod
    def category_non_negative(cls, v: int | None) -> int | None:
        return _non_negative(v, "Category")

    def changes(self) -> dict:
        """Fields explicitly supplied by the caller, excluding nulls."""
        return {
            field: value
            for field, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class UpdateQuantityDTO(BaseModel):
    """Immutable DTO for the quantity-only update (``{"quantity": N}``)."""

    model_config = _DTO_CONFIG

    quantity: Count

    @field_validator("quantity")
    @classmethod
    def quantity_non_negative(cls, v: int) -> int:
        return _non_negative(v, "Quantity")


class CreateProductImageDTO(BaseModel):
    """Immutable DTO for attaching an image to a product.

    ``image_url`` is required and stripped; ``alt_text`` defaults to empty.
    """

    model_config = _DTO_CONFIG

    image_url: Annotated[str, Field(max_length=IMAGE_URL_MAX_LENGTH)]
    alt_text: Annotated[str, Field(max_length=ALT_TEXT_MAX_LENGTH)] = ""

    @field_validator("image_url")
    @classmethod
    def image_url_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Image URL must not be empty.")
        return v.strip()


class ProductQueryDTO(BaseModel):
    """Filter, sort and pagination parameters for the filtered listing.

    Every field is optional; ``None`` imposes no constraint.  ``sort_by``
    must name an entry of ``SORTABLE_FIELDS`` (case-insensitive).  Page
    bounds are clamped by the repository, not here.
    """

    model_config = _DTO_CONFIG

    search_text: str | None = None
    category: Count | None = None
    min_wholesale_price: Money | None = None
    max_wholesale_price: Money | None = None
    min_retail_price: Money | None = None
    max_retail_price: Money | None = None
    quantity: Count | None = None
    sort_by: str | None = None
    sort_descending: bool | None = None
    page_number: int | None = None
    page_size: int | None = None

    @field_validator("search_text", "sort_by")
    @classmethod
    def blank_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("sort_by")
    @classmethod
    def sort_by_must_be_allowed(cls, v: str | None) -> str | None:
        if v is not None and v.lower() not in SORTABLE_FIELDS:
            allowed = ", ".join(sorted({k for k in SORTABLE_FIELDS if "_" not in k}))
            raise ValueError(f"Cannot sort by '{v}'. Allowed: {allowed}.")
        return v

    @property
    def is_paginated(self) -> bool:
        return self.page_number is not None or self.page_size is not None


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class ProductOutputDTO(BaseModel):
    """Immutable DTO for product API responses."""

    model_config = _DTO_CONFIG

    product_id: UUID
    product_code: str
    name: str
    category: int
    description: str
    wholesale_price: Decimal
    retail_price: Decimal
    quantity: int
    is_active: bool
    created_on: datetime
    updated_on: datetime

    @classmethod
    def from_entity(cls, product: Product) -> ProductOutputDTO:
        """Build an output DTO from a Product model instance."""
        return cls(
            product_id=product.id,
            product_code=product.product_code,
            name=product.name,
            category=product.category,
            description=product.description,
            wholesale_price=product.wholesale_price,
            retail_price=product.retail_price,
            quantity=product.quantity,
            is_active=product.is_active,
            created_on=product.created_on,
            updated_on=product.updated_on,
        )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class ProductImageOutputDTO(BaseModel):
    """Immutable DTO for image API responses."""

    model_config = _DTO_CONFIG

    image_id: UUID
    product_id: UUID
    image_url: str
    alt_text: str
    created_on: datetime

    @classmethod
    def from_entity(cls, image: ProductImage) -> ProductImageOutputDTO:
        return cls(
            image_id=image.id,
            product_id=image.product_id,
            image_url=image.image_url,
            alt_text=image.alt_text,
            created_on=image.created_on,
        )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
