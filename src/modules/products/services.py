"""Product service layer (Use Cases).

Orchestrates the Product aggregate, delegating persistence to the
injected ``IProductRepository``.

Rules enforced here:
- Creation stamps ``created_on == updated_on`` and ``is_active = True``;
  id and product code come from the store only.
- Updates merge only the fields present in the request and always move
  ``updated_on`` forward; id and product code are never touched.
- Delete is a soft state transition submitted through the update path.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction

from modules.products.exceptions import ProductNotFound
from modules.products.models import Product, ProductImage

if TYPE_CHECKING:
    from modules.products.dtos import (
        CreateProductDTO,
        CreateProductImageDTO,
        ProductQueryDTO,
        UpdateProductDTO,
        UpdateQuantityDTO,
    )
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Map the request onto a new product and hand it to the store."""
        product = Product(
            name=dto.name,
            category=dto.category,
            description=dto.description,
            wholesale_price=dto.wholesale_price,
            retail_price=dto.retail_price,
            quantity=dto.quantity,
            is_active=True,
        )
        product.stamp_created()
        product = self._repo.create_product(product)
        logger.info(
            "product.created",
            product_id=str(product.id),
            product_code=product.product_code,
        )
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Merge the supplied fields onto an existing product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._get_or_raise(id)
        log = logger.bind(product_id=str(id))

        changes = dto.changes()
        for field, value in changes.items():
            setattr(product, field, value)
        product.touch()

        updated = self._repo.update_product(id, product)
        if updated is None:
            raise ProductNotFound(f"Product {id} not found.")
        log.info("product.updated", fields=sorted(changes))
        return updated

    @transaction.atomic
    def update_product_quantity(self, id: str, dto: UpdateQuantityDTO) -> Product:
        """Set only the quantity of an existing product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._get_or_raise(id)
        product.quantity = dto.quantity
        product.touch()

        updated = self._repo.update_product_quantity(id, product)
        if updated is None:
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.quantity_updated", product_id=str(id), quantity=dto.quantity)
        return updated

    @transaction.atomic
    def delete_product(self, id: str) -> Product:
        """Soft-delete a product by deactivating it.

        Deleting an already inactive product succeeds and leaves it inactive.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._get_or_raise(id)
        product.deactivate()

        updated = self._repo.update_product(id, product)
        if updated is None:
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.soft_deleted", product_id=str(id))
        return updated

    @transaction.atomic
    def add_product_image(self, id: str, dto: CreateProductImageDTO) -> ProductImage:
        """Attach an image to an existing product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        image = ProductImage(
            product_id=id,
            image_url=dto.image_url,
            alt_text=dto.alt_text,
        )
        image.stamp_created()
        self._repo.insert_product_image(image)
        return image

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self) -> List[Product]:
        """Return every active product."""
        return self._repo.get_all_products()

    def search_products(self, query: ProductQueryDTO) -> List[Product]:
        """Return active products matching the query's predicates."""
        return self._repo.get_filtered_products(query)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID, active or not.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._get_or_raise(id)
        logger.info("product.retrieved", product_id=str(id))
        return product

    def next_product_code(self) -> str:
        """Preview a fresh product code without creating a product."""
        return self._repo.get_product_code()

    def _get_or_raise(self, id: str) -> Product:
        product = self._repo.get_product_by_id(id)
        if product is None:
            raise ProductNotFound(f"Product {id} not found.")
        return product
