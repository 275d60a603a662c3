"""Product repository interface.

Extends ``IRepository[Product]`` with the catalogue operations:
active listing, filtered query, product-code generation, the
quantity-only write path and image insertion.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.dtos import ProductQueryDTO
    from modules.products.models import Product, ProductImage


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate.

    Not-found is signalled with ``None``, never an exception, except for
    ``insert_product_image`` which has no result to carry it.
    """

    @abstractmethod
    def get_all_products(self) -> List[Product]:
        """Return every active product."""

    @abstractmethod
    def get_filtered_products(self, query: ProductQueryDTO) -> List[Product]:
        """Return active products matching all supplied predicates."""

    @abstractmethod
    def get_product_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by id regardless of its active state."""

    @abstractmethod
    def create_product(self, product: Product) -> Product:
        """Assign a unique product code, persist and return the product."""

    @abstractmethod
    def update_product(self, id: str, product: Product) -> Optional[Product]:
        """Replace the stored product's fields with those of ``product``."""

    @abstractmethod
    def update_product_quantity(
        self, id: str, updated_product: Product
    ) -> Optional[Product]:
        """Write only the quantity of ``updated_product`` to the stored product."""

    @abstractmethod
    def get_product_code(self) -> str:
        """Produce a fresh, unused product code."""

    @abstractmethod
    def insert_product_image(self, image: ProductImage) -> None:
        """Persist an image for an existing product.

        Raises:
            ProductNotFound: if the referenced product does not exist.
        """
