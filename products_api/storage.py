from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class Product:
    """A product as seen by callers. Zero values double as "unset"."""

    name: str = ""
    type: str = ""
    count: int = 0
    price: float = 0.0
    id: int = 0


class ProductStorageError(Exception):
    """Base class for every error a ProductStorage raises."""


class ProductNotFoundError(ProductStorageError):
    pass


class ProductNotUniqueError(ProductStorageError):
    pass


class ProductInternalError(ProductStorageError):
    pass


class ProductStorage(ABC):
    """
    Persistence contract for products.

    Implementations only raise ProductStorageError subclasses; the original
    driver error, if any, is chained as __cause__.
    """

    @abstractmethod
    def fetch_by_id(self, product_id: int) -> Product:
        """Return the product with the given id or raise ProductNotFoundError."""

    @abstractmethod
    def insert(self, product: Product) -> None:
        """Persist a new product and assign the generated id to ``product.id``."""

    @abstractmethod
    def update(self, product: Product) -> None:
        """Overwrite name/type/count/price of the row identified by ``product.id``."""

    @abstractmethod
    def delete(self, product_id: int) -> None:
        """Remove the product with the given id."""
