"""
Abstract base class for product repositories.
Defines the contract the ingestion pipeline needs from the product store.
"""
from abc import ABC, abstractmethod
from typing import List
from catalog_ingest.models.product_model import Product


class ProductRepository(ABC):
    """Abstract repository interface for product persistence."""

    @abstractmethod
    def add_products_bulk(self, products: List[Product]) -> int:
        """Insert many products as one unit of work; return the number written."""
        pass
