"""
Domain model for Product entity.
Database-agnostic representation of a catalog product created from a CSV row.
"""
from datetime import datetime, timezone
from typing import Optional


class Product:
    """Domain model representing a seller's catalog product."""

    def __init__(
        self,
        product_id: str,
        seller_id: str,
        name: str,
        description: str,
        price: float,
        category: str,
        stock: float,
        image_url: str = "",
        batch_job_id: Optional[str] = None,
        created_at: Optional[datetime] = None
    ):
        self.product_id = product_id
        self.seller_id = seller_id
        self.name = name
        self.description = description
        self.price = price
        self.category = category
        self.stock = stock
        self.image_url = image_url
        self.batch_job_id = batch_job_id
        self.created_at = created_at or datetime.now(timezone.utc)

    def __repr__(self):
        return f"Product(name={self.name}, price={self.price}, seller_id={self.seller_id})"
