"""
DynamoDB Repository for product storage.
Handles bulk product inserts coming from CSV chunks.
"""
from decimal import Decimal
from typing import List
import boto3
from botocore.exceptions import ClientError
from catalog_ingest.core import config
from catalog_ingest.core.exceptions import DynamoDBException
from catalog_ingest.models.product_model import Product
from catalog_ingest.repositories.product_repository import ProductRepository

# Rows written per batch_writer session
INSERT_CHUNK_SIZE = 1000


class DynamoProductRepository(ProductRepository):
    """Repository for product DynamoDB operations."""

    def __init__(self):
        self.dynamodb = boto3.resource('dynamodb', region_name=config.settings.aws_region)
        self.table = self.dynamodb.Table(config.settings.products_table_name)

    def add_products_bulk(self, products: List[Product]) -> int:
        """
        Save multiple products.
        DynamoDB batch_writer handles the 25-item BatchWriteItem limit and
        resends unprocessed items. Product ids are assigned before this call,
        so a retried insert overwrites the same items instead of duplicating.

        Args:
            products: Products to save

        Returns:
            Number of products written

        Raises:
            DynamoDBException: If batch save fails
        """
        if not products:
            return 0

        try:
            for offset in range(0, len(products), INSERT_CHUNK_SIZE):
                chunk = products[offset:offset + INSERT_CHUNK_SIZE]
                with self.table.batch_writer(overwrite_by_pkeys=['product_id']) as batch:
                    for product in chunk:
                        batch.put_item(Item=self._product_to_item(product))
            return len(products)
        except ClientError as e:
            raise DynamoDBException(f"Failed to batch save products: {str(e)}") from e
        except Exception as e:
            raise DynamoDBException(f"Unexpected error during product batch save: {str(e)}") from e

    def _product_to_item(self, product: Product) -> dict:
        """Convert Product domain model to DynamoDB item."""
        item = {
            'product_id': product.product_id,
            'seller_id': product.seller_id,
            'name': product.name,
            'description': product.description,
            'price': Decimal(str(product.price)),
            'category': product.category,
            'stock': Decimal(str(product.stock)),
            'image_url': product.image_url,
            'created_at': product.created_at.isoformat()
        }
        if product.batch_job_id:
            item['batch_job_id'] = product.batch_job_id
        return item
