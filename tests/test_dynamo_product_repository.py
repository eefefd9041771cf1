"""
Tests for DynamoProductRepository against mocked DynamoDB.
"""
from decimal import Decimal
from unittest.mock import MagicMock
import pytest
from botocore.exceptions import ClientError
from catalog_ingest.repositories.dynamo_product_repository import DynamoProductRepository
from catalog_ingest.models.product_model import Product
from catalog_ingest.core.exceptions import DynamoDBException


def make_product(i: int) -> Product:
    return Product(
        product_id=f"prod-{i}",
        seller_id="seller-1",
        name=f"Widget {i}",
        description="A widget",
        price=9.99,
        category="Tools",
        stock=i,
        batch_job_id="job-1"
    )


class TestDynamoProductRepository:
    @pytest.fixture
    def repo(self, aws):
        return DynamoProductRepository()

    def test_add_products_bulk(self, repo, aws):
        count = repo.add_products_bulk([make_product(i) for i in range(30)])

        assert count == 30
        items = aws.scan_products()
        assert len(items) == 30
        item = next(i for i in items if i["product_id"] == "prod-3")
        assert item["price"] == Decimal("9.99")
        assert item["stock"] == 3
        assert item["batch_job_id"] == "job-1"

    def test_fractional_stock_is_stored(self, repo, aws):
        product = make_product(0)
        product.stock = 2.5

        repo.add_products_bulk([product])

        assert aws.scan_products()[0]["stock"] == Decimal("2.5")

    def test_empty_batch_writes_nothing(self, repo, aws):
        assert repo.add_products_bulk([]) == 0
        assert aws.scan_products() == []

    def test_retried_insert_overwrites(self, repo, aws):
        products = [make_product(i) for i in range(5)]

        repo.add_products_bulk(products)
        repo.add_products_bulk(products)

        assert len(aws.scan_products()) == 5

    def test_client_error_is_wrapped(self, repo):
        error = ClientError({"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "slow"}},
                            "BatchWriteItem")
        repo.table = MagicMock()
        repo.table.batch_writer.return_value.__enter__.return_value.put_item.side_effect = error

        with pytest.raises(DynamoDBException) as exc_info:
            repo.add_products_bulk([make_product(1)])

        assert exc_info.value.__cause__ is error
