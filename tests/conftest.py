"""
Shared test fixtures and utilities.
"""
import pytest
from moto import mock_aws
import boto3
from catalog_ingest.core import config
from catalog_ingest.core import dependencies

REGION = "us-east-1"
BUCKET = "test-csv-uploads"
BATCH_JOBS_TABLE = "BatchJobs-test"
PRODUCTS_TABLE = "Products-test"
NOTIFICATIONS_TABLE = "SellerNotifications-test"


def _clear_dependency_cache():
    dependencies.get_s3_repository.cache_clear()
    dependencies.get_sqs_repository.cache_clear()
    dependencies.get_batch_job_repository.cache_clear()
    dependencies.get_product_repository.cache_clear()
    dependencies.get_notification_repository.cache_clear()
    dependencies.get_file_service.cache_clear()
    dependencies.get_notification_service.cache_clear()
    dependencies.get_ingestion_service.cache_clear()


def create_seller_table(dynamodb, table_name: str, key: str):
    """Create a table keyed by `key` with the SellerIndex (seller_id, created_at) GSI."""
    return dynamodb.create_table(
        TableName=table_name,
        KeySchema=[{"AttributeName": key, "KeyType": "HASH"}],
        AttributeDefinitions=[
            {"AttributeName": key, "AttributeType": "S"},
            {"AttributeName": "seller_id", "AttributeType": "S"},
            {"AttributeName": "created_at", "AttributeType": "S"}
        ],
        GlobalSecondaryIndexes=[{
            "IndexName": "SellerIndex",
            "KeySchema": [
                {"AttributeName": "seller_id", "KeyType": "HASH"},
                {"AttributeName": "created_at", "KeyType": "RANGE"}
            ],
            "Projection": {"ProjectionType": "ALL"}
        }],
        BillingMode="PAY_PER_REQUEST"
    )


class AwsResources:
    """Handles to the mocked AWS resources of one test."""

    def __init__(self, s3, sqs, batch_jobs_table, products_table, notifications_table, queue_url, dlq_url):
        self.s3 = s3
        self.sqs = sqs
        self.batch_jobs_table = batch_jobs_table
        self.products_table = products_table
        self.notifications_table = notifications_table
        self.queue_url = queue_url
        self.dlq_url = dlq_url

    def put_csv(self, key: str, content: str) -> None:
        self.s3.put_object(Bucket=BUCKET, Key=key, Body=content.encode("utf-8"))

    def object_exists(self, key: str) -> bool:
        response = self.s3.list_objects_v2(Bucket=BUCKET, Prefix=key)
        return response.get("KeyCount", 0) > 0

    def drain(self, queue_url: str) -> list:
        """Receive and delete every visible message on a queue."""
        messages = []
        while True:
            response = self.sqs.receive_message(
                QueueUrl=queue_url,
                MaxNumberOfMessages=10,
                AttributeNames=["ApproximateReceiveCount"]
            )
            batch = response.get("Messages", [])
            if not batch:
                return messages
            for message in batch:
                self.sqs.delete_message(QueueUrl=queue_url, ReceiptHandle=message["ReceiptHandle"])
            messages.extend(batch)

    def scan_products(self) -> list:
        return self.products_table.scan()["Items"]

    def scan_notifications(self) -> list:
        return self.notifications_table.scan()["Items"]


@pytest.fixture
def setup_test_env(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_REGION", REGION)
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    monkeypatch.setenv("CSV_UPLOAD_BUCKET", BUCKET)
    monkeypatch.setenv("BATCH_JOBS_TABLE_NAME", BATCH_JOBS_TABLE)
    monkeypatch.setenv("PRODUCTS_TABLE_NAME", PRODUCTS_TABLE)
    monkeypatch.setenv("NOTIFICATIONS_TABLE_NAME", NOTIFICATIONS_TABLE)
    monkeypatch.setenv("ENVIRONMENT", "test")
    config.settings = config.Settings()
    _clear_dependency_cache()
    yield
    config.settings = config.Settings()
    _clear_dependency_cache()


@pytest.fixture
def aws(setup_test_env, monkeypatch):
    """Mocked bucket, tables and queues, with settings pointing at them."""
    with mock_aws():
        s3 = boto3.client("s3", region_name=REGION)
        s3.create_bucket(Bucket=BUCKET)

        dynamodb = boto3.resource("dynamodb", region_name=REGION)
        batch_jobs_table = create_seller_table(dynamodb, BATCH_JOBS_TABLE, "job_id")
        notifications_table = create_seller_table(dynamodb, NOTIFICATIONS_TABLE, "notification_id")
        products_table = dynamodb.create_table(
            TableName=PRODUCTS_TABLE,
            KeySchema=[{"AttributeName": "product_id", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "product_id", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST"
        )

        sqs = boto3.client("sqs", region_name=REGION)
        dlq_url = sqs.create_queue(QueueName="csv-processing-dlq-test")["QueueUrl"]
        queue_url = sqs.create_queue(QueueName="csv-processing-test")["QueueUrl"]

        monkeypatch.setenv("CSV_PROCESSING_QUEUE_URL", queue_url)
        monkeypatch.setenv("CSV_DLQ_URL", dlq_url)
        config.settings = config.Settings()

        yield AwsResources(s3, sqs, batch_jobs_table, products_table, notifications_table, queue_url, dlq_url)
