"""
Tests for S3Repository against mocked S3.
"""
import io
import pytest
from catalog_ingest.repositories.s3_repository import S3Repository
from catalog_ingest.core.exceptions import S3Exception


class TestS3Repository:
    @pytest.fixture
    def repo(self, aws):
        return S3Repository()

    def test_upload_and_get_file(self, repo):
        result = repo.upload_file(io.BytesIO(b"name,price\nWidget,1"), "uploads/s/j/products.csv")

        assert result["s3_key"] == "uploads/s/j/products.csv"
        assert result["s3_location"] == "s3://test-csv-uploads/uploads/s/j/products.csv"
        assert repo.get_file("uploads/s/j/products.csv") == b"name,price\nWidget,1"

    def test_get_missing_file_raises(self, repo):
        with pytest.raises(S3Exception):
            repo.get_file("uploads/missing.csv")

    def test_file_exists(self, repo, aws):
        aws.put_csv("uploads/s/j/a.csv", "name,price")

        assert repo.file_exists("uploads/s/j/a.csv") is True
        assert repo.file_exists("uploads/s/j/b.csv") is False

    def test_delete_file(self, repo, aws):
        aws.put_csv("uploads/s/j/a.csv", "name,price")

        repo.delete_file("uploads/s/j/a.csv")

        assert not aws.object_exists("uploads/s/j/a.csv")

    def test_generate_presigned_upload_url(self, repo):
        url = repo.generate_presigned_upload_url("uploads/s/j/a.csv")

        assert "uploads/s/j/a.csv" in url
        assert "Signature" in url or "X-Amz-Signature" in url

    def test_build_csv_key_sanitizes_name(self):
        key = S3Repository.build_csv_key("seller-1", "job-1", "my products (v2).csv")
        assert key == "uploads/seller-1/job-1/my_products__v2_.csv"
