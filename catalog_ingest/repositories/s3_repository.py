"""
S3 Repository for file storage operations.
Handles the raw catalog CSV blobs in Amazon S3.
"""
import re
from typing import BinaryIO
import boto3
from botocore.exceptions import ClientError
from catalog_ingest.core import config
from catalog_ingest.core.exceptions import S3Exception


class S3Repository:
    """Repository for S3 file operations."""

    def __init__(self):
        self.s3_client = boto3.client('s3', region_name=config.settings.aws_region)
        self.bucket_name = config.settings.csv_upload_bucket

    def upload_file(self, file: BinaryIO, s3_key: str) -> dict:
        """
        Upload a file to S3.

        Args:
            file: File object to upload
            s3_key: Destination object key

        Returns:
            dict: Upload metadata including s3_key and location

        Raises:
            S3Exception: If upload fails
        """
        try:
            self.s3_client.upload_fileobj(
                file,
                self.bucket_name,
                s3_key,
                ExtraArgs={'ContentType': 'text/csv'}
            )

            return {
                's3_key': s3_key,
                's3_location': f"s3://{self.bucket_name}/{s3_key}",
                'bucket': self.bucket_name
            }

        except ClientError as e:
            raise S3Exception(f"Failed to upload file to S3: {str(e)}") from e
        except Exception as e:
            raise S3Exception(f"Unexpected error during S3 upload: {str(e)}") from e

    def generate_presigned_upload_url(self, s3_key: str, content_type: str = "text/csv") -> str:
        """
        Issue a write-capable presigned URL for a direct browser upload.

        Args:
            s3_key: Object key the caller is allowed to write
            content_type: Content type the upload must use

        Returns:
            Presigned PUT URL

        Raises:
            S3Exception: If the URL cannot be generated
        """
        try:
            return self.s3_client.generate_presigned_url(
                'put_object',
                Params={'Bucket': self.bucket_name, 'Key': s3_key, 'ContentType': content_type},
                ExpiresIn=config.settings.presign_expiry_seconds
            )
        except ClientError as e:
            raise S3Exception(f"Failed to generate upload URL: {str(e)}") from e

    def get_file(self, s3_key: str) -> bytes:
        """
        Retrieve the full object from S3.

        Args:
            s3_key: S3 object key

        Returns:
            bytes: File content

        Raises:
            S3Exception: If retrieval fails
        """
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=s3_key)
            return response['Body'].read()
        except ClientError as e:
            raise S3Exception(f"Failed to retrieve file from S3: {str(e)}") from e

    def file_exists(self, s3_key: str) -> bool:
        """
        Check whether an object is still present.

        Raises:
            S3Exception: On errors other than a missing object
        """
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=s3_key)
            return True
        except ClientError as e:
            code = e.response.get('Error', {}).get('Code', '')
            if code in ('404', 'NoSuchKey', 'NotFound'):
                return False
            raise S3Exception(f"Failed to check file in S3: {str(e)}") from e

    def delete_file(self, s3_key: str) -> None:
        """
        Delete an object from S3.

        Raises:
            S3Exception: If deletion fails
        """
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=s3_key)
        except ClientError as e:
            raise S3Exception(f"Failed to delete file from S3: {str(e)}") from e

    @staticmethod
    def build_csv_key(seller_id: str, job_id: str, file_name: str) -> str:
        """
        Build the object key for an uploaded catalog file.

        Format: uploads/{seller_id}/{job_id}/{sanitized_file_name}
        """
        sanitized = re.sub(r'[^a-zA-Z0-9._-]', '_', file_name)
        return f"uploads/{seller_id}/{job_id}/{sanitized}"
