"""S3 blob store for poster images."""

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .. import config
from ..errors import AssetUnavailable, StorageUnavailable

logger = logging.getLogger(__name__)

MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class S3BlobStore:
    """Key-addressed image storage. References look like s3://<bucket>/<key>."""

    def __init__(self, bucket: str = config.POSTER_BUCKET, client=None):
        self.bucket = bucket
        self.client = client or boto3.client("s3", region_name=config.AWS_REGION)

    def ref_for(self, key: str) -> str:
        return f"s3://{self.bucket}/{key}"

    def owns(self, ref: str) -> bool:
        return ref.startswith(f"s3://{self.bucket}/")

    def key_for(self, ref: str) -> str:
        if not self.owns(ref):
            raise ValueError(f"Not a reference in bucket {self.bucket}: {ref}")
        return ref[len(f"s3://{self.bucket}/"):]

    def put(self, key: str, data: bytes, content_type: str) -> str:
        """Upload bytes and return their reference."""
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)
        except (ClientError, BotoCoreError) as e:
            raise StorageUnavailable(f"Failed to upload {key}: {e}") from e
        logger.info(f"Uploaded s3://{self.bucket}/{key} ({len(data)} bytes)")
        return self.ref_for(key)

    def get(self, ref: str) -> bytes:
        key = self.key_for(ref)
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
            return response["Body"].read()
        except ClientError as e:
            if _error_code(e) in MISSING_CODES:
                raise AssetUnavailable(f"Blob not found: {ref}") from e
            raise StorageUnavailable(f"Failed to read {ref}: {e}") from e
        except BotoCoreError as e:
            raise StorageUnavailable(f"Failed to read {ref}: {e}") from e

    def download_url(self, ref: str, filename: str, expires_in: int = 3600) -> str:
        """Presigned GET URL that downloads under `filename`."""
        return self.client.generate_presigned_url(
            "get_object",
            Params={
                "Bucket": self.bucket,
                "Key": self.key_for(ref),
                "ResponseContentDisposition": f'attachment; filename="{filename}"',
            },
            ExpiresIn=expires_in,
        )

    def delete(self, ref: str) -> None:
        """Delete a blob. A blob that is already gone is not an error."""
        key = self.key_for(ref)
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if _error_code(e) in MISSING_CODES:
                logger.info(f"Blob already gone: {ref}")
                return
            raise StorageUnavailable(f"Failed to delete {ref}: {e}") from e
        except BotoCoreError as e:
            raise StorageUnavailable(f"Failed to delete {ref}: {e}") from e
