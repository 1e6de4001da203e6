"""Blob and metadata stores."""

from .blobs import S3BlobStore
from .metadata import DynamoMetadataStore

__all__ = ["DynamoMetadataStore", "S3BlobStore"]
