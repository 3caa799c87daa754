"""
Google Cloud Storage Blob Implementation

Concrete implementation of IBlobStorage for Google Cloud Storage.
The stored location is the blob's public URL; deletion recovers the object
name from that URL.
"""

import logging
from io import BytesIO
from typing import BinaryIO, Optional
from urllib.parse import unquote, urlparse

from google.cloud import storage
from google.cloud.exceptions import GoogleCloudError, NotFound

from linkvault.domain.blob_storage.storage_repository import IBlobStorage
from linkvault.domain.content.value_objects import StorageBackend
from linkvault.domain.errors import StorageUnavailableError

logger = logging.getLogger(__name__)


class GCSBlobStorage(IBlobStorage):
    """
    Google Cloud Storage implementation of IBlobStorage.

    Thread Safety:
        The GCS client handles concurrent operations safely.

    Attributes:
        bucket: GCS bucket handle
        timeout: Per-request timeout in seconds
    """

    def __init__(self, bucket: storage.Bucket, timeout: float = 30.0):
        """
        Initialize the GCS blob storage.

        Args:
            bucket: Bucket handle from config.gcs_config.create_gcs_bucket()
            timeout: Per-request timeout in seconds
        """
        if bucket is None:
            raise ValueError("bucket cannot be None")
        self.bucket = bucket
        self.timeout = timeout

    @property
    def backend(self) -> StorageBackend:
        return StorageBackend.REMOTE

    @staticmethod
    def object_name_from_url(location: str) -> str:
        """
        Extract the object name from a public URL.

        The last path segment is the object name; query strings are dropped.
        """
        path = urlparse(location).path if "://" in location else location.split("?")[0]
        return unquote(path.rstrip("/").rsplit("/", 1)[-1])

    def put(self, object_name: str, content: BinaryIO, content_type: str) -> str:
        """
        Upload the blob and return its public URL.

        Raises:
            StorageUnavailableError: If the upload fails for any reason
        """
        if not object_name or not object_name.strip():
            raise ValueError("object_name cannot be empty")

        try:
            blob = self.bucket.blob(object_name)
            if hasattr(content, "seek"):
                content.seek(0)
            blob.upload_from_file(
                content,
                content_type=content_type,
                if_generation_match=0,
                timeout=self.timeout,
            )
            return blob.public_url
        except Exception as e:
            raise StorageUnavailableError(f"GCS upload failed for {object_name}: {e}", e) from e

    def get(self, location: str) -> Optional[BinaryIO]:
        """Download the blob into memory."""
        try:
            blob = self.bucket.blob(self.object_name_from_url(location))
            content = BytesIO()
            blob.download_to_file(content, timeout=self.timeout)
            content.seek(0)
            return content
        except NotFound:
            return None
        except Exception as e:
            logger.warning(f"GCS download failed for {location}: {e}")
            return None

    def delete(self, location: str) -> bool:
        """
        Remove the blob. Missing blobs count as deleted.

        Raises:
            StorageUnavailableError: If GCS rejects the delete
        """
        object_name = self.object_name_from_url(location)
        if not object_name:
            return True

        try:
            self.bucket.blob(object_name).delete(timeout=self.timeout)
        except NotFound:
            return True
        except GoogleCloudError as e:
            raise StorageUnavailableError(f"GCS delete failed for {object_name}: {e}", e) from e

        logger.debug(f"Deleted GCS blob {object_name}")
        return True

    def exists(self, location: str) -> bool:
        try:
            return self.bucket.blob(self.object_name_from_url(location)).exists(timeout=self.timeout)
        except Exception:
            return False
