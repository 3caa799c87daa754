"""
Storage Factory

Builds the blob store used by the content service: remote GCS storage when a
bucket is configured, always backed by local filesystem storage.
"""

import logging
import os
from typing import BinaryIO, Dict, Optional

from linkvault.config.content_config import ContentConfig
from linkvault.config.gcs_config import GCSConfig, create_gcs_bucket
from linkvault.domain.blob_storage.storage_repository import IBlobStorage
from linkvault.domain.content.value_objects import BlobReference, StorageBackend
from linkvault.domain.errors import StorageUnavailableError
from linkvault.infrastructure.gcs_blob_storage import GCSBlobStorage
from linkvault.infrastructure.local_blob_storage import LocalBlobStorage

logger = logging.getLogger(__name__)


class FallbackBlobStore:
    """
    Blob store that prefers the remote backend and falls back to local.

    Every stored blob gets a BlobReference tagged with the backend that
    accepted it; reads and deletes dispatch on that tag only.
    """

    def __init__(self, local: IBlobStorage, remote: Optional[IBlobStorage] = None):
        """
        Args:
            local: Local storage, always available
            remote: Remote storage, None when not configured
        """
        self.local = local
        self.remote = remote
        self._stores: Dict[StorageBackend, IBlobStorage] = {local.backend: local}
        if remote is not None:
            self._stores[remote.backend] = remote

    @property
    def remote_enabled(self) -> bool:
        return self.remote is not None

    def store_for(self, backend: StorageBackend) -> IBlobStorage:
        """
        Store responsible for a backend tag.

        Raises:
            StorageUnavailableError: If the backend is not configured
        """
        store = self._stores.get(backend)
        if store is None:
            raise StorageUnavailableError(f"Storage backend {backend.value} is not configured")
        return store

    def put(
        self,
        content_id: str,
        filename: str,
        content: BinaryIO,
        content_type: str,
        size: int,
    ) -> BlobReference:
        """
        Store file bytes, trying remote first.

        Args:
            content_id: Record id, used as the object name stem
            filename: Original filename, kept for downloads
            content: Binary content
            content_type: Media type
            size: Byte size

        Returns:
            BlobReference tagged with the backend that stored the bytes

        Raises:
            StorageUnavailableError: If every backend failed
        """
        _, extension = os.path.splitext(filename or "")
        object_name = f"{content_id}{extension}"

        if self.remote is not None:
            try:
                location = self.remote.put(object_name, content, content_type)
                logger.info(f"Stored blob for {content_id} in remote storage")
                return BlobReference(
                    backend=self.remote.backend,
                    location=location,
                    filename=filename,
                    size=size,
                    content_type=content_type,
                )
            except StorageUnavailableError as e:
                logger.warning(f"Remote upload failed for {content_id}, using local storage: {e}")
                if hasattr(content, "seek"):
                    content.seek(0)

        location = self.local.put(object_name, content, content_type)
        logger.info(f"Stored blob for {content_id} in local storage")
        return BlobReference(
            backend=self.local.backend,
            location=location,
            filename=filename,
            size=size,
            content_type=content_type,
        )

    def open(self, reference: BlobReference) -> Optional[BinaryIO]:
        """Open the referenced blob for reading."""
        return self.store_for(reference.backend).get(reference.location)

    def delete(self, reference: BlobReference) -> bool:
        """
        Delete the referenced blob from the backend named by its tag.

        Raises:
            StorageUnavailableError: If the backend refused the delete
        """
        return self.store_for(reference.backend).delete(reference.location)


class StorageFactory:
    """Factory for the content service's blob store."""

    @staticmethod
    def create_blob_store(
        content_config: Optional[ContentConfig] = None,
        gcs_config: Optional[GCSConfig] = None,
    ) -> FallbackBlobStore:
        """
        Create the blob store from configuration.

        Environment Variables:
            UPLOAD_DIR: Local blob directory (default: /tmp/linkvault/uploads)
            GCS_BUCKET_NAME: Remote bucket; remote storage is disabled when unset

        Raises:
            RuntimeError: If local storage cannot be initialized
        """
        content_config = content_config or ContentConfig()
        gcs_config = gcs_config or GCSConfig()

        try:
            local = LocalBlobStorage(content_config.upload_dir)
        except OSError as e:
            raise RuntimeError(f"Failed to initialize local storage: {e}") from e
        logger.info(f"Storage factory: local blob storage at {content_config.upload_dir}")

        remote = None
        bucket = create_gcs_bucket(gcs_config)
        if bucket is not None:
            remote = GCSBlobStorage(bucket, timeout=gcs_config.timeout_seconds)
            logger.info(f"Storage factory: remote blob storage in bucket {gcs_config.bucket_name}")

        return FallbackBlobStore(local, remote)
