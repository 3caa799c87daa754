"""
Blob Storage Interface

Abstract interface for storing the raw bytes of file records.
The domain layer stays infrastructure-agnostic; the local filesystem and
the remote object store both implement this contract.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Optional

from ..content.value_objects import StorageBackend


class IBlobStorage(ABC):
    """
    Unified interface for blob storage operations.

    Contract Guarantees:
    - put() returns the location string that get()/delete() later accept
    - get() returns None for missing blobs instead of raising
    - delete() is idempotent: deleting a missing blob returns True
    - exists() never raises

    Implementations raise StorageUnavailableError when put() cannot store
    the bytes; callers use that to fall back to another backend.
    """

    @property
    @abstractmethod
    def backend(self) -> StorageBackend:
        """Tag recorded in the BlobReference of every blob this store writes."""
        pass  # pragma: no cover

    @abstractmethod
    def put(self, object_name: str, content: BinaryIO, content_type: str) -> str:
        """
        Store blob content.

        Args:
            object_name: Name to store under, ``<content id><extension>``
            content: Binary content positioned at the start
            content_type: Media type of the content

        Returns:
            Location string identifying the stored blob

        Raises:
            StorageUnavailableError: If the bytes could not be stored
        """
        pass  # pragma: no cover

    @abstractmethod
    def get(self, location: str) -> Optional[BinaryIO]:
        """
        Open a blob for reading.

        The caller is responsible for closing the returned stream.

        Args:
            location: Location returned by put()

        Returns:
            Binary stream if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, location: str) -> bool:
        """
        Delete a blob.

        Args:
            location: Location returned by put()

        Returns:
            True if deleted or already absent

        Raises:
            StorageUnavailableError: If the backend refused the delete
        """
        pass  # pragma: no cover

    @abstractmethod
    def exists(self, location: str) -> bool:
        """Check whether a blob exists. Never raises."""
        pass  # pragma: no cover
