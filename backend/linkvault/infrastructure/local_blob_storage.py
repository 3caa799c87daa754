"""
Local Blob Storage Implementation

Concrete implementation of IBlobStorage for the local filesystem.
Blobs live in a private directory as ``<content id><extension>``. The stored
location is an internal route (``/api/v1/files/<content id>``), not a
filesystem path, so it can be handed to the API layer as-is.
"""

import logging
import os
import tempfile
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional

from linkvault.domain.blob_storage.storage_repository import IBlobStorage
from linkvault.domain.content.value_objects import CONTENT_ID_LENGTH, StorageBackend
from linkvault.domain.errors import StorageUnavailableError

logger = logging.getLogger(__name__)

LOCAL_FILE_ROUTE = "/api/v1/files"


class LocalBlobStorage(IBlobStorage):
    """
    Local filesystem implementation of IBlobStorage.

    Writes go to a temporary file in the same directory and are renamed into
    place, so a reader never sees a partially written blob.

    Attributes:
        base_path: Directory holding the blobs
    """

    def __init__(self, base_path: str = "/tmp/linkvault/uploads", route: str = LOCAL_FILE_ROUTE):
        """
        Initialize the local blob storage.

        Args:
            base_path: Directory for blob files, created if missing
            route: Route prefix used to build locations
        """
        self.base_path = Path(base_path)
        self.route = route.rstrip("/")
        self._ensure_base_directory()

    def _ensure_base_directory(self) -> None:
        """
        Ensure the base storage directory exists.

        Raises:
            PermissionError: If insufficient permissions to create directory
            OSError: If directory creation fails for other reasons
        """
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except PermissionError as e:
            raise PermissionError(
                f"Insufficient permissions to create storage directory: {self.base_path}"
            ) from e
        except OSError as e:
            raise OSError(f"Failed to create storage directory: {self.base_path}") from e

    @property
    def backend(self) -> StorageBackend:
        return StorageBackend.LOCAL

    def location_for(self, content_id: str) -> str:
        return f"{self.route}/{content_id}"

    @staticmethod
    def content_id_from_location(location: str) -> str:
        """Last path segment of a location, the content id."""
        return location.rstrip("/").rsplit("/", 1)[-1]

    def find_path(self, content_id: str) -> Optional[Path]:
        """
        Find the blob file whose name starts with the content id.

        Args:
            content_id: Public content identifier

        Returns:
            Path to the file, or None if there is none
        """
        if not content_id or "/" in content_id or content_id.startswith("."):
            return None
        try:
            for entry in self.base_path.iterdir():
                if entry.is_file() and entry.name.startswith(content_id):
                    return entry
        except OSError as e:
            logger.warning(f"Could not scan upload directory {self.base_path}: {e}")
        return None

    def put(self, object_name: str, content: BinaryIO, content_type: str) -> str:
        """
        Write the blob to disk.

        Args:
            object_name: ``<content id><extension>``
            content: Binary content positioned at the start
            content_type: Media type, unused on disk

        Returns:
            Internal route for the blob
        """
        if not object_name or not object_name.strip() or "/" in object_name:
            raise ValueError(f"Invalid object name: {object_name!r}")

        content_id = object_name[:CONTENT_ID_LENGTH]
        target = self.base_path / object_name
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(prefix=".upload-", dir=self.base_path)
            with os.fdopen(fd, "wb") as f:
                while True:
                    chunk = content.read(8192)  # 8KB chunks
                    if not chunk:
                        break
                    f.write(chunk)
            os.replace(tmp_path, target)
            tmp_path = None
        except OSError as e:
            raise StorageUnavailableError(f"Failed to write blob {object_name}: {e}", e) from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

        logger.debug(f"Stored local blob {target}")
        return self.location_for(content_id)

    def get(self, location: str) -> Optional[BinaryIO]:
        """Read the blob into memory and return it as a stream."""
        path = self.find_path(self.content_id_from_location(location))
        if path is None:
            return None
        try:
            with open(path, "rb") as f:
                return BytesIO(f.read())
        except OSError as e:
            logger.warning(f"Could not read local blob {path}: {e}")
            return None

    def delete(self, location: str) -> bool:
        """Remove the blob file. Missing files count as deleted."""
        path = self.find_path(self.content_id_from_location(location))
        if path is None:
            return True
        try:
            path.unlink()
        except FileNotFoundError:
            return True
        except OSError as e:
            raise StorageUnavailableError(f"Failed to delete local blob {path}: {e}", e) from e

        logger.debug(f"Deleted local blob {path}")
        return True

    def exists(self, location: str) -> bool:
        try:
            return self.find_path(self.content_id_from_location(location)) is not None
        except (OSError, ValueError):
            return False

    def iter_blob_files(self):
        """Yield every stored blob file, skipping in-progress uploads."""
        for entry in self.base_path.iterdir():
            if entry.is_file() and not entry.name.startswith("."):
                yield entry
