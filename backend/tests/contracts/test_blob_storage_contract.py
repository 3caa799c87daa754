"""
Contract tests for IBlobStorage implementations

Every backend must return a location from put that get, exists and delete
accept, and delete must be idempotent.
"""

from io import BytesIO

import pytest

from linkvault.domain.blob_storage.storage_repository import IBlobStorage
from linkvault.domain.content.value_objects import StorageBackend
from linkvault.infrastructure.local_blob_storage import LocalBlobStorage
from tests.fixtures.mock_repositories import MockBlobStorage


@pytest.fixture(params=["local_disk", "in_memory_local", "in_memory_remote"])
def storage(request, tmp_path) -> IBlobStorage:
    if request.param == "local_disk":
        return LocalBlobStorage(str(tmp_path / "blobs"))
    if request.param == "in_memory_local":
        return MockBlobStorage(StorageBackend.LOCAL)
    return MockBlobStorage(StorageBackend.REMOTE)


class TestBlobStorageContract:
    def test_is_blob_storage(self, storage):
        assert isinstance(storage, IBlobStorage)
        assert isinstance(storage.backend, StorageBackend)

    def test_put_get(self, storage):
        location = storage.put("AbCdEf123456.txt", BytesIO(b"contract"), "text/plain")
        assert isinstance(location, str) and location
        assert storage.exists(location) is True
        assert storage.get(location).read() == b"contract"

    def test_delete_idempotent(self, storage):
        location = storage.put("AbCdEf123456.txt", BytesIO(b"contract"), "text/plain")
        assert storage.delete(location) is True
        assert storage.delete(location) is True
        assert storage.exists(location) is False
        assert storage.get(location) is None
