"""
Unit tests for GCSBlobStorage

The bucket is a Mock; no network access.
"""

from io import BytesIO
from unittest.mock import Mock

import pytest
from google.api_core.exceptions import Forbidden
from google.cloud.exceptions import NotFound

from linkvault.domain.content.value_objects import StorageBackend
from linkvault.domain.errors import StorageUnavailableError
from linkvault.infrastructure.gcs_blob_storage import GCSBlobStorage

PUBLIC_URL = "https://storage.googleapis.com/test-bucket/AbCdEf123456.pdf"


@pytest.fixture
def bucket():
    bucket = Mock()
    bucket.blob.return_value.public_url = PUBLIC_URL
    return bucket


@pytest.fixture
def storage(bucket):
    return GCSBlobStorage(bucket, timeout=5)


class TestGCSBlobStorage:
    def test_requires_bucket(self):
        with pytest.raises(ValueError):
            GCSBlobStorage(None)

    def test_backend_tag(self, storage):
        assert storage.backend is StorageBackend.REMOTE

    def test_put_returns_public_url(self, storage, bucket):
        content = BytesIO(b"data")
        assert storage.put("AbCdEf123456.pdf", content, "application/pdf") == PUBLIC_URL

        bucket.blob.assert_called_with("AbCdEf123456.pdf")
        bucket.blob.return_value.upload_from_file.assert_called_once_with(
            content, content_type="application/pdf", if_generation_match=0, timeout=5
        )

    def test_put_failure_is_storage_unavailable(self, storage, bucket):
        bucket.blob.return_value.upload_from_file.side_effect = Forbidden("denied")
        with pytest.raises(StorageUnavailableError):
            storage.put("AbCdEf123456.pdf", BytesIO(b"data"), "application/pdf")

    @pytest.mark.parametrize(
        "location",
        [
            PUBLIC_URL,
            PUBLIC_URL + "?X-Goog-Signature=abc",
            "AbCdEf123456.pdf",
        ],
    )
    def test_object_name_from_url(self, location):
        assert GCSBlobStorage.object_name_from_url(location) == "AbCdEf123456.pdf"

    def test_delete_uses_last_segment(self, storage, bucket):
        assert storage.delete(PUBLIC_URL) is True
        bucket.blob.assert_called_with("AbCdEf123456.pdf")
        bucket.blob.return_value.delete.assert_called_once_with(timeout=5)

    def test_delete_missing_is_success(self, storage, bucket):
        bucket.blob.return_value.delete.side_effect = NotFound("gone")
        assert storage.delete(PUBLIC_URL) is True

    def test_delete_rejected(self, storage, bucket):
        bucket.blob.return_value.delete.side_effect = Forbidden("denied")
        with pytest.raises(StorageUnavailableError):
            storage.delete(PUBLIC_URL)

    def test_get_downloads_into_memory(self, storage, bucket):
        def download(buffer, timeout):
            buffer.write(b"remote bytes")

        bucket.blob.return_value.download_to_file.side_effect = download
        assert storage.get(PUBLIC_URL).read() == b"remote bytes"

    def test_get_missing(self, storage, bucket):
        bucket.blob.return_value.download_to_file.side_effect = NotFound("gone")
        assert storage.get(PUBLIC_URL) is None
