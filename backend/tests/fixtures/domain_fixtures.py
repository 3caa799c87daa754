"""
Domain Entity Fixtures

Factory functions for content records and create requests with sensible
defaults. Every argument can be overridden.
"""

from datetime import datetime, timedelta
from io import BytesIO
from typing import Optional

from linkvault.application.content_results import CreateContentRequest, UploadedFile
from linkvault.domain.content.entities import ContentRecord, utc_now
from linkvault.domain.content.value_objects import (
    BlobReference,
    ContentId,
    ContentKind,
    DeleteToken,
    StorageBackend,
)


def create_text_record(
    content_id: Optional[str] = None,
    text: str = "hello",
    created_at: Optional[datetime] = None,
    expires_at: Optional[datetime] = None,
    **overrides,
) -> ContentRecord:
    """Create a text ContentRecord expiring in ten minutes by default."""
    created_at = created_at or utc_now()
    return ContentRecord(
        content_id=content_id or ContentId.generate().value,
        kind=ContentKind.TEXT,
        created_at=created_at,
        expires_at=expires_at or created_at + timedelta(minutes=10),
        delete_token=overrides.pop("delete_token", DeleteToken.generate().value),
        text_content=text,
        **overrides,
    )


def create_blob_reference(
    content_id: str = "AbCdEf123456",
    backend: StorageBackend = StorageBackend.LOCAL,
    filename: str = "report.pdf",
    size: int = 11,
    content_type: str = "application/pdf",
) -> BlobReference:
    """Create a BlobReference with a location matching its backend."""
    if backend is StorageBackend.LOCAL:
        location = f"/api/v1/files/{content_id}"
    else:
        location = f"https://storage.googleapis.com/test-bucket/{content_id}.pdf"
    return BlobReference(
        backend=backend,
        location=location,
        filename=filename,
        size=size,
        content_type=content_type,
    )


def create_file_record(
    content_id: Optional[str] = None,
    blob: Optional[BlobReference] = None,
    created_at: Optional[datetime] = None,
    expires_at: Optional[datetime] = None,
    **overrides,
) -> ContentRecord:
    """Create a file ContentRecord expiring in ten minutes by default."""
    content_id = content_id or ContentId.generate().value
    created_at = created_at or utc_now()
    return ContentRecord(
        content_id=content_id,
        kind=ContentKind.FILE,
        created_at=created_at,
        expires_at=expires_at or created_at + timedelta(minutes=10),
        delete_token=overrides.pop("delete_token", DeleteToken.generate().value),
        blob=blob or create_blob_reference(content_id),
        **overrides,
    )


def create_uploaded_file(
    data: bytes = b"hello world",
    filename: str = "notes.txt",
    content_type: str = "text/plain",
) -> UploadedFile:
    return UploadedFile(stream=BytesIO(data), filename=filename, content_type=content_type, size=len(data))


def text_request(text: str = "hello", **options) -> CreateContentRequest:
    """CreateContentRequest for text."""
    return CreateContentRequest(text=text, **options)


def file_request(data: bytes = b"hello world", filename: str = "notes.txt", **options) -> CreateContentRequest:
    """CreateContentRequest for a file upload."""
    return CreateContentRequest(file=create_uploaded_file(data, filename), **options)
