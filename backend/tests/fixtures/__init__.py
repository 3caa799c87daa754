"""
Test fixtures package.

Provides factory functions and in-memory implementations for testing.
"""

from .domain_fixtures import (
    create_blob_reference,
    create_file_record,
    create_text_record,
    create_uploaded_file,
    file_request,
    text_request,
)
from .mock_repositories import (
    InMemoryContentRepository,
    MockBlobStorage,
    make_blob_store,
)

__all__ = [
    "create_blob_reference",
    "create_file_record",
    "create_text_record",
    "create_uploaded_file",
    "file_request",
    "text_request",
    "InMemoryContentRepository",
    "MockBlobStorage",
    "make_blob_store",
]
