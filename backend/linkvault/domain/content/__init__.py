"""
Content Domain

Ephemeral text and file records, their consumption policy, and access checks.
"""

from .access_control import hash_password, verify_delete_credential, verify_password
from .entities import ContentRecord
from .repositories import ContentRepository, IncrementResult
from .value_objects import (
    AccessKind,
    BlobReference,
    ConsumeOutcome,
    ConsumptionPolicy,
    ContentId,
    ContentKind,
    DeleteToken,
    StorageBackend,
)

__all__ = [
    "AccessKind",
    "BlobReference",
    "ConsumeOutcome",
    "ConsumptionPolicy",
    "ContentId",
    "ContentKind",
    "ContentRecord",
    "ContentRepository",
    "DeleteToken",
    "IncrementResult",
    "StorageBackend",
    "hash_password",
    "verify_delete_credential",
    "verify_password",
]
