"""
Content Value Objects

Immutable value objects for content identifiers, tokens, and blob references.
"""

import secrets
import string
from dataclasses import dataclass
from enum import Enum
from typing import Optional


CONTENT_ID_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
CONTENT_ID_LENGTH = 12


class ContentKind(Enum):
    """Kind of payload stored behind a link."""
    TEXT = "text"
    FILE = "file"


class AccessKind(Enum):
    """Kind of consuming access. Views apply to text, downloads to files."""
    VIEW = "view"
    DOWNLOAD = "download"

    def matches(self, kind: ContentKind) -> bool:
        """Check whether this access kind is meaningful for a content kind."""
        if self is AccessKind.VIEW:
            return kind is ContentKind.TEXT
        return kind is ContentKind.FILE


class StorageBackend(Enum):
    """Blob storage backend tag recorded alongside every blob reference."""
    LOCAL = "local"
    REMOTE = "remote"


class ConsumeOutcome(Enum):
    """Result of the repository's atomic test-and-increment."""
    INCREMENTED = "incremented"
    LIMIT_REACHED = "limit_reached"
    CONSUMED = "consumed"
    EXPIRED = "expired"
    NOT_FOUND = "not_found"


class InvalidContentIdError(ValueError):
    """Raised when a content id is malformed."""
    pass


@dataclass(frozen=True)
class ContentId:
    """
    Value object for the public content identifier.

    Twelve characters drawn from ``0-9A-Za-z`` using a CSPRNG, which keeps the
    identifier URL-safe and hard to guess.
    """
    value: str

    def __post_init__(self):
        if not self.is_valid(self.value):
            raise InvalidContentIdError(f"Invalid content id: {self.value!r}")

    @staticmethod
    def is_valid(value: str) -> bool:
        """Check length and alphabet without raising."""
        return (
            isinstance(value, str)
            and len(value) == CONTENT_ID_LENGTH
            and all(c in CONTENT_ID_ALPHABET for c in value)
        )

    @classmethod
    def generate(cls) -> 'ContentId':
        """Generate a fresh random identifier."""
        return cls("".join(secrets.choice(CONTENT_ID_ALPHABET) for _ in range(CONTENT_ID_LENGTH)))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DeleteToken:
    """
    Value object for the anonymous delete capability.

    Issued once at creation and never returned again.
    """
    value: str

    def __post_init__(self):
        if not self.value or len(self.value) < 32:
            raise ValueError("Delete token must be at least 32 characters")

    @classmethod
    def generate(cls) -> 'DeleteToken':
        """Generate a new token from 32 random bytes (64 hex characters)."""
        return cls(secrets.token_hex(32))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class BlobReference:
    """
    Pointer from a file record to its stored bytes.

    The backend tag decides which store serves and deletes the blob, so
    the location string is never inspected to pick a backend.
    """
    backend: StorageBackend
    location: str
    filename: str
    size: int
    content_type: str = "application/octet-stream"

    def __post_init__(self):
        if not self.location:
            raise ValueError("Blob location is required")
        if self.size < 0:
            raise ValueError(f"Blob size cannot be negative, got {self.size}")

    @property
    def is_remote(self) -> bool:
        return self.backend is StorageBackend.REMOTE

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "backend": self.backend.value,
            "location": self.location,
            "filename": self.filename,
            "size": self.size,
            "content_type": self.content_type,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'BlobReference':
        """Create BlobReference from dictionary."""
        return cls(
            backend=StorageBackend(data["backend"]),
            location=data["location"],
            filename=data["filename"],
            size=int(data.get("size") or 0),
            content_type=data.get("content_type") or "application/octet-stream",
        )


@dataclass(frozen=True)
class ConsumptionPolicy:
    """
    Access ceiling and one-time flag for the access kind of a record.

    ``limit`` of None means unlimited.
    """
    limit: Optional[int] = None
    one_time: bool = False

    def __post_init__(self):
        if self.limit is not None and self.limit <= 0:
            raise ValueError(f"Access limit must be positive, got {self.limit}")
        if self.limit is not None and self.one_time:
            raise ValueError("Cannot combine an access limit with one-time access")

    def is_exhausted(self, count: int) -> bool:
        """Check whether a counter value has reached the ceiling."""
        if self.one_time:
            return count >= 1
        return self.limit is not None and count >= self.limit

    def remaining(self, count: int) -> Optional[int]:
        """Remaining accesses, or None when unlimited."""
        if self.one_time:
            return max(0, 1 - count)
        if self.limit is None:
            return None
        return max(0, self.limit - count)

    def to_dict(self) -> dict:
        return {"limit": self.limit, "one_time": self.one_time}
