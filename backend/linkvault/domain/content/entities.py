"""
Content Entities

Domain entity for an ephemeral text or file record.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .value_objects import (
    AccessKind,
    BlobReference,
    ConsumptionPolicy,
    ContentKind,
)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class ContentRecord:
    """
    Entity representing a self-destructing piece of text or a file.

    Only the counter pair matching ``kind`` is meaningful; the other pair
    stays at its defaults.
    """

    content_id: str
    kind: ContentKind
    created_at: datetime
    expires_at: datetime
    delete_token: str
    text_content: Optional[str] = None
    blob: Optional[BlobReference] = None
    view_count: int = 0
    max_views: Optional[int] = None
    one_time_view: bool = False
    download_count: int = 0
    max_downloads: Optional[int] = None
    one_time_download: bool = False
    consumed: bool = False
    password_hash: Optional[str] = None
    owner_id: Optional[str] = None

    @property
    def is_text(self) -> bool:
        return self.kind is ContentKind.TEXT

    @property
    def is_file(self) -> bool:
        return self.kind is ContentKind.FILE

    @property
    def password_protected(self) -> bool:
        return bool(self.password_hash)

    @property
    def access_kind(self) -> AccessKind:
        """The access kind that consumes this record."""
        return AccessKind.VIEW if self.is_text else AccessKind.DOWNLOAD

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """
        Check if the record is past its expiry.

        Args:
            now: Reference time, defaults to the current UTC time

        Returns:
            True if expired, False otherwise
        """
        now = ensure_utc(now) if now else utc_now()
        return now > self.expires_at

    def get_remaining_seconds(self, now: Optional[datetime] = None) -> int:
        """Seconds until expiry, 0 once expired."""
        now = ensure_utc(now) if now else utc_now()
        return max(0, int((self.expires_at - now).total_seconds()))

    def policy(self) -> ConsumptionPolicy:
        """Consumption policy for this record's access kind."""
        if self.is_text:
            return ConsumptionPolicy(limit=self.max_views, one_time=self.one_time_view)
        return ConsumptionPolicy(limit=self.max_downloads, one_time=self.one_time_download)

    @property
    def access_count(self) -> int:
        return self.view_count if self.is_text else self.download_count

    def is_exhausted(self) -> bool:
        """True if consumed or the ceiling for the record's access kind is reached."""
        return self.consumed or self.policy().is_exhausted(self.access_count)

    def to_view(self) -> Dict[str, Any]:
        """
        Full non-secret representation returned by a fetch.

        Never contains the password hash or the delete token.
        """
        data = self.to_summary()
        data["text_content"] = self.text_content
        data["file_size"] = self.blob.size if self.blob else None
        data["mime_type"] = self.blob.content_type if self.blob else None
        data["storage_backend"] = self.blob.backend.value if self.blob else None
        data["remaining_seconds"] = self.get_remaining_seconds()
        return data

    def to_summary(self) -> Dict[str, Any]:
        """Metadata used by the owner listing."""
        return {
            "id": self.content_id,
            "content_type": self.kind.value,
            "file_name": self.blob.filename if self.blob else None,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
            "view_count": self.view_count,
            "max_views": self.max_views,
            "one_time_view": self.one_time_view,
            "download_count": self.download_count,
            "max_downloads": self.max_downloads,
            "one_time_download": self.one_time_download,
            "password_protected": self.password_protected,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for persistence (includes secrets)."""
        return {
            "content_id": self.content_id,
            "kind": self.kind.value,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
            "delete_token": self.delete_token,
            "text_content": self.text_content,
            "blob": self.blob.to_dict() if self.blob else None,
            "view_count": self.view_count,
            "max_views": self.max_views,
            "one_time_view": self.one_time_view,
            "download_count": self.download_count,
            "max_downloads": self.max_downloads,
            "one_time_download": self.one_time_download,
            "consumed": self.consumed,
            "password_hash": self.password_hash,
            "owner_id": self.owner_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ContentRecord':
        """Create ContentRecord from dictionary."""
        blob_data = data.get("blob")
        return cls(
            content_id=data["content_id"],
            kind=ContentKind(data["kind"]),
            created_at=ensure_utc(datetime.fromisoformat(data["created_at"])),
            expires_at=ensure_utc(datetime.fromisoformat(data["expires_at"])),
            delete_token=data["delete_token"],
            text_content=data.get("text_content"),
            blob=BlobReference.from_dict(blob_data) if blob_data else None,
            view_count=int(data.get("view_count") or 0),
            max_views=data.get("max_views"),
            one_time_view=bool(data.get("one_time_view")),
            download_count=int(data.get("download_count") or 0),
            max_downloads=data.get("max_downloads"),
            one_time_download=bool(data.get("one_time_download")),
            consumed=bool(data.get("consumed")),
            password_hash=data.get("password_hash"),
            owner_id=data.get("owner_id"),
        )
