"""
Content Service Requests and Results

Value objects passed into and returned from the content service.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, BinaryIO, Dict, List, Optional

from linkvault.domain.content.entities import ContentRecord
from linkvault.domain.content.value_objects import AccessKind, BlobReference, ConsumptionPolicy


@dataclass
class UploadedFile:
    """File bytes plus the metadata the client sent with them."""

    stream: BinaryIO
    filename: str
    content_type: str = "application/octet-stream"
    size: Optional[int] = None


@dataclass
class CreateContentRequest:
    """
    Input for creating a content record.

    Exactly one of ``text`` or ``file`` must be set. ``expires_at`` wins over
    ``expires_in_minutes`` when both are given.
    """

    text: Optional[str] = None
    file: Optional[UploadedFile] = None
    expires_at: Optional[datetime] = None
    expires_in_minutes: Optional[int] = None
    password: Optional[str] = None
    max_views: Optional[int] = None
    one_time_view: bool = False
    max_downloads: Optional[int] = None
    one_time_download: bool = False
    owner_id: Optional[str] = None


@dataclass
class CreateResult:
    """Outcome of a successful create. The delete token is only ever exposed here."""

    content_id: str
    delete_token: str
    expires_at: datetime
    policy: ConsumptionPolicy
    record: ContentRecord

    def to_dict(self, share_url: Optional[str] = None) -> Dict[str, Any]:
        """Convert result to dictionary for the upload response."""
        return {
            "id": self.content_id,
            "url": share_url,
            "expires_at": self.expires_at.isoformat(),
            "delete_token": self.delete_token,
            "password_protected": self.record.password_protected,
            "content_type": self.record.kind.value,
            "one_time_view": self.record.one_time_view,
            "max_views": self.record.max_views,
            "one_time_download": self.record.one_time_download,
            "max_downloads": self.record.max_downloads,
        }


@dataclass
class ConsumeResult:
    """
    Outcome of a successful view or download.

    When the access deleted the record (one-time content), ``content`` holds the
    blob bytes read before deletion so the caller can still serve them.
    """

    content_id: str
    access_kind: AccessKind
    count: int
    remaining: Optional[int]
    deleted: bool = False
    text_content: Optional[str] = None
    blob: Optional[BlobReference] = None
    content: Optional[BinaryIO] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for API response."""
        data: Dict[str, Any] = {"id": self.content_id, "deleted": self.deleted}
        if self.access_kind is AccessKind.VIEW:
            data["view_count"] = self.count
            data["remaining_views"] = self.remaining
            data["one_time_viewed"] = self.deleted
        else:
            data["download_count"] = self.count
            data["remaining_downloads"] = self.remaining
        return data


@dataclass
class SweepStats:
    """Counters reported by one sweep pass."""

    scanned: int = 0
    deleted: int = 0
    skipped: int = 0
    orphaned_blobs_removed: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scanned": self.scanned,
            "deleted": self.deleted,
            "skipped": self.skipped,
            "orphaned_blobs_removed": self.orphaned_blobs_removed,
            "errors": list(self.errors),
        }
