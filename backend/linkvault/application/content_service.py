"""
Content Application Service

Orchestrates the lifecycle of ephemeral content: creation, gated reads,
consumption accounting, and deletion.
"""

import logging
import os
from datetime import datetime, timedelta
from io import BytesIO
from typing import TYPE_CHECKING, Any, BinaryIO, Dict, List, Optional

from linkvault.application.content_results import (
    ConsumeResult,
    CreateContentRequest,
    CreateResult,
    UploadedFile,
)
from linkvault.config.content_config import ContentConfig
from linkvault.domain.content.access_control import (
    hash_password,
    verify_delete_credential,
    verify_password,
)
from linkvault.domain.content.entities import ContentRecord, ensure_utc, utc_now
from linkvault.domain.content.repositories import ContentRepository
from linkvault.domain.content.value_objects import (
    AccessKind,
    BlobReference,
    ConsumeOutcome,
    ContentId,
    ContentKind,
    DeleteToken,
)
from linkvault.domain.errors import (
    AccessDeniedError,
    ContentExhaustedError,
    ContentExpiredError,
    ContentNotFoundError,
    DomainError,
    ErrorCategory,
    StorageUnavailableError,
    ValidationError,
)

if TYPE_CHECKING:
    from linkvault.infrastructure.storage_factory import FallbackBlobStore

logger = logging.getLogger(__name__)

MAX_ID_ATTEMPTS = 5


class ContentService:
    """
    Application service for the content lifecycle.

    Every counter mutation goes through the repository's atomic
    increment; this service never writes counters itself.
    """

    def __init__(
        self,
        content_repository: ContentRepository,
        blob_store: "FallbackBlobStore",
        config: Optional[ContentConfig] = None,
    ):
        """
        Initialize ContentService.

        Args:
            content_repository: Repository for content records
            blob_store: Blob store with remote-to-local fallback
            config: Content configuration, uses default if None
        """
        self.repo = content_repository
        self.blob_store = blob_store
        self.config = config or ContentConfig()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: CreateContentRequest) -> CreateResult:
        """
        Create a text or file record.

        The blob is written before the metadata record, so a failed create
        never leaves a readable record pointing at missing bytes.

        Args:
            request: Create request

        Returns:
            CreateResult with the id and the one-time visible delete token

        Raises:
            ValidationError: If the request is malformed or storage failed
        """
        kind = self._validate_payload(request)
        expires_at = self._resolve_expiry(request)
        self._validate_policy(request, kind)
        upload_size = self._validate_upload(request.file) if request.file else None

        password = (request.password or "").strip()
        password_hash = hash_password(password, self.config.bcrypt_rounds) if password else None

        for attempt in range(MAX_ID_ATTEMPTS):
            content_id = ContentId.generate().value
            if self.repo.exists(content_id):
                logger.debug(f"Content id collision on {content_id}, retrying")
                continue

            blob = None
            if request.file is not None:
                blob = self._store_blob(content_id, request.file, upload_size)

            record = ContentRecord(
                content_id=content_id,
                kind=kind,
                created_at=utc_now(),
                expires_at=expires_at,
                delete_token=DeleteToken.generate().value,
                text_content=request.text if kind is ContentKind.TEXT else None,
                blob=blob,
                max_views=request.max_views if kind is ContentKind.TEXT else None,
                one_time_view=bool(request.one_time_view) if kind is ContentKind.TEXT else False,
                max_downloads=request.max_downloads if kind is ContentKind.FILE else None,
                one_time_download=bool(request.one_time_download) if kind is ContentKind.FILE else False,
                password_hash=password_hash,
                owner_id=request.owner_id,
            )

            try:
                inserted = self.repo.insert(record)
            except Exception:
                self._discard_blob(record)
                raise

            if inserted:
                logger.info(
                    f"Created {kind.value} content {content_id} expiring at {expires_at.isoformat()}"
                )
                return CreateResult(
                    content_id=content_id,
                    delete_token=record.delete_token,
                    expires_at=expires_at,
                    policy=record.policy(),
                    record=record,
                )

            logger.debug(f"Content id {content_id} taken at insert, retrying")
            self._discard_blob(record)

        raise DomainError(f"Could not allocate a unique content id after {MAX_ID_ATTEMPTS} attempts")

    def _validate_payload(self, request: CreateContentRequest) -> ContentKind:
        has_text = request.text is not None and request.text != ""
        has_file = request.file is not None
        if has_text and has_file:
            raise ValidationError("Cannot upload both text and file")
        if not has_text and not has_file:
            raise ValidationError("Either text or file must be provided")
        return ContentKind.TEXT if has_text else ContentKind.FILE

    def _resolve_expiry(self, request: CreateContentRequest) -> datetime:
        now = utc_now()
        horizon = now + timedelta(minutes=self.config.max_expiry_minutes)

        if request.expires_at is not None:
            expires_at = ensure_utc(request.expires_at)
            if expires_at <= now:
                raise ValidationError("Invalid expiry date/time. Must be in the future.")
            if expires_at > horizon:
                raise ValidationError(
                    f"Expiry cannot be more than {self.config.max_expiry_minutes} minutes away"
                )
            return expires_at

        minutes = request.expires_in_minutes
        if minutes is None:
            minutes = self.config.default_expiry_minutes
        if minutes <= 0:
            raise ValidationError("Expiry duration must be a positive number of minutes")
        if minutes > self.config.max_expiry_minutes:
            raise ValidationError(
                f"Expiry duration cannot exceed {self.config.max_expiry_minutes} minutes"
            )
        return now + timedelta(minutes=minutes)

    @staticmethod
    def _validate_policy(request: CreateContentRequest, kind: ContentKind) -> None:
        if kind is ContentKind.TEXT:
            limit, one_time = request.max_views, request.one_time_view
            foreign = request.max_downloads is not None or request.one_time_download
            label = "views"
        else:
            limit, one_time = request.max_downloads, request.one_time_download
            foreign = request.max_views is not None or request.one_time_view
            label = "downloads"

        if foreign:
            raise ValidationError(
                f"View limits apply to text and download limits apply to files; "
                f"{kind.value} content accepts only max {label} options"
            )
        if limit is not None and limit <= 0:
            raise ValidationError(f"Maximum {label} must be a positive number")
        if limit is not None and one_time:
            raise ValidationError(f"Choose either one-time access or maximum {label}, not both")

    def _validate_upload(self, upload: UploadedFile) -> int:
        size = upload.size
        if size is None:
            upload.stream.seek(0, os.SEEK_END)
            size = upload.stream.tell()
            upload.stream.seek(0)

        if size > self.config.max_upload_bytes:
            max_mb = self.config.max_upload_bytes // (1024 * 1024)
            raise ValidationError(
                f"File too large. Maximum size is {max_mb}MB.",
                category=ErrorCategory.FILE_TOO_LARGE,
            )
        return size

    def _store_blob(self, content_id: str, upload: UploadedFile, size: int) -> BlobReference:
        try:
            return self.blob_store.put(
                content_id,
                upload.filename,
                upload.stream,
                upload.content_type or "application/octet-stream",
                size,
            )
        except StorageUnavailableError as e:
            logger.error(f"All blob storage backends failed for {content_id}: {e}")
            raise ValidationError(
                "File could not be stored", e, category=ErrorCategory.STORAGE_UNAVAILABLE
            ) from e

    def _discard_blob(self, record: ContentRecord) -> None:
        """Remove a blob written for a record that never became visible."""
        if record.blob is None:
            return
        try:
            self.blob_store.delete(record.blob)
        except Exception as e:
            logger.warning(f"Could not discard blob for unsaved content {record.content_id}: {e}")

    # ------------------------------------------------------------------
    # Read paths
    # ------------------------------------------------------------------

    def fetch(self, content_id: str, password: Optional[str] = None) -> Dict[str, Any]:
        """
        Read-only preview of a record. No counters change.

        Args:
            content_id: Public content identifier
            password: Password, if the record is protected

        Returns:
            Non-secret view of the record

        Raises:
            ContentNotFoundError, ContentExpiredError, AccessDeniedError,
            ContentExhaustedError
        """
        record = self._get_accessible(content_id, password)
        return record.to_view()

    def consume(
        self,
        content_id: str,
        access_kind: AccessKind,
        password: Optional[str] = None,
    ) -> ConsumeResult:
        """
        Record one view or download.

        Checks run as in fetch, then the repository tests the ceiling and
        increments in a single atomic step. One-time records are deleted
        before this returns; the result still carries the final count.

        Args:
            content_id: Public content identifier
            access_kind: VIEW for text, DOWNLOAD for files
            password: Password, if the record is protected

        Returns:
            ConsumeResult

        Raises:
            ContentNotFoundError, ContentExpiredError, AccessDeniedError,
            ContentExhaustedError
        """
        record = self._get_accessible(content_id, password, access_kind)

        result = self.repo.increment_counter(content_id, access_kind, utc_now())
        if result.outcome is ConsumeOutcome.NOT_FOUND:
            raise ContentNotFoundError(f"Content {content_id} not found")
        if result.outcome is ConsumeOutcome.EXPIRED:
            self.purge(content_id)
            raise ContentExpiredError(f"Content {content_id} has expired")
        if result.outcome is ConsumeOutcome.CONSUMED:
            raise ContentExhaustedError(f"Content {content_id} was one-time and already accessed", one_time=True)
        if result.outcome is ConsumeOutcome.LIMIT_REACHED:
            raise ContentExhaustedError(f"Maximum {access_kind.value} count reached for {content_id}")

        updated = result.record or record
        policy = updated.policy()
        count = updated.access_count

        content = None
        deleted = False
        if policy.one_time:
            if access_kind is AccessKind.DOWNLOAD and updated.blob is not None:
                content = self._read_blob_into_memory(updated.blob)
            self.purge(content_id)
            deleted = True
            logger.info(f"One-time content {content_id} consumed and deleted")

        return ConsumeResult(
            content_id=content_id,
            access_kind=access_kind,
            count=count,
            remaining=policy.remaining(count),
            deleted=deleted,
            text_content=updated.text_content,
            blob=updated.blob,
            content=content,
        )

    def open_blob(self, blob: BlobReference) -> BinaryIO:
        """
        Open a file record's bytes.

        Raises:
            ContentNotFoundError: If the blob is missing from its backend
        """
        stream = self.blob_store.open(blob)
        if stream is None:
            raise ContentNotFoundError(f"File not found on server: {blob.location}")
        return stream

    def list_by_owner(self, owner_id: str) -> List[Dict[str, Any]]:
        """
        Non-secret summaries of an owner's live records, newest first.

        Args:
            owner_id: Opaque owner identifier from the identity provider
        """
        if not owner_id:
            return []
        now = utc_now()
        return [
            record.to_summary()
            for record in self.repo.find_by_owner(owner_id)
            if not record.is_expired(now)
        ]

    def _get_accessible(
        self,
        content_id: str,
        password: Optional[str],
        access_kind: Optional[AccessKind] = None,
    ) -> ContentRecord:
        record = self.repo.get(content_id) if ContentId.is_valid(content_id) else None
        if record is None:
            raise ContentNotFoundError(f"Content {content_id} not found")

        if access_kind is not None and not access_kind.matches(record.kind):
            raise ContentNotFoundError(
                f"Content {content_id} is {record.kind.value}, not available for {access_kind.value}"
            )

        if record.is_expired():
            self.purge(content_id)
            raise ContentExpiredError(f"Content {content_id} has expired")

        if not verify_password(record, password):
            raise AccessDeniedError("Password required", password_required=True)

        if record.consumed:
            raise ContentExhaustedError(
                f"Content {content_id} was one-time and already accessed", one_time=True
            )
        if record.is_exhausted():
            raise ContentExhaustedError(
                f"Maximum {record.access_kind.value} count reached for {content_id}"
            )

        return record

    def _read_blob_into_memory(self, blob: BlobReference) -> Optional[BinaryIO]:
        stream = self.blob_store.open(blob)
        if stream is None:
            logger.error(f"Blob missing for one-time download: {blob.location}")
            return None
        try:
            return BytesIO(stream.read())
        finally:
            stream.close()

    # ------------------------------------------------------------------
    # Delete paths
    # ------------------------------------------------------------------

    def delete(
        self,
        content_id: str,
        delete_token: Optional[str] = None,
        owner_id: Optional[str] = None,
    ) -> bool:
        """
        Delete a record on behalf of a caller.

        Args:
            content_id: Public content identifier
            delete_token: Token issued at creation
            owner_id: Authenticated owner identity

        Returns:
            True once the record is gone

        Raises:
            ContentNotFoundError: If the record does not exist
            AccessDeniedError: If neither credential matches
        """
        record = self.repo.get(content_id) if ContentId.is_valid(content_id) else None
        if record is None:
            raise ContentNotFoundError(f"Content {content_id} not found")

        if not verify_delete_credential(record, delete_token, owner_id):
            raise AccessDeniedError(f"Not authorized to delete content {content_id}")

        self._remove(record)
        logger.info(f"Content {content_id} deleted on request")
        return True

    def purge(self, content_id: str) -> bool:
        """
        System deletion used by the sweeper, lazy expiry, and one-time access.

        Bypasses credentials. Idempotent.

        Returns:
            True if this call removed the record, False if it was already gone
        """
        record = self.repo.get(content_id)
        if record is None:
            # Clears a stale index entry if one is left
            self.repo.delete(content_id)
            return False
        return self._remove(record)

    def _remove(self, record: ContentRecord) -> bool:
        """Delete the blob, then the metadata. Blob failures are logged, never raised."""
        if record.blob is not None:
            try:
                self.blob_store.delete(record.blob)
            except Exception as e:
                logger.warning(
                    f"Blob cleanup failed for {record.content_id} "
                    f"({record.blob.backend.value}: {record.blob.location}); "
                    f"storage may leak: {e}"
                )
        return self.repo.delete(record.content_id)
