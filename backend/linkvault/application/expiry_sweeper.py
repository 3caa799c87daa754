"""
Expiry Sweeper

Periodic removal of expired records and their blobs, plus cleanup of local
blob files that no record references.
"""

import logging
import time
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from linkvault.application.content_results import SweepStats
from linkvault.application.content_service import ContentService
from linkvault.domain.content.entities import utc_now
from linkvault.domain.content.repositories import ContentRepository
from linkvault.domain.content.value_objects import CONTENT_ID_LENGTH

if TYPE_CHECKING:
    from linkvault.infrastructure.local_blob_storage import LocalBlobStorage

logger = logging.getLogger(__name__)


class ExpirySweeper:
    """
    Sweeps expired content, reading the expiry index in batches.

    Deletion goes through ContentService.purge so the blob is removed before
    the metadata. A failure on one record never stops the pass.
    """

    def __init__(
        self,
        content_service: ContentService,
        content_repository: ContentRepository,
        batch_size: int = 500,
        local_storage: Optional["LocalBlobStorage"] = None,
        orphan_max_age_seconds: int = 3600,
    ):
        self.content_service = content_service
        self.repo = content_repository
        self.batch_size = batch_size
        self.local_storage = local_storage
        self.orphan_max_age_seconds = orphan_max_age_seconds

    def sweep(self, now: Optional[datetime] = None) -> SweepStats:
        """
        Run one sweep pass over every record expired before ``now``.

        Expired ids are fetched ``batch_size`` at a time until a short batch
        comes back. Ids whose purge failed stay in the index; they are read
        past, not retried, within the same pass.

        Args:
            now: Reference time, defaults to the current UTC time

        Returns:
            SweepStats for this pass
        """
        now = now or utc_now()
        stats = SweepStats()
        attempted = set()
        failed = 0

        while True:
            limit = self.batch_size + failed
            batch = self.repo.find_expired_ids(now, limit=limit)
            fresh_ids = [content_id for content_id in batch if content_id not in attempted]
            if not fresh_ids:
                break

            attempted.update(fresh_ids)
            stats.scanned += len(fresh_ids)
            for content_id in fresh_ids:
                if not self._purge_one(content_id, stats):
                    failed += 1

            if len(batch) < limit:
                break

        if self.local_storage is not None:
            stats.orphaned_blobs_removed = self.sweep_orphans(stats)

        if stats.deleted or stats.orphaned_blobs_removed:
            logger.info(
                f"Sweep removed {stats.deleted} expired records and "
                f"{stats.orphaned_blobs_removed} orphaned blobs"
            )
        return stats

    def _purge_one(self, content_id: str, stats: SweepStats) -> bool:
        """Purge one expired id; False if the purge raised."""
        try:
            if self.content_service.purge(content_id):
                stats.deleted += 1
            else:
                # Already removed by a concurrent delete or lazy expiry
                stats.skipped += 1
            return True
        except Exception as e:
            stats.errors.append(f"{content_id}: {e}")
            logger.error(f"Failed to sweep content {content_id}: {e}")
            return False

    def sweep_orphans(self, stats: Optional[SweepStats] = None) -> int:
        """
        Remove local blob files with no matching record.

        Files younger than ``orphan_max_age_seconds`` are left alone so an
        upload whose record is still being inserted is never touched.

        Returns:
            Number of files removed
        """
        if self.local_storage is None:
            return 0

        removed = 0
        cutoff = time.time() - self.orphan_max_age_seconds
        try:
            entries = list(self.local_storage.iter_blob_files())
        except OSError as e:
            logger.warning(f"Could not list local blobs: {e}")
            return 0

        for entry in entries:
            try:
                if entry.stat().st_mtime > cutoff:
                    continue
                content_id = entry.name[:CONTENT_ID_LENGTH]
                if self.repo.exists(content_id):
                    continue
                entry.unlink()
                removed += 1
                logger.info(f"Removed orphaned blob {entry.name}")
            except FileNotFoundError:
                continue
            except Exception as e:
                if stats is not None:
                    stats.errors.append(f"{entry.name}: {e}")
                logger.error(f"Failed to remove orphaned blob {entry.name}: {e}")

        return removed
