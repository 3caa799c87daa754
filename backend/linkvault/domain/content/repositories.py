"""
Content Repositories

Repository interface for content metadata persistence.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from .entities import ContentRecord
from .value_objects import AccessKind, ConsumeOutcome


@dataclass(frozen=True)
class IncrementResult:
    """Outcome of an atomic test-and-increment plus the record after the update."""
    outcome: ConsumeOutcome
    record: Optional[ContentRecord] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is ConsumeOutcome.INCREMENTED


class ContentRepository(ABC):
    """
    Abstract repository interface for content records.

    Contract Guarantees:
    - insert() never overwrites an existing id
    - increment_counter() tests the ceiling and increments in one indivisible step
    - delete() is idempotent and reports whether anything was removed
    """

    @abstractmethod
    def insert(self, record: ContentRecord) -> bool:
        """
        Persist a new record if its id is unused.

        Args:
            record: ContentRecord to store

        Returns:
            True if stored, False if the id already exists
        """
        pass  # pragma: no cover

    @abstractmethod
    def get(self, content_id: str) -> Optional[ContentRecord]:
        """
        Retrieve a record by id.

        Expired records are still returned; callers decide what expiry means.

        Args:
            content_id: Public content identifier

        Returns:
            ContentRecord if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def increment_counter(
        self, content_id: str, access_kind: AccessKind, now: datetime
    ) -> IncrementResult:
        """
        Atomically increment the access counter if the ceiling allows it.

        For a one-time record the same step also marks it consumed.
        No mutation happens unless the outcome is INCREMENTED.

        Args:
            content_id: Public content identifier
            access_kind: Which counter to increment
            now: Reference time; a record expired at ``now`` is not incremented

        Returns:
            IncrementResult with the outcome and, on success, the updated record
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, content_id: str) -> bool:
        """
        Remove a record and its index entries.

        Args:
            content_id: Public content identifier

        Returns:
            True if a record was removed, False if it did not exist
        """
        pass  # pragma: no cover

    @abstractmethod
    def find_expired_ids(self, now: datetime, limit: int = 500) -> List[str]:
        """
        Ids of records whose expiry is strictly before ``now``.

        Args:
            now: Reference time
            limit: Maximum number of ids to return

        Returns:
            List of content ids, oldest expiry first
        """
        pass  # pragma: no cover

    @abstractmethod
    def find_by_owner(self, owner_id: str) -> List[ContentRecord]:
        """
        Records belonging to an owner, newest first.

        Args:
            owner_id: Opaque owner identifier

        Returns:
            List of ContentRecord
        """
        pass  # pragma: no cover

    @abstractmethod
    def exists(self, content_id: str) -> bool:
        """Check if a record exists."""
        pass  # pragma: no cover
