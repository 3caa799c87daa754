"""
Redis Content Repository Implementation

Concrete Redis-based implementation of the ContentRepository interface.

Layout:
- ``content:<id>``          JSON document for the record
- ``content:expiry``        sorted set of ids scored by expiry (epoch seconds)
- ``content:owner:<owner>`` set of ids belonging to an owner

Every mutation of a record is a single Lua script, so concurrent requests
and the expiry sweep never interleave inside a read-modify-write.
"""

import json
import logging
from datetime import datetime
from typing import List, Optional

from linkvault.domain.content.entities import ContentRecord
from linkvault.domain.content.repositories import ContentRepository, IncrementResult
from linkvault.domain.content.value_objects import AccessKind, ConsumeOutcome
from linkvault.infrastructure.redis_repository import RedisRepository

logger = logging.getLogger(__name__)


# KEYS: record, expiry index, [owner index]
# ARGV: id, json, ttl seconds, expiry score
INSERT_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return 0
end
redis.call('SET', KEYS[1], ARGV[2], 'EX', ARGV[3])
redis.call('ZADD', KEYS[2], ARGV[4], ARGV[1])
if KEYS[3] then
    redis.call('SADD', KEYS[3], ARGV[1])
end
return 1
"""

# KEYS: record, expiry index
# ARGV: id, count field, max field, one-time field, now (epoch seconds)
INCREMENT_SCRIPT = """
local data = redis.call('GET', KEYS[1])
if not data then
    return {'not_found'}
end

local expires = redis.call('ZSCORE', KEYS[2], ARGV[1])
if expires and tonumber(ARGV[5]) > tonumber(expires) then
    return {'expired'}
end

local record = cjson.decode(data)
if record['consumed'] == true then
    return {'consumed'}
end

local count = tonumber(record[ARGV[2]]) or 0
local ceiling = record[ARGV[3]]
if ceiling ~= nil and ceiling ~= cjson.null and count >= tonumber(ceiling) then
    return {'limit_reached'}
end

local one_time = record[ARGV[4]] == true
if one_time and count >= 1 then
    return {'consumed'}
end

record[ARGV[2]] = count + 1
if one_time then
    record['consumed'] = true
end

local encoded = cjson.encode(record)
redis.call('SET', KEYS[1], encoded, 'KEEPTTL')
return {'incremented', encoded}
"""

# KEYS: record, expiry index, [owner index]
# ARGV: id
DELETE_SCRIPT = """
local removed = redis.call('DEL', KEYS[1])
redis.call('ZREM', KEYS[2], ARGV[1])
if KEYS[3] then
    redis.call('SREM', KEYS[3], ARGV[1])
end
return removed
"""

_COUNTER_FIELDS = {
    AccessKind.VIEW: ("view_count", "max_views", "one_time_view"),
    AccessKind.DOWNLOAD: ("download_count", "max_downloads", "one_time_download"),
}


class RedisContentRepository(ContentRepository):
    """
    Redis-based implementation of ContentRepository.

    Documents carry a Redis TTL of remaining lifetime plus a grace period, so
    Redis eventually evicts metadata the sweeper never reached. The sweeper
    still does the real cleanup because only it removes blobs.
    """

    def __init__(self, redis_repository: RedisRepository, grace_seconds: int = 3600):
        """
        Initialize with Redis repository.

        Args:
            redis_repository: RedisRepository instance
            grace_seconds: Seconds metadata outlives its expiry inside Redis
        """
        self.redis_repo = redis_repository
        self.key_prefix = "content"
        self.expiry_index = f"{self.key_prefix}:expiry"
        self.grace_seconds = grace_seconds

    def _record_key(self, content_id: str) -> str:
        return f"{self.key_prefix}:{content_id}"

    def _owner_key(self, owner_id: str) -> str:
        return f"{self.key_prefix}:owner:{owner_id}"

    def _keys_for(self, content_id: str, owner_id: Optional[str]) -> List[str]:
        keys = [self._record_key(content_id), self.expiry_index]
        if owner_id:
            keys.append(self._owner_key(owner_id))
        return keys

    def insert(self, record: ContentRecord) -> bool:
        """Store a new record and index it, unless the id is taken."""
        ttl = record.get_remaining_seconds() + self.grace_seconds
        result = self.redis_repo.eval_script(
            INSERT_SCRIPT,
            self._keys_for(record.content_id, record.owner_id),
            [
                record.content_id,
                json.dumps(record.to_dict()),
                max(ttl, 1),
                record.expires_at.timestamp(),
            ],
        )
        return int(result) == 1

    def get(self, content_id: str) -> Optional[ContentRecord]:
        """Retrieve a record by id."""
        data = self.redis_repo.get_json(self._record_key(content_id))
        if data is None:
            return None

        try:
            return ContentRecord.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Error deserializing content record {content_id}: {e}")
            return None

    def increment_counter(
        self, content_id: str, access_kind: AccessKind, now: datetime
    ) -> IncrementResult:
        """Run the conditional increment script for the access kind's counter."""
        count_field, max_field, one_time_field = _COUNTER_FIELDS[access_kind]
        result = self.redis_repo.eval_script(
            INCREMENT_SCRIPT,
            [self._record_key(content_id), self.expiry_index],
            [content_id, count_field, max_field, one_time_field, now.timestamp()],
        )

        status = result[0].decode("utf-8") if isinstance(result[0], bytes) else result[0]
        outcome = ConsumeOutcome(status)
        if outcome is not ConsumeOutcome.INCREMENTED:
            return IncrementResult(outcome=outcome)

        record = ContentRecord.from_dict(RedisRepository.decode_json(result[1]))
        return IncrementResult(outcome=outcome, record=record)

    def delete(self, content_id: str) -> bool:
        """Remove a record and its index entries; False if it was already gone."""
        record = self.get(content_id)
        owner_id = record.owner_id if record else None
        removed = self.redis_repo.eval_script(
            DELETE_SCRIPT, self._keys_for(content_id, owner_id), [content_id]
        )
        return int(removed) > 0

    def find_expired_ids(self, now: datetime, limit: int = 500) -> List[str]:
        """Ids scored below ``now`` in the expiry index."""
        return self.redis_repo.zrange_by_score(self.expiry_index, now.timestamp(), limit)

    def find_by_owner(self, owner_id: str) -> List[ContentRecord]:
        """Records in the owner's index, newest first. Stale index entries are dropped."""
        owner_key = self._owner_key(owner_id)
        records = []
        for content_id in self.redis_repo.set_members(owner_key):
            record = self.get(content_id)
            if record is None:
                self.redis_repo.redis.srem(self.redis_repo._make_key(owner_key), content_id)
                continue
            records.append(record)

        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    def exists(self, content_id: str) -> bool:
        """Check if a record exists."""
        return self.redis_repo.exists(self._record_key(content_id))
