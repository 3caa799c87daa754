"""
Integration tests for RedisContentRepository

Runs the Lua scripts against a real Redis; skipped when none is reachable.
"""

import threading
from datetime import timedelta

import pytest

from linkvault.application.content_service import ContentService
from linkvault.domain.content.entities import utc_now
from linkvault.domain.content.value_objects import AccessKind, ConsumeOutcome
from linkvault.domain.errors import ContentExhaustedError
from tests.fixtures.domain_fixtures import create_file_record, create_text_record, text_request
from tests.fixtures.mock_repositories import MockBlobStorage, make_blob_store


class TestInsertAndGet:
    def test_round_trip(self, redis_content_repository):
        record = create_text_record(text="héllo ✓", max_views=3, owner_id="user-1")
        assert redis_content_repository.insert(record) is True
        assert redis_content_repository.get(record.content_id) == record

    def test_insert_never_overwrites(self, redis_content_repository):
        record = create_text_record()
        assert redis_content_repository.insert(record) is True
        clash = create_text_record(content_id=record.content_id, text="other")
        assert redis_content_repository.insert(clash) is False
        assert redis_content_repository.get(record.content_id).text_content == "hello"

    def test_ttl_covers_expiry_plus_grace(self, redis_content_repository, redis_client):
        record = create_text_record()
        redis_content_repository.insert(record)
        ttl = redis_client.ttl(f"content:{record.content_id}")
        assert 600 < ttl <= 660

    def test_file_record_blob_reference(self, redis_content_repository):
        record = create_file_record(max_downloads=2)
        redis_content_repository.insert(record)
        assert redis_content_repository.get(record.content_id).blob == record.blob


class TestIncrement:
    def test_ceiling(self, redis_content_repository):
        record = create_text_record(max_views=2)
        redis_content_repository.insert(record)
        now = utc_now()

        outcomes = [
            redis_content_repository.increment_counter(record.content_id, AccessKind.VIEW, now).outcome
            for _ in range(3)
        ]
        assert outcomes == [ConsumeOutcome.INCREMENTED, ConsumeOutcome.INCREMENTED, ConsumeOutcome.LIMIT_REACHED]
        assert redis_content_repository.get(record.content_id).view_count == 2

    def test_one_time_flips_consumed(self, redis_content_repository):
        record = create_text_record(one_time_view=True)
        redis_content_repository.insert(record)

        first = redis_content_repository.increment_counter(record.content_id, AccessKind.VIEW, utc_now())
        second = redis_content_repository.increment_counter(record.content_id, AccessKind.VIEW, utc_now())

        assert first.succeeded and first.record.consumed is True
        assert second.outcome is ConsumeOutcome.CONSUMED

    def test_expired(self, redis_content_repository):
        record = create_text_record()
        redis_content_repository.insert(record)
        later = record.expires_at + timedelta(seconds=1)
        result = redis_content_repository.increment_counter(record.content_id, AccessKind.VIEW, later)
        assert result.outcome is ConsumeOutcome.EXPIRED

    def test_missing(self, redis_content_repository):
        result = redis_content_repository.increment_counter("AbCdEf123456", AccessKind.VIEW, utc_now())
        assert result.outcome is ConsumeOutcome.NOT_FOUND

    def test_download_counter(self, redis_content_repository):
        record = create_file_record()
        redis_content_repository.insert(record)
        result = redis_content_repository.increment_counter(record.content_id, AccessKind.DOWNLOAD, utc_now())
        assert result.record.download_count == 1
        assert result.record.view_count == 0

    def test_ttl_kept_after_increment(self, redis_content_repository, redis_client):
        record = create_text_record()
        redis_content_repository.insert(record)
        redis_content_repository.increment_counter(record.content_id, AccessKind.VIEW, utc_now())
        assert redis_client.ttl(f"content:{record.content_id}") > 0

    def test_concurrent_consumes(self, redis_content_repository, content_config):
        service = ContentService(redis_content_repository, make_blob_store(MockBlobStorage()), content_config)
        created = service.create(text_request(max_views=3))
        successes = []
        barrier = threading.Barrier(10)

        def worker():
            barrier.wait()
            try:
                service.consume(created.content_id, AccessKind.VIEW)
                successes.append(1)
            except ContentExhaustedError:
                pass

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(successes) == 3


class TestDeleteAndIndexes:
    def test_delete_is_idempotent(self, redis_content_repository, redis_client):
        record = create_text_record(owner_id="user-1")
        redis_content_repository.insert(record)

        assert redis_content_repository.delete(record.content_id) is True
        assert redis_content_repository.delete(record.content_id) is False
        assert redis_client.zscore("content:expiry", record.content_id) is None
        assert redis_client.sismember("content:owner:user-1", record.content_id) == 0

    def test_find_expired_ids(self, redis_content_repository):
        now = utc_now()
        old = create_text_record(created_at=now - timedelta(hours=1), expires_at=now - timedelta(minutes=1))
        live = create_text_record()
        redis_content_repository.insert(live)
        redis_content_repository.insert(old)

        assert redis_content_repository.find_expired_ids(now) == [old.content_id]

    def test_find_by_owner_newest_first(self, redis_content_repository):
        now = utc_now()
        first = create_text_record(created_at=now - timedelta(minutes=2), owner_id="user-1")
        second = create_text_record(created_at=now - timedelta(minutes=1), owner_id="user-1")
        redis_content_repository.insert(first)
        redis_content_repository.insert(second)
        redis_content_repository.insert(create_text_record(owner_id="user-2"))

        owned = redis_content_repository.find_by_owner("user-1")
        assert [r.content_id for r in owned] == [second.content_id, first.content_id]

    def test_find_by_owner_drops_stale_ids(self, redis_content_repository, redis_client):
        record = create_text_record(owner_id="user-1")
        redis_content_repository.insert(record)
        redis_client.delete(f"content:{record.content_id}")

        assert redis_content_repository.find_by_owner("user-1") == []
        assert redis_client.scard("content:owner:user-1") == 0
