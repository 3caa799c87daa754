"""
Unit tests for the application factory

Redis is never contacted: the connection pool is lazy and nothing here
issues a command.
"""

import pytest

from app_factory import AppConfig, create_app
from linkvault.application.content_service import ContentService
from linkvault.application.expiry_sweeper import ExpirySweeper
from linkvault.config.content_config import ContentConfig
from linkvault.domain.content.repositories import ContentRepository
from linkvault.infrastructure.redis_content_repository import RedisContentRepository
from linkvault.infrastructure.storage_factory import FallbackBlobStore


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.delenv("GCS_BUCKET_NAME", raising=False)
    return create_app(AppConfig())


class TestCreateApp:
    def test_services_registered(self, app):
        container = app.container
        assert isinstance(container.resolve(ContentService), ContentService)
        assert isinstance(container.resolve(ContentRepository), RedisContentRepository)
        assert isinstance(container.resolve(ExpirySweeper), ExpirySweeper)
        assert isinstance(container.resolve(ContentConfig), ContentConfig)

    def test_local_storage_only_without_bucket(self, app, tmp_path):
        store = app.container.resolve(FallbackBlobStore)
        assert store.remote_enabled is False
        assert (tmp_path / "uploads").is_dir()

    def test_sweeper_shares_service(self, app):
        sweeper = app.container.resolve(ExpirySweeper)
        assert sweeper.content_service is app.container.resolve(ContentService)
        assert sweeper.local_storage is app.blob_store.local

    def test_celery_attached(self, app):
        assert app.celery is not None
        assert "sweep-expired-content" in app.celery.conf.beat_schedule

    def test_routes_registered(self, app):
        rules = {rule.rule for rule in app.url_map.iter_rules()}
        assert "/health" in rules
        assert "/api/v1/content" in rules
        assert "/api/v1/content/<string:content_id>" in rules
        assert "/api/v1/files/<string:content_id>" in rules
