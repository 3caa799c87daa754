"""
Unit tests for DependencyContainer
"""

import threading

import pytest

from linkvault.application.content_service import ContentService
from linkvault.application.dependency_container import (
    DependencyContainer,
    DependencyNotFoundError,
)


class TestDependencyContainer:
    def test_singleton_resolves_same_instance(self, content_service):
        container = DependencyContainer()
        container.register_singleton(ContentService, content_service)
        assert container.resolve(ContentService) is content_service
        assert container.resolve(ContentService) is content_service

    def test_transient_creates_new_instances(self):
        container = DependencyContainer()
        container.register_transient(list, lambda: [])
        assert container.resolve(list) is not container.resolve(list)

    def test_transient_factory_can_resolve_others(self):
        container = DependencyContainer()
        container.register_singleton(str, "value")
        container.register_transient(tuple, lambda: (container.resolve(str),))
        assert container.resolve(tuple) == ("value",)

    def test_unregistered_raises(self):
        container = DependencyContainer()
        with pytest.raises(DependencyNotFoundError):
            container.resolve(ContentService)
        assert container.try_resolve(ContentService) is None

    def test_override_wins_and_clears(self, content_service):
        container = DependencyContainer()
        container.register_singleton(ContentService, content_service)
        replacement = object()

        container.override(ContentService, replacement)
        assert container.resolve(ContentService) is replacement

        container.clear_overrides()
        assert container.resolve(ContentService) is content_service

    def test_is_registered(self):
        container = DependencyContainer()
        assert container.is_registered(dict) is False
        container.register_transient(dict, dict)
        assert container.is_registered(dict) is True

    def test_concurrent_resolution(self, content_service):
        container = DependencyContainer()
        container.register_singleton(ContentService, content_service)
        resolved = []

        def worker():
            resolved.append(container.resolve(ContentService))

        threads = [threading.Thread(target=worker) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert all(item is content_service for item in resolved)
