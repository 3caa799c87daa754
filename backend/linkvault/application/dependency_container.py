"""
Dependency Injection Container

Holds the content service, its repository, the blob store, and the sweeper
so API resources and Celery tasks resolve the same instances.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class DependencyNotFoundError(Exception):
    """Raised when attempting to resolve an unregistered dependency."""
    pass


class DependencyContainer:
    """
    Dependency injection container for managing service lifecycles.

    Singletons are shared, transients come from a factory on every resolve,
    and overrides (used by tests) beat both.
    """

    def __init__(self):
        self._singletons: Dict[Type, Any] = {}
        self._transients: Dict[Type, Callable[[], Any]] = {}
        self._overrides: Dict[Type, Any] = {}
        self._lock = threading.Lock()

    def register_singleton(self, interface: Type[T], implementation: T) -> None:
        """
        Register a shared instance.

        Example:
            container.register_singleton(ContentService, content_service)
        """
        with self._lock:
            self._singletons[interface] = implementation
            logger.debug(f"Registered singleton: {interface.__name__}")

    def register_transient(self, interface: Type[T], factory: Callable[[], T]) -> None:
        """Register a factory called on each resolve."""
        with self._lock:
            self._transients[interface] = factory
            logger.debug(f"Registered transient: {interface.__name__}")

    def resolve(self, interface: Type[T]) -> T:
        """
        Resolve a registered service.

        Raises:
            DependencyNotFoundError: If the interface is not registered
        """
        with self._lock:
            if interface in self._overrides:
                return self._overrides[interface]
            if interface in self._singletons:
                return self._singletons[interface]
            factory = self._transients.get(interface)
            if factory is None:
                raise DependencyNotFoundError(
                    f"No registration found for type: {interface.__name__}"
                )

        # Factory runs outside the lock so it can resolve other services
        return factory()

    def try_resolve(self, interface: Type[T]) -> Optional[T]:
        """Resolve a service, or None if it is not registered."""
        try:
            return self.resolve(interface)
        except DependencyNotFoundError:
            return None

    def override(self, interface: Type[T], implementation: T) -> None:
        """Override a registration, primarily for testing."""
        with self._lock:
            self._overrides[interface] = implementation
            logger.debug(f"Overridden: {interface.__name__}")

    def clear_overrides(self) -> None:
        with self._lock:
            self._overrides.clear()

    def is_registered(self, interface: Type) -> bool:
        with self._lock:
            return (
                interface in self._singletons or
                interface in self._transients or
                interface in self._overrides
            )
