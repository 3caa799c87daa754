"""
Application Factory

Creates and configures the Flask application with all dependencies.
The factory pattern lets tests build an app with overridden services.
"""

import logging
import os
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from linkvault.api.health import get_health_status
from linkvault.application.content_service import ContentService
from linkvault.application.dependency_container import DependencyContainer
from linkvault.application.expiry_sweeper import ExpirySweeper
from linkvault.config.celery_config import make_celery
from linkvault.config.content_config import ContentConfig
from linkvault.config.gcs_config import GCSConfig
from linkvault.config.redis_config import get_redis_repository, init_redis
from linkvault.domain.content.repositories import ContentRepository
from linkvault.infrastructure.redis_content_repository import RedisContentRepository
from linkvault.infrastructure.storage_factory import FallbackBlobStore, StorageFactory

logger = logging.getLogger(__name__)


class AppConfig:
    """Application configuration."""

    def __init__(self):
        self.api_version = os.getenv("API_VERSION", "v1")
        self.flask_env = os.getenv("FLASK_ENV", "development")
        self.is_production = self.flask_env == "production"
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()


def create_app(config: Optional[AppConfig] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Application configuration, uses default if None

    Returns:
        Configured Flask application
    """
    if config is None:
        config = AppConfig()

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)

    content_config = ContentConfig()
    # Reject oversized bodies before they reach the service; the extra
    # megabyte leaves room for multipart framing
    app.config["MAX_CONTENT_LENGTH"] = content_config.max_upload_bytes + 1024 * 1024

    CORS(
        app,
        resources={
            r"/*": {
                "origins": content_config.frontend_url if config.is_production else "*",
                "methods": ["GET", "POST", "DELETE", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization", content_config.owner_header],
                "expose_headers": ["Content-Type", "Content-Disposition"],
                "max_age": 3600,
            }
        },
    )

    _initialize_infrastructure(app)
    _initialize_services(app, content_config)
    _register_blueprints(app, config)
    _register_health_endpoint(app)

    return app


def _initialize_infrastructure(app: Flask) -> None:
    """
    Initialize infrastructure components (Redis, Celery).

    Args:
        app: Flask application
    """
    try:
        init_redis()
        logger.info("Redis initialized successfully")

        app.celery = make_celery(app)
        logger.info("Celery initialized successfully")

    except Exception as e:
        logger.warning(f"Could not initialize infrastructure: {e}")
        app.celery = None


def _initialize_services(app: Flask, content_config: ContentConfig) -> None:
    """
    Register services in a DependencyContainer and attach it to the app.

    API resources and Celery tasks resolve everything from
    ``app.container``; nothing constructs services on its own.

    Args:
        app: Flask application
        content_config: Content lifecycle settings
    """
    try:
        container = DependencyContainer()

        redis_repo = get_redis_repository()
        container.register_singleton(type(redis_repo), redis_repo)
        container.register_singleton(ContentConfig, content_config)

        content_repository = RedisContentRepository(
            redis_repo, grace_seconds=content_config.record_grace_seconds
        )
        container.register_singleton(ContentRepository, content_repository)

        blob_store = StorageFactory.create_blob_store(content_config, GCSConfig())
        container.register_singleton(FallbackBlobStore, blob_store)

        content_service = ContentService(content_repository, blob_store, content_config)
        container.register_singleton(ContentService, content_service)

        # Orphaned local files are only removed once no record could still own them
        sweeper = ExpirySweeper(
            content_service,
            content_repository,
            batch_size=content_config.sweep_batch_size,
            local_storage=blob_store.local,
            orphan_max_age_seconds=(
                content_config.max_expiry_minutes * 60 + content_config.record_grace_seconds
            ),
        )
        container.register_singleton(ExpirySweeper, sweeper)

        app.container = container
        app.blob_store = blob_store

        logger.info("Application services initialized successfully with DependencyContainer")

    except Exception as e:
        logger.warning(f"Could not initialize services: {e}")
        app.container = None
        app.blob_store = None


def _register_blueprints(app: Flask, config: AppConfig) -> None:
    """
    Register API blueprints.

    Args:
        app: Flask application
        config: Application configuration
    """
    from linkvault.api.v1 import api_v1_bp

    app.register_blueprint(api_v1_bp)

    logger.info(
        f"API {config.api_version} registered at /api/{config.api_version} "
        f"with Swagger UI at /api/{config.api_version}/docs"
    )


def _register_health_endpoint(app: Flask) -> None:
    """
    Register health check endpoint.

    Args:
        app: Flask application
    """

    @app.route("/health", methods=["GET"])
    def health():
        """Overall health status of the application and its dependencies."""
        health_status, status_code = get_health_status(app)
        return jsonify(health_status), status_code
