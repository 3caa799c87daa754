"""
Google Cloud Storage Configuration

Manages GCS client initialization for the remote blob store.
When no bucket is configured the remote store is disabled and every
upload goes to local storage.
"""

import logging
import os
from typing import Optional

from google.cloud import storage
from google.oauth2 import service_account

logger = logging.getLogger(__name__)


class GCSConfig:
    """GCS configuration settings."""

    def __init__(self):
        self.bucket_name = os.getenv("GCS_BUCKET_NAME")
        self.credentials_path = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
        self.timeout_seconds = float(os.getenv("GCS_TIMEOUT_SECONDS", 30))

    @property
    def enabled(self) -> bool:
        return bool(self.bucket_name and self.bucket_name.strip())


def create_gcs_bucket(config: Optional[GCSConfig] = None) -> Optional[storage.Bucket]:
    """
    Create a bucket handle for the configured GCS bucket.

    Args:
        config: GCS configuration, uses default if None

    Returns:
        Bucket handle, or None if GCS is not configured or the client
        could not be created
    """
    if config is None:
        config = GCSConfig()

    if not config.enabled:
        logger.info("GCS_BUCKET_NAME not set, remote blob storage disabled")
        return None

    try:
        if config.credentials_path and os.path.exists(config.credentials_path):
            credentials = service_account.Credentials.from_service_account_file(
                config.credentials_path
            )
            client = storage.Client(credentials=credentials)
            logger.info(f"GCS client initialized with service account: {config.credentials_path}")
        else:
            client = storage.Client()
            logger.info("GCS client initialized with default credentials")
    except Exception as e:
        logger.warning(f"Could not initialize GCS client, using local storage only: {e}")
        return None

    return client.bucket(config.bucket_name)
