"""
Content Configuration

Expiry, upload, and sweep settings for the content lifecycle.
"""

import os


class ContentConfig:
    """Content lifecycle configuration settings."""

    def __init__(self):
        # Expiry
        self.default_expiry_minutes = int(os.getenv("DEFAULT_EXPIRY_MINUTES", 10))
        self.max_expiry_minutes = int(os.getenv("MAX_EXPIRY_MINUTES", 7 * 24 * 60))

        # Uploads
        self.max_upload_bytes = int(os.getenv("MAX_UPLOAD_BYTES", 50 * 1024 * 1024))
        self.upload_dir = os.getenv("UPLOAD_DIR", "/tmp/linkvault/uploads")
        self.bcrypt_rounds = int(os.getenv("BCRYPT_ROUNDS", 10))

        # Redis keeps metadata this long past expiry so the sweeper can
        # still find the blob reference
        self.record_grace_seconds = int(os.getenv("RECORD_GRACE_SECONDS", 3600))

        # Sweeper
        self.sweep_interval_seconds = float(os.getenv("SWEEP_INTERVAL_SECONDS", 300))
        self.sweep_batch_size = int(os.getenv("SWEEP_BATCH_SIZE", 500))

        # Links and identity
        self.frontend_url = os.getenv("FRONTEND_URL", "http://localhost:3000").rstrip("/")
        self.owner_header = os.getenv("OWNER_HEADER", "X-User-Id")

    def share_url(self, content_id: str) -> str:
        """Public link shown to the uploader."""
        return f"{self.frontend_url}/content/{content_id}"
