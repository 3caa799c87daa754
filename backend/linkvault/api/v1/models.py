"""
API Models for request/response validation and Swagger documentation
"""

from flask_restx import fields

from linkvault.api.v1 import api

# =============================================================================
# Request Models
# =============================================================================

text_upload_request = api.model(
    "TextUploadRequest",
    {
        "text": fields.String(required=True, description="Text to share", example="hello"),
        "expires_at": fields.String(
            description="Absolute expiry (ISO 8601). Wins over expires_in_minutes.",
            example="2030-01-01T12:00:00Z",
        ),
        "expires_in_minutes": fields.Integer(
            description="Relative expiry in minutes (default 10)", min=1, example=10
        ),
        "password": fields.String(description="Optional password"),
        "max_views": fields.Integer(description="Maximum number of views", min=1),
        "one_time_view": fields.Boolean(description="Delete after the first view", default=False),
    },
)

view_request = api.model(
    "ViewRequest",
    {
        "password": fields.String(description="Password for protected content"),
    },
)

delete_request = api.model(
    "DeleteRequest",
    {
        "delete_token": fields.String(description="Token returned at upload time"),
    },
)

# =============================================================================
# Response Models
# =============================================================================

upload_response = api.model(
    "UploadResponse",
    {
        "id": fields.String(description="Content identifier"),
        "url": fields.String(description="Share link"),
        "expires_at": fields.String(description="Expiry (ISO 8601)"),
        "delete_token": fields.String(description="Secret for deleting the content, shown once"),
        "password_protected": fields.Boolean(),
        "content_type": fields.String(enum=["text", "file"]),
        "one_time_view": fields.Boolean(),
        "max_views": fields.Integer(allow_null=True),
        "one_time_download": fields.Boolean(),
        "max_downloads": fields.Integer(allow_null=True),
    },
)

content_summary = api.model(
    "ContentSummary",
    {
        "id": fields.String(description="Content identifier"),
        "content_type": fields.String(enum=["text", "file"]),
        "file_name": fields.String(allow_null=True),
        "created_at": fields.String(),
        "expires_at": fields.String(),
        "view_count": fields.Integer(),
        "max_views": fields.Integer(allow_null=True),
        "one_time_view": fields.Boolean(),
        "download_count": fields.Integer(),
        "max_downloads": fields.Integer(allow_null=True),
        "one_time_download": fields.Boolean(),
        "password_protected": fields.Boolean(),
    },
)

content_view = api.inherit(
    "ContentView",
    content_summary,
    {
        "text_content": fields.String(allow_null=True),
        "file_size": fields.Integer(allow_null=True, description="File size in bytes"),
        "mime_type": fields.String(allow_null=True),
        "storage_backend": fields.String(allow_null=True, enum=["local", "remote"]),
        "remaining_seconds": fields.Integer(description="Seconds until expiry"),
    },
)

view_response = api.model(
    "ViewResponse",
    {
        "id": fields.String(),
        "text_content": fields.String(),
        "view_count": fields.Integer(),
        "remaining_views": fields.Integer(allow_null=True, description="Null means unlimited"),
        "one_time_viewed": fields.Boolean(),
        "deleted": fields.Boolean(description="True when this view deleted the content"),
    },
)

error_response = api.model(
    "ErrorResponse",
    {
        "success": fields.Boolean(default=False),
        "error": fields.String(description="Error category"),
        "title": fields.String(),
        "message": fields.String(),
        "action": fields.String(),
        "requires_password": fields.Boolean(description="Present when a password is needed"),
    },
)

health_response = api.model(
    "HealthResponse",
    {
        "status": fields.String(description="Overall health status", enum=["ok", "degraded"]),
        "message": fields.String(description="Health message"),
        "redis": fields.String(description="Redis connection status"),
        "celery": fields.String(description="Celery availability status"),
        "storage": fields.String(description="Blob storage backends"),
    },
)
