"""
API v1 - LinkVault REST API

Versioned content endpoints with OpenAPI/Swagger documentation.
"""

import os

from flask import Blueprint
from flask_restx import Api

API_VERSION = os.getenv("API_VERSION", "v1")

api_v1_bp = Blueprint("api_v1", __name__, url_prefix=f"/api/{API_VERSION}")

api = Api(
    api_v1_bp,
    version="1.0",
    title="LinkVault API",
    description="Share text and files through links that expire or self-destruct",
    doc="/docs",  # Swagger UI at /api/v1/docs
)

# Namespaces import the api object for their models
from .namespaces import content_ns, files_ns, health_ns  # noqa: E402

api.add_namespace(content_ns, path="/content")
api.add_namespace(files_ns, path="/files")
api.add_namespace(health_ns, path="/health")
