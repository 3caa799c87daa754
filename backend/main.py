"""
main.py

Flask backend for sharing text and files through expiring links.

Dependencies:
  - Python packages: Flask, flask-restx, flask-cors, redis, celery,
    google-cloud-storage, bcrypt
  - Infrastructure: Redis server; optional GCS bucket

Notes:
  - API v1 endpoints available at /api/v1/ with Swagger docs at /api/v1/docs
  - Expired content is swept by Celery beat (see celery_app.py)
"""

import os

from app_factory import create_app

app = create_app()

if __name__ == "__main__":
    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_PORT", 8000))
    debug = os.getenv("FLASK_DEBUG", "false").lower() == "true"

    app.run(host=host, port=port, debug=debug, threaded=True)
