"""
Celery Application Instance

Creates the Celery app instance for use by workers and the beat scheduler.
Uses the app factory so the sweep task resolves the same services as the API.
"""

from app_factory import create_app

flask_app = create_app()

celery_app = flask_app.celery

# Task modules are imported by name when the worker starts, after
# `celery_app` exists, so the task decorators can reference it.
celery_app.conf.imports = ("linkvault.tasks.cleanup_task",)
