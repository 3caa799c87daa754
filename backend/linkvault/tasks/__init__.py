"""
Celery Tasks

Task modules are listed in ``celery_app.conf.imports`` and loaded by the
worker, so nothing is imported here.
"""
