"""
Health Status

Shared by the root ``/health`` route and the versioned API.
"""

from flask import Flask

from linkvault.config.redis_config import redis_health_check


def get_health_status(app: Flask) -> tuple[dict, int]:
    """
    Get health status of all system components.

    Args:
        app: Flask application instance

    Returns:
        Tuple of (health_status_dict, http_status_code)
    """
    health_status = {
        "status": "ok",
        "message": "backend ready",
        "redis": "unknown",
        "celery": "unknown",
        "storage": "unknown",
    }

    try:
        if redis_health_check():
            health_status["redis"] = "connected"
        else:
            health_status["redis"] = "disconnected"
            health_status["status"] = "degraded"
    except Exception as e:
        health_status["redis"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    if getattr(app, "celery", None) is not None:
        health_status["celery"] = "available"
    else:
        health_status["celery"] = "unavailable"
        health_status["status"] = "degraded"

    blob_store = getattr(app, "blob_store", None)
    if blob_store is None:
        health_status["storage"] = "unavailable"
        health_status["status"] = "degraded"
    elif blob_store.remote_enabled:
        health_status["storage"] = "remote+local"
    else:
        health_status["storage"] = "local"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code
