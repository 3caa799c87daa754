"""
Cleanup Task

Celery beat task that sweeps expired content.
Thin wrapper that delegates to the ExpirySweeper application service.
"""

import logging

from celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="linkvault.tasks.sweep_expired_content")
def sweep_expired_content(self):
    """
    Periodic sweep of expired content and orphaned local blobs.

    Runs every SWEEP_INTERVAL_SECONDS (Celery beat). The sweeper is resolved
    from the DependencyContainer so the task shares the API's repository and
    blob store wiring.

    Returns:
        dict: Sweep statistics with counts and errors
    """
    logger.info("Starting expired content sweep")

    try:
        from celery_app import flask_app
        from linkvault.application.expiry_sweeper import ExpirySweeper

        sweeper = flask_app.container.resolve(ExpirySweeper)
        stats = sweeper.sweep().to_dict()

        logger.info(
            f"Sweep completed - Scanned: {stats['scanned']}, "
            f"Deleted: {stats['deleted']}, "
            f"Skipped: {stats['skipped']}, "
            f"Orphaned: {stats['orphaned_blobs_removed']}, "
            f"Errors: {len(stats['errors'])}"
        )
        if stats["errors"]:
            logger.warning(f"Sweep errors: {stats['errors']}")

        return stats

    except Exception as e:
        error_msg = f"Sweep task failed: {e}"
        logger.error(error_msg, exc_info=True)
        return {
            "scanned": 0,
            "deleted": 0,
            "skipped": 0,
            "orphaned_blobs_removed": 0,
            "errors": [error_msg],
        }
