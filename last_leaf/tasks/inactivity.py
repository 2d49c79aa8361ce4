"""Celery tasks for the inactivity timer."""

import logging

from sqlalchemy.orm import Session

from last_leaf.celery_app import app as celery_app
from last_leaf.database import SessionLocal
from last_leaf.services.inactivity_service import InactivityService
from last_leaf.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=2)
def check_inactive_users(self) -> dict:
    """Notify contacts of users whose idle threshold has passed.

    This task runs on the celery-beat schedule (hourly by default).

    Returns:
        dict with processing statistics
    """
    db: Session = SessionLocal()
    try:
        stats = InactivityService(db, NotificationService()).run()
        logger.info(f"Inactivity check complete: {stats}")
        return stats

    except Exception as e:
        logger.error(f"Error in check_inactive_users: {e}", exc_info=True)
        db.rollback()

        if self.request.retries < self.max_retries:
            raise self.retry(exc=e, countdown=60)

        return {"error": str(e)}

    finally:
        db.close()
