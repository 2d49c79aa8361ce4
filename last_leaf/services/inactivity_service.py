"""Inactivity evaluator: notifies emergency contacts of users who went quiet."""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy import and_, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from last_leaf.models.contact import Contact
from last_leaf.models.enums import IdleThreshold, TimerStatus
from last_leaf.models.user import User
from last_leaf.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

EMAIL_SUBJECT = "A message from The Last Leaf"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def idle_deadline(user: User) -> datetime:
    """When the user's timer fires if they stay inactive."""
    reference = user.last_active_at or user.created_at
    return _as_utc(reference) + timedelta(seconds=user.timer_idle_threshold_sec)


def build_message(user: User) -> str:
    """Text sent to each contact."""
    days = user.timer_idle_threshold_sec // 86400
    display = user.name or user.nickname
    return (
        f"{display} ({user.email}) listed you as an emergency contact on The Last Leaf "
        f"and has not been active for more than {days} days. "
        "Please check in on them."
    )


class InactivityService:
    """Service that finds expired timers and notifies contacts."""

    def __init__(self, db: Session, notifier: NotificationService):
        self.db = db
        self.notifier = notifier

    def find_expired_users(self, now: datetime) -> list[User]:
        """Users with an armed timer whose idle threshold has passed.

        Thresholds come from a fixed allow-list, so each one becomes a plain
        timestamp cutoff the database can compare against.
        """
        reference = func.coalesce(User.last_active_at, User.created_at)
        cutoffs = [
            and_(
                User.timer_idle_threshold_sec == threshold,
                reference <= now - timedelta(seconds=threshold),
            )
            for threshold in IdleThreshold.values()
        ]
        return (
            self.db.query(User)
            .filter(User.timer_status == TimerStatus.ACTIVE, or_(*cutoffs))
            .order_by(User.id)
            .all()
        )

    def notify_contacts(self, user: User) -> dict:
        """Send the inactivity message to every contact of the user."""
        stats = {"emails_sent": 0, "sms_sent": 0}
        contacts = self.db.query(Contact).filter(Contact.user_id == user.id).all()
        if not contacts:
            logger.warning(f"User {user.id} timer fired but no contacts are registered")
            return stats

        message = build_message(user)
        for contact in contacts:
            if contact.email and self.notifier.send_email(contact.email, EMAIL_SUBJECT, message):
                stats["emails_sent"] += 1
            if contact.phone and self.notifier.send_sms(contact.phone, message):
                stats["sms_sent"] += 1
        return stats

    def run(self, now: datetime | None = None) -> dict:
        """Process every expired timer once.

        A fired timer is switched to inactive and committed before any contact
        is reached, so contacts are told at most once per arming even when a
        delivery fails. The user re-arms it from their preferences.
        """
        now = now or datetime.now(UTC)
        stats = {"checked": 0, "triggered": 0, "failed": 0, "emails_sent": 0, "sms_sent": 0}

        expired = self.find_expired_users(now)
        stats["checked"] = len(expired)

        for user in expired:
            user_id = user.id
            try:
                user.timer_status = TimerStatus.INACTIVE
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Could not disarm timer for user {user_id}, skipping: {e}")
                stats["failed"] += 1
                continue

            try:
                sent = self.notify_contacts(user)
            except Exception:
                logger.exception(f"Notifying contacts failed for user {user_id}")
                stats["failed"] += 1
                continue

            stats["emails_sent"] += sent["emails_sent"]
            stats["sms_sent"] += sent["sms_sent"]
            stats["triggered"] += 1
            logger.info(
                f"Inactivity timer fired for user {user_id} "
                f"(deadline {idle_deadline(user).isoformat()}): {sent}"
            )

        return stats
