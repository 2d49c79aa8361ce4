"""User settings service: profile, timer preferences, contacts and withdrawal."""

import logging

from sqlalchemy.orm import Session

from last_leaf.exceptions import NotFoundError
from last_leaf.models.contact import Contact
from last_leaf.models.user import User
from last_leaf.schemas.user import ContactIn, PreferencesUpdate, ProfileUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service for settings owned by a single user."""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> User:
        """Get the user behind a session token."""
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user_id: str, data: ProfileUpdate) -> User:
        """Apply the provided profile fields. Email is immutable."""
        user = self.get_user(user_id)
        for field in data.model_fields_set & {"nickname", "name"}:
            setattr(user, field, getattr(data, field))
        self.db.commit()
        self.db.refresh(user)
        return user

    def update_preferences(self, user_id: str, data: PreferencesUpdate) -> User:
        """Apply the provided inactivity timer settings."""
        user = self.get_user(user_id)
        if data.timer_status is not None:
            user.timer_status = data.timer_status
        if data.timer_idle_threshold_sec is not None:
            user.timer_idle_threshold_sec = data.timer_idle_threshold_sec
        self.db.commit()
        self.db.refresh(user)
        logger.info(
            f"User {user_id} timer set to {user.timer_status.value} "
            f"after {user.timer_idle_threshold_sec}s idle"
        )
        return user

    def list_contacts(self, user_id: str) -> list[Contact]:
        """Get the user's emergency contacts."""
        return (
            self.db.query(Contact)
            .filter(Contact.user_id == user_id)
            .order_by(Contact.created_at, Contact.id)
            .all()
        )

    def replace_contacts(self, user_id: str, contacts: list[ContactIn]) -> list[Contact]:
        """Replace the whole contact list.

        The delete and the insert are committed separately, so a failed insert
        leaves the user with no contacts.
        """
        self.db.query(Contact).filter(Contact.user_id == user_id).delete(
            synchronize_session=False
        )
        self.db.commit()

        new_contacts = [
            Contact(user_id=user_id, email=contact.email, phone=contact.phone)
            for contact in contacts
        ]
        self.db.add_all(new_contacts)
        self.db.commit()
        for contact in new_contacts:
            self.db.refresh(contact)

        logger.info(f"Saved {len(new_contacts)} contacts for user {user_id}")
        return new_contacts

    def delete_account(self, user_id: str) -> None:
        """Delete the user. Diaries and contacts go with it."""
        user = self.get_user(user_id)
        self.db.delete(user)
        self.db.commit()
        logger.info(f"Deleted account {user_id}")
