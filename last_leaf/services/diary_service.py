"""Diary service: ownership-scoped CRUD and cursor pagination."""

import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from last_leaf.exceptions import AuthorizationError, NotFoundError, ValidationError
from last_leaf.models.diary import Diary
from last_leaf.models.user import User
from last_leaf.schemas.validation import CONTENT_REQUIRED_MESSAGE, is_blank

logger = logging.getLogger(__name__)

PAGINATION_DEFAULT_LIMIT = 10
PAGINATION_MAX_LIMIT = 50

LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


def parse_limit(raw_limit: str | None) -> int:
    """Turn the ``limit`` query value into a page size.

    Only the leading integer counts, so "5abc" and "3.7" read as 5 and 3.
    Values without one, or non-positive values, fall back to the default;
    large values are clamped to the maximum.
    """
    match = LEADING_INTEGER.match(raw_limit or "")
    if match is None:
        return PAGINATION_DEFAULT_LIMIT
    limit = int(match.group(1))
    if limit <= 0:
        return PAGINATION_DEFAULT_LIMIT
    return min(limit, PAGINATION_MAX_LIMIT)


@dataclass
class DiaryPageResult:
    """Entries for one page plus the id to continue from."""

    diaries: list[Diary]
    next_cursor: str | None


def touch_last_active(db: Session, user_id: str) -> None:
    """Best-effort update of the user's last activity time.

    Failures are logged and swallowed so they never affect the caller.
    """
    try:
        db.query(User).filter(User.id == user_id).update(
            {User.last_active_at: datetime.now(UTC)}, synchronize_session=False
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update last_active_at for user {user_id}: {e}")


class DiaryService:
    """Service for a user's diary entries."""

    def __init__(self, db: Session):
        self.db = db

    def list_diaries(self, user_id: str, cursor: str | None, limit: int) -> DiaryPageResult:
        """Return one page of the user's entries, newest first.

        Fetches ``limit + 1`` rows after the cursor row. The extra row only
        signals that another page exists and is never returned.
        """
        query = self.db.query(Diary).filter(Diary.user_id == user_id)

        if cursor and cursor.strip():
            anchor = (
                self.db.query(Diary)
                .filter(Diary.id == cursor.strip(), Diary.user_id == user_id)
                .first()
            )
            if anchor is None:
                logger.info(f"Unknown diary cursor {cursor!r} for user {user_id}")
                return DiaryPageResult(diaries=[], next_cursor=None)
            query = query.filter(
                or_(
                    Diary.created_at < anchor.created_at,
                    and_(Diary.created_at == anchor.created_at, Diary.id < anchor.id),
                )
            )

        rows = query.order_by(Diary.created_at.desc(), Diary.id.desc()).limit(limit + 1).all()

        has_more = len(rows) > limit
        items = rows[:limit]
        next_cursor = items[-1].id if has_more else None
        return DiaryPageResult(diaries=items, next_cursor=next_cursor)

    def create_diary(self, user_id: str, content: str) -> Diary:
        """Create an entry and refresh the owner's activity clock."""
        self._require_content(content)

        diary = Diary(user_id=user_id, content=content)
        self.db.add(diary)
        self.db.commit()
        self.db.refresh(diary)

        touch_last_active(self.db, user_id)
        return diary

    def get_owned_diary(self, diary_id: str, user_id: str) -> Diary:
        """Get an entry in a single owner-scoped query.

        Missing and foreign entries are both reported as not found.
        """
        diary = (
            self.db.query(Diary).filter(Diary.id == diary_id, Diary.user_id == user_id).first()
        )
        if diary is None:
            raise NotFoundError()
        return diary

    def update_diary(self, diary_id: str, user_id: str, content: str | None) -> Diary:
        """Replace an entry's content.

        Unlike reads, a foreign entry is reported as forbidden rather than
        not found.
        """
        diary = self._get_for_write(diary_id, user_id)
        self._require_content(content)

        diary.content = content
        self.db.commit()
        self.db.refresh(diary)

        touch_last_active(self.db, user_id)
        return diary

    def delete_diary(self, diary_id: str, user_id: str) -> None:
        """Hard delete an entry."""
        diary = self._get_for_write(diary_id, user_id)
        self.db.delete(diary)
        self.db.commit()
        logger.info(f"Deleted diary {diary_id} for user {user_id}")

    def _get_for_write(self, diary_id: str, user_id: str) -> Diary:
        diary = self.db.query(Diary).filter(Diary.id == diary_id).first()
        if diary is None:
            raise NotFoundError()
        if diary.user_id != user_id:
            logger.warning(f"User {user_id} tried to modify diary {diary_id} owned by someone else")
            raise AuthorizationError()
        return diary

    @staticmethod
    def _require_content(content: str | None) -> None:
        if is_blank(content):
            raise ValidationError(CONTENT_REQUIRED_MESSAGE)
