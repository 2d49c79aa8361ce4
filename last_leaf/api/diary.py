"""Diary API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from last_leaf.api.dependencies import get_current_identity, get_diary_service
from last_leaf.schemas.auth import TokenPayload
from last_leaf.schemas.diary import (
    DiaryCreate,
    DiaryCreated,
    DiaryPage,
    DiaryResponse,
    DiaryUpdate,
)
from last_leaf.services.diary_service import DiaryService, parse_limit

router = APIRouter(prefix="/api/diary", tags=["diary"])


@router.get("", response_model=DiaryPage)
async def list_diaries(
    identity: Annotated[TokenPayload, Depends(get_current_identity)],
    diary_service: Annotated[DiaryService, Depends(get_diary_service)],
    cursor: str | None = Query(default=None, description="Id of the last entry already seen"),
    limit: str | None = Query(default=None, description="Page size, 1-50 (default 10)"),
):
    """Get the current user's entries, newest first."""
    page = diary_service.list_diaries(identity.user_id, cursor, parse_limit(limit))
    return DiaryPage(
        diaries=[DiaryResponse.model_validate(diary) for diary in page.diaries],
        next_cursor=page.next_cursor,
    )


@router.post("", response_model=DiaryCreated, status_code=status.HTTP_201_CREATED)
async def create_diary(
    diary_data: DiaryCreate,
    identity: Annotated[TokenPayload, Depends(get_current_identity)],
    diary_service: Annotated[DiaryService, Depends(get_diary_service)],
):
    """Create a diary entry."""
    diary = diary_service.create_diary(identity.user_id, diary_data.content)
    return DiaryCreated(diary_id=diary.id)


@router.get("/{diary_id}", response_model=DiaryResponse)
async def get_diary(
    diary_id: str,
    identity: Annotated[TokenPayload, Depends(get_current_identity)],
    diary_service: Annotated[DiaryService, Depends(get_diary_service)],
):
    """Get a single entry owned by the current user."""
    return DiaryResponse.model_validate(diary_service.get_owned_diary(diary_id, identity.user_id))


@router.put("/{diary_id}", response_model=DiaryResponse)
async def update_diary(
    diary_id: str,
    diary_data: DiaryUpdate,
    identity: Annotated[TokenPayload, Depends(get_current_identity)],
    diary_service: Annotated[DiaryService, Depends(get_diary_service)],
):
    """Replace an entry's content."""
    diary = diary_service.update_diary(diary_id, identity.user_id, diary_data.content)
    return DiaryResponse.model_validate(diary)


@router.delete("/{diary_id}")
async def delete_diary(
    diary_id: str,
    identity: Annotated[TokenPayload, Depends(get_current_identity)],
    diary_service: Annotated[DiaryService, Depends(get_diary_service)],
):
    """Delete an entry."""
    diary_service.delete_diary(diary_id, identity.user_id)
    return {"message": "Diary deleted successfully"}
