"""User settings API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from last_leaf.api.dependencies import clear_auth_cookie, get_current_identity, get_user_service
from last_leaf.schemas.auth import MessageResponse, TokenPayload
from last_leaf.schemas.user import (
    ContactResponse,
    ContactsResponse,
    ContactsUpdate,
    PreferencesResponse,
    PreferencesUpdate,
    ProfileResponse,
    ProfileUpdate,
    UserProfile,
)
from last_leaf.services.user_service import UserService

router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    identity: Annotated[TokenPayload, Depends(get_current_identity)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Get the current user's profile."""
    user = user_service.get_user(identity.user_id)
    return ProfileResponse(user=UserProfile.model_validate(user))


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    identity: Annotated[TokenPayload, Depends(get_current_identity)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Update nickname and/or display name."""
    user = user_service.update_profile(identity.user_id, profile_data)
    return ProfileResponse(user=UserProfile.model_validate(user))


@router.get("/preferences", response_model=PreferencesResponse)
async def get_preferences(
    identity: Annotated[TokenPayload, Depends(get_current_identity)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Get the inactivity timer settings."""
    return PreferencesResponse.model_validate(user_service.get_user(identity.user_id))


@router.put("/preferences", response_model=PreferencesResponse)
async def update_preferences(
    preferences: PreferencesUpdate,
    identity: Annotated[TokenPayload, Depends(get_current_identity)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Update the inactivity timer settings."""
    user = user_service.update_preferences(identity.user_id, preferences)
    return PreferencesResponse.model_validate(user)


@router.get("/contacts", response_model=ContactsResponse)
async def get_contacts(
    identity: Annotated[TokenPayload, Depends(get_current_identity)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Get the emergency contacts."""
    contacts = user_service.list_contacts(identity.user_id)
    return ContactsResponse(contacts=[ContactResponse.model_validate(c) for c in contacts])


@router.put("/contacts", response_model=ContactsResponse)
async def replace_contacts(
    contacts_data: ContactsUpdate,
    identity: Annotated[TokenPayload, Depends(get_current_identity)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Replace the full list of emergency contacts."""
    contacts = user_service.replace_contacts(identity.user_id, contacts_data.contacts)
    return ContactsResponse(contacts=[ContactResponse.model_validate(c) for c in contacts])


@router.delete("", response_model=MessageResponse)
async def delete_account(
    response: Response,
    identity: Annotated[TokenPayload, Depends(get_current_identity)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Withdraw: delete the account with all entries and contacts."""
    user_service.delete_account(identity.user_id)
    clear_auth_cookie(response)
    return MessageResponse(message="Account deleted successfully")
