"""Profile of the authenticated user (GET/PUT /me)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_current_identity, get_user_store
from app.schemas.auth import CurrentIdentity
from app.schemas.user import ProfileUpdate, UserProfile
from app.services.accounts import get_user, update_profile
from app.services.user_store import UserStore

router = APIRouter()


@router.get("", response_model=UserProfile)
def read_me(
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> UserProfile:
    """Return the caller's own record. 404 if the account was deleted after the token was issued."""
    return UserProfile.model_validate(get_user(store, identity.id))


@router.put("", response_model=UserProfile)
def update_me(
    body: ProfileUpdate,
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> UserProfile:
    """Update name, phone and/or addresses of the caller's own record."""
    addresses = (
        [a.model_dump(exclude_none=True) for a in body.addresses]
        if body.addresses is not None
        else None
    )
    user = update_profile(store, identity.id, name=body.name, phone=body.phone, addresses=addresses)
    return UserProfile.model_validate(user)
