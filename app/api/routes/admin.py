"""Admin-only user management. Admin role is re-read from the store on each request."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_user_store, require_admin
from app.models import User
from app.schemas.auth import MessageResponse
from app.schemas.user import UserProfile
from app.services.accounts import delete_user
from app.services.user_store import UserStore

router = APIRouter()


@router.get("/users", response_model=list[UserProfile])
def list_users(
    _admin: Annotated[User, Depends(require_admin)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> list[UserProfile]:
    """List all users without password hashes or refresh tokens."""
    return [UserProfile.model_validate(u) for u in store.list_users()]


@router.delete("/users/{user_id}", response_model=MessageResponse)
def remove_user(
    user_id: str,
    admin: Annotated[User, Depends(require_admin)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> MessageResponse:
    """Delete a user and every session they hold. 404 if no such user."""
    delete_user(store, user_id, deleted_by=admin.id)
    return MessageResponse(message="User deleted")
