"""Admin-only user management routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from prowler_dashboard.api.auth import require_admin
from prowler_dashboard.core.database import get_db
from prowler_dashboard.schemas.auth import CurrentUser, MessageResponse
from prowler_dashboard.schemas.users import UserCreate, UserOut, UserUpdate
from prowler_dashboard.services.users import (
    DuplicateUserError,
    SelfDeletionError,
    UserNotFoundError,
    create_user,
    delete_user,
    list_users,
    update_user,
)

router = APIRouter()


@router.get("", response_model=list[UserOut])
def get_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserOut]:
    """List all users, newest first (admin only)."""
    return [UserOut.model_validate(u) for u in list_users(db)]


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def post_user(
    body: UserCreate,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    """Create a user with any role (admin only)."""
    try:
        user = create_user(
            db,
            username=body.username,
            email=body.email,
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
            role=body.role,
        )
    except DuplicateUserError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return UserOut.model_validate(user)


@router.put("/{user_id}", response_model=UserOut)
def put_user(
    user_id: str,
    body: UserUpdate,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    """Partially update a user (admin only)."""
    try:
        user = update_user(db, user_id, body.model_dump(exclude_unset=True))
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except DuplicateUserError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return UserOut.model_validate(user)


@router.delete("/{user_id}", response_model=MessageResponse)
def remove_user(
    user_id: str,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete a user (admin only). Admins cannot delete themselves."""
    try:
        delete_user(db, user_id, acting_user_id=admin.id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except SelfDeletionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return MessageResponse(message="User deleted successfully")
