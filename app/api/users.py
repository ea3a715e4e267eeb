"""
User directory routes: list every account or fetch one by id.

`/user/{user_id}` is kept next to `/users/{user_id}` for clients that fetch
profiles through the singular path.
"""

from uuid import UUID

from fastapi import APIRouter

from app.schemas import UserInfo, UserListResponse, UserResponse
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["User Management"])
profile_router = APIRouter(prefix="/user", tags=["User Management"])


@router.get("", response_model=UserListResponse)
async def get_users():
    """All registered users, without password hashes."""
    users = await UserService().list_users()
    return UserListResponse(users=[UserInfo.from_model(u) for u in users])


@router.get("/{user_id}", response_model=UserResponse)
@profile_router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID):
    user = await UserService().get_user(user_id)
    return UserResponse(user=UserInfo.from_model(user))
