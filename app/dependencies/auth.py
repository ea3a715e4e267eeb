"""
Authentication dependencies for FastAPI route protection.
"""


from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.db_handlers import UserDBHandler
from app.exceptions import Unauthorized
from app.models import User
from app.utils.auth import extract_user_id_from_token

# HTTP Bearer token extraction; a missing header is reported as 401 below
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.
    """
    if credentials is None:
        raise Unauthorized("Authentication failed, no token provided")

    user_id = extract_user_id_from_token(credentials.credentials)
    if user_id is None:
        raise Unauthorized("Authentication failed, invalid or expired token")

    user = await UserDBHandler().get(user_id)
    if user is None:
        raise Unauthorized("Authentication failed, user no longer exists")

    return user
