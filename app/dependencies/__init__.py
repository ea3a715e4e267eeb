from app.dependencies.auth import get_current_user
from app.dependencies.projects import get_member_project, get_owned_project

__all__ = [
    "get_current_user",
    "get_member_project",
    "get_owned_project",
]
