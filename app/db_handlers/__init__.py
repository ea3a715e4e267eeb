from app.db_handlers.base import BaseDBHandler, check_local_db
from app.db_handlers.project import ProjectDBHandler
from app.db_handlers.user import UserDBHandler

__all__ = [
    "BaseDBHandler",
    "check_local_db",
    "ProjectDBHandler",
    "UserDBHandler",
]
