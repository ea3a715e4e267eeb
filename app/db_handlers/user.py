from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db_handlers.base import BaseDBHandler, check_local_db
from app.models.project import Project
from app.models.user import User
from app.utils.logger import setup_logger

logger = setup_logger("db_handlers.user")


class UserDBHandler(BaseDBHandler[User]):
    def __init__(self):
        super().__init__(User)

    @check_local_db
    async def get_user_by_email(
        self, email: str, *, db: AsyncSession = None
    ) -> User | None:
        """Get a user by email."""
        try:
            stmt = select(User).filter(User.email == email)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving user by email '{email}': {e}")
            raise

    @check_local_db
    async def find_by_full_name(
        self, name: str, surname: str, *, db: AsyncSession = None
    ) -> list[User]:
        """All users whose first and last name match exactly."""
        stmt = select(User).where(User.name == name, User.surname == surname)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @check_local_db
    async def list_users(self, *, db: AsyncSession = None) -> list[User]:
        result = await db.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())

    @check_local_db
    async def populate_projects(
        self, user: User, *, db: AsyncSession = None
    ) -> list[Project]:
        """Resolve `user.project_ids` to Project rows, in list order."""
        from app.db_handlers.project import ProjectDBHandler

        return await ProjectDBHandler().get_many_by_ids(list(user.project_ids), db=db)
