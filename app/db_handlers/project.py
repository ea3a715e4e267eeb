from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.db_handlers.base import BaseDBHandler, check_local_db
from app.models.project import Project
from app.models.user import User


class ProjectDBHandler(BaseDBHandler[Project]):
    def __init__(self):
        super().__init__(Project)

    @check_local_db
    async def populate_workers(
        self, project: Project, *, db: AsyncSession = None
    ) -> list[User]:
        """Resolve `project.worker_ids` to User rows, in list order."""
        from app.db_handlers.user import UserDBHandler

        return await UserDBHandler().get_many_by_ids(list(project.worker_ids), db=db)
