# Project service: every write that touches a project and the users referencing it
#
# Each public operation is one unit of work (see `check_local_db`): both sides of
# a user <-> project reference are flushed in the same session and committed
# together, or rolled back together when anything raises.

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.db_handlers import ProjectDBHandler, UserDBHandler, check_local_db
from app.exceptions import NotFound, ValidationFailed
from app.models import Project, User
from app.utils.images import remove_image
from app.utils.logger import setup_logger

logger = setup_logger(__name__)


class ProjectService:
    def __init__(self):
        self.project_handler = ProjectDBHandler()
        self.user_handler = UserDBHandler()

    async def _get_project(self, project_id: uuid.UUID, db: AsyncSession) -> Project:
        project = await self.project_handler.get(project_id, db=db)
        if project is None:
            raise NotFound("Could not find a project with provided id")
        return project

    async def _get_user(
        self, user_id: uuid.UUID, db: AsyncSession, message: str
    ) -> User:
        user = await self.user_handler.get(user_id, db=db)
        if user is None:
            raise NotFound(message)
        return user

    # ----- reads -----

    @check_local_db
    async def get_project(
        self, project_id: uuid.UUID, *, db: AsyncSession = None
    ) -> Project:
        return await self._get_project(project_id, db)

    @check_local_db
    async def get_projects_for_user(
        self, user_id: uuid.UUID, *, db: AsyncSession = None
    ) -> list[Project]:
        user = await self._get_user(user_id, db, "Could not find user for provided id")
        return await self.user_handler.populate_projects(user, db=db)

    @check_local_db
    async def get_task(
        self, project_id: uuid.UUID, task_id: str, *, db: AsyncSession = None
    ) -> dict[str, Any]:
        project = await self._get_project(project_id, db)
        task = project.get_task(task_id)
        if task is None:
            raise NotFound("Could not find a task with provided id")
        return task

    # ----- project lifecycle -----

    async def create_project(
        self,
        creator_id: uuid.UUID,
        title: str,
        description: str,
        image: str | None = None,
        *,
        db: AsyncSession = None,
    ) -> Project:
        """
        Create a project and register it with its creator in one transaction.

        The uploaded image is already on disk; it is removed again when the
        project could not be stored.
        """
        try:
            return await self._create_project(
                creator_id, title, description, image, db=db
            )
        except Exception:
            remove_image(image)
            raise

    @check_local_db
    async def _create_project(
        self,
        creator_id: uuid.UUID,
        title: str,
        description: str,
        image: str | None,
        *,
        db: AsyncSession = None,
    ) -> Project:
        title = (title or "").strip()
        description = (description or "").strip()
        if not title or not description:
            raise ValidationFailed("A project needs a title and a description")

        creator = await self._get_user(
            creator_id, db, "Could not find user for provided id"
        )

        project = await self.project_handler.create(
            {
                "creator_id": creator.id,
                "title": title,
                "description": description,
                "image": image,
                "tasks": {},
                "worker_ids": [],
            },
            db=db,
        )
        creator.project_ids.append(str(project.id))
        await self.user_handler.save(creator, db=db)

        logger.info(f"Created project {project.id} for user {creator.id}")
        return project

    @check_local_db
    async def update_project(
        self,
        project_id: uuid.UUID,
        title: str,
        description: str,
        *,
        db: AsyncSession = None,
    ) -> Project:
        title = (title or "").strip()
        description = (description or "").strip()
        if not title or not description:
            raise ValidationFailed("A project needs a title and a description")

        project = await self._get_project(project_id, db)
        return await self.project_handler.update(
            project, {"title": title, "description": description}, db=db
        )

    async def delete_project(self, project_id: uuid.UUID) -> Project:
        """
        Delete a project together with every back-reference to it.

        The image file goes only after the records are committed, and its
        removal never fails the request.
        """
        project = await self._delete_project(project_id)
        if project.image and not remove_image(project.image):
            logger.warning(
                f"Image {project.image} of deleted project {project.id} was left behind"
            )
        return project

    @check_local_db
    async def _delete_project(
        self, project_id: uuid.UUID, *, db: AsyncSession = None
    ) -> Project:
        project = await self._get_project(project_id, db)
        project_key = str(project.id)

        member_ids = [project.creator_id, *project.worker_ids]
        members = await self.user_handler.get_many_by_ids(member_ids, db=db)
        if not any(member.id == project.creator_id for member in members):
            logger.warning(
                f"Creator {project.creator_id} of project {project.id} no longer exists"
            )

        for member in members:
            if project_key in member.project_ids:
                member.project_ids.remove(project_key)
                await self.user_handler.save(member, db=db)

        await self.project_handler.remove(project, db=db)
        logger.info(
            f"Deleted project {project.id} and {len(members)} back-reference(s)"
        )
        return project

    # ----- embedded tasks -----

    @check_local_db
    async def add_task(
        self,
        project_id: uuid.UUID,
        title: str | None,
        content: str | None,
        level: int | None,
        creator_id: uuid.UUID | None = None,
        *,
        db: AsyncSession = None,
    ) -> dict[str, Any]:
        project = await self._get_project(project_id, db)

        task = Project.new_task(creator_id, title, content, level)
        project.tasks[task["id"]] = task
        await self.project_handler.save(project, db=db)

        logger.info(f"Added task {task['id']} to project {project.id}")
        return task

    @check_local_db
    async def update_task(
        self,
        project_id: uuid.UUID,
        task_id: str,
        title: str,
        content: str | None,
        level: int | None,
        *,
        db: AsyncSession = None,
    ) -> dict[str, Any]:
        title = (title or "").strip()
        if not title:
            raise ValidationFailed("A task needs a title")

        project = await self._get_project(project_id, db)
        task = project.get_task(task_id)
        if task is None:
            raise NotFound("Could not find a task with provided id")

        # Replace the whole document: nested mutations are not tracked
        updated = {**task, "title": title, "content": content, "level": level}
        project.tasks[task["id"]] = updated
        await self.project_handler.save(project, db=db)
        return updated

    @check_local_db
    async def delete_task(
        self, project_id: uuid.UUID, task_id: str, *, db: AsyncSession = None
    ) -> None:
        project = await self._get_project(project_id, db)
        if project.get_task(task_id) is None:
            raise NotFound("Could not find a task with provided id")

        del project.tasks[str(task_id)]
        await self.project_handler.save(project, db=db)
        logger.info(f"Deleted task {task_id} from project {project.id}")

    # ----- workers -----

    async def _resolve_worker(self, full_name: str, db: AsyncSession) -> User:
        parts = full_name.split()
        if len(parts) != 2:
            raise ValidationFailed(
                f"Worker '{full_name}' must be given as 'Name Surname'"
            )

        matches = await self.user_handler.find_by_full_name(parts[0], parts[1], db=db)
        if not matches:
            raise NotFound(f"Could not find user '{full_name}'")
        if len(matches) > 1:
            raise ValidationFailed(
                f"'{full_name}' matches {len(matches)} users, cannot pick one"
            )
        return matches[0]

    @check_local_db
    async def add_workers(
        self,
        project_id: uuid.UUID,
        worker_names: list[str],
        *,
        db: AsyncSession = None,
    ) -> list[User]:
        """
        Assign users to a project by "Name Surname".

        All names are resolved before anything is written, so one unknown or
        ambiguous name leaves the project untouched. Returns the project's
        full worker list.
        """
        project = await self._get_project(project_id, db)
        resolved = [await self._resolve_worker(name, db) for name in worker_names]

        project_key = str(project.id)
        added = 0
        for user in resolved:
            user_key = str(user.id)
            if user.id == project.creator_id or user_key in project.worker_ids:
                continue
            project.worker_ids.append(user_key)
            if project_key not in user.project_ids:
                user.project_ids.append(project_key)
            await self.user_handler.save(user, db=db)
            added += 1

        await self.project_handler.save(project, db=db)
        logger.info(f"Added {added} worker(s) to project {project.id}")
        return await self.project_handler.populate_workers(project, db=db)

    @check_local_db
    async def abort_project(
        self, project_id: uuid.UUID, user_id: uuid.UUID, *, db: AsyncSession = None
    ) -> None:
        """Detach a worker from a project on both sides."""
        project = await self._get_project(project_id, db)
        user = await self._get_user(user_id, db, "Could not find you in the database")

        if user.id == project.creator_id:
            raise ValidationFailed(
                "The creator cannot abort their own project, delete it instead"
            )

        project_key = str(project.id)
        user_key = str(user.id)
        if project_key in user.project_ids:
            user.project_ids.remove(project_key)
        if user_key in project.worker_ids:
            project.worker_ids.remove(user_key)

        await self.user_handler.save(user, db=db)
        await self.project_handler.save(project, db=db)
        logger.info(f"User {user.id} aborted project {project.id}")
