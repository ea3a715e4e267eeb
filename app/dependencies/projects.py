import uuid

from fastapi import Depends, Path

from app.db_handlers import ProjectDBHandler
from app.dependencies.auth import get_current_user
from app.exceptions import NotFound, Unauthorized
from app.models import Project, User


async def _load_project(project_id: uuid.UUID) -> Project:
    project = await ProjectDBHandler().get(project_id)
    if project is None:
        raise NotFound("Could not find a project with provided id")
    return project


async def get_member_project(
    project_id: uuid.UUID = Path(..., description="The ID of the project"),
    current_user: User = Depends(get_current_user),
) -> Project:
    """
    Dependency to get a project the current user takes part in.

    Raises NotFound (404) if the project does not exist.
    Raises Unauthorized (401) if the user is neither its creator nor a worker.
    """
    project = await _load_project(project_id)
    if not project.has_member(current_user.id):
        raise Unauthorized("You are not a member of this project")
    return project


async def get_owned_project(
    project_id: uuid.UUID = Path(..., description="The ID of the project"),
    current_user: User = Depends(get_current_user),
) -> Project:
    """
    Dependency to get a project, ensuring the current user created it.

    Used for operations only the creator may perform: editing, deleting and
    assigning workers.
    """
    project = await _load_project(project_id)
    if project.creator_id != current_user.id:
        raise Unauthorized("You are not allowed to modify this project")
    return project
