"""
Project API Routes - projects, their embedded tasks and their workers.

Each route maps to a single ProjectService operation. Routes that change a
project require a bearer token; creator-only and member-only checks are done
by the dependencies in `app.dependencies.projects`.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from app.dependencies.auth import get_current_user
from app.dependencies.projects import get_member_project, get_owned_project
from app.exceptions import Unauthorized
from app.models import Project, User
from app.schemas import (
    AddFirstTaskRequest,
    AddTaskRequest,
    AddWorkersRequest,
    DeleteTaskRequest,
    MessageResponse,
    ProjectCreatedResponse,
    ProjectInfo,
    ProjectListResponse,
    ProjectResponse,
    TaskInfo,
    TaskListResponse,
    TaskResponse,
    UpdateProjectRequest,
    UpdateTaskRequest,
    WorkerInfo,
    WorkersResponse,
)
from app.services.project_service import ProjectService
from app.utils.images import save_image
from app.utils.logger import setup_logger

logger = setup_logger("api.projects")

router = APIRouter(tags=["Projects"])


# ----- reads -----


@router.get("/project/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: UUID):
    project = await ProjectService().get_project(project_id)
    return ProjectResponse(project=ProjectInfo.from_model(project))


@router.get("/user/{user_id}/projects", response_model=ProjectListResponse)
async def get_projects_by_user(user_id: UUID):
    """Projects the user created or works on, in the order they joined them."""
    projects = await ProjectService().get_projects_for_user(user_id)
    return ProjectListResponse(projects=[ProjectInfo.from_model(p) for p in projects])


@router.get("/project/{project_id}/tasks", response_model=TaskListResponse)
async def get_tasks_by_project(project_id: UUID):
    project = await ProjectService().get_project(project_id)
    return TaskListResponse(
        tasks=[TaskInfo.model_validate(t) for t in project.task_list()],
        project_creator=project.creator_id,
    )


@router.get("/project/{project_id}/task/{task_id}", response_model=TaskResponse)
async def get_task(project_id: UUID, task_id: str):
    task = await ProjectService().get_task(project_id, task_id)
    return TaskResponse(task=TaskInfo.model_validate(task))


# ----- project lifecycle -----


@router.post(
    "/project",
    response_model=ProjectCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_project(
    title: str = Form(..., min_length=1, max_length=200),
    description: str = Form(..., min_length=1),
    image: UploadFile | None = File(None),
    current_user: User = Depends(get_current_user),
):
    """Create a project owned by the authenticated user (multipart form)."""
    image_path = await save_image(image) if image is not None else None
    project = await ProjectService().create_project(
        current_user.id, title, description, image_path
    )
    return ProjectCreatedResponse(project_id=project.id)


@router.patch("/project/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_data: UpdateProjectRequest,
    project: Project = Depends(get_owned_project),
):
    updated = await ProjectService().update_project(
        project.id, project_data.title, project_data.description
    )
    return ProjectResponse(project=ProjectInfo.from_model(updated))


@router.delete("/project/{project_id}", response_model=MessageResponse)
async def delete_project(project: Project = Depends(get_owned_project)):
    await ProjectService().delete_project(project.id)
    return MessageResponse(message="Project deleted")


@router.patch("/project/{project_id}/abort", response_model=MessageResponse)
async def abort_project(
    project_id: UUID,
    current_user: User = Depends(get_current_user),
):
    """Leave a project the current user works on."""
    await ProjectService().abort_project(project_id, current_user.id)
    return MessageResponse(message="Project aborted")


# ----- workers -----


@router.post(
    "/project/{project_id}/workers",
    response_model=WorkersResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_workers(
    workers_data: AddWorkersRequest,
    project: Project = Depends(get_owned_project),
):
    workers = await ProjectService().add_workers(project.id, workers_data.workers)
    return WorkersResponse(workers=[WorkerInfo.from_model(w) for w in workers])


# ----- tasks -----


@router.post(
    "/project/task", response_model=TaskResponse, status_code=status.HTTP_201_CREATED
)
async def add_first_task(
    task_data: AddFirstTaskRequest,
    current_user: User = Depends(get_current_user),
):
    """Add a task to the project named in the body (used right after creation)."""
    project = await ProjectService().get_project(task_data.project_id)
    if not project.has_member(current_user.id):
        raise Unauthorized("You are not a member of this project")

    task = await ProjectService().add_task(
        project.id,
        task_data.title,
        task_data.content,
        task_data.level,
        creator_id=current_user.id,
    )
    return TaskResponse(task=TaskInfo.model_validate(task))


@router.post(
    "/project/{project_id}/task",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_task(
    task_data: AddTaskRequest,
    project: Project = Depends(get_member_project),
    current_user: User = Depends(get_current_user),
):
    task = await ProjectService().add_task(
        project.id,
        task_data.title,
        task_data.content,
        task_data.level,
        creator_id=current_user.id,
    )
    return TaskResponse(task=TaskInfo.model_validate(task))


@router.patch("/project/{project_id}/task", response_model=TaskResponse)
async def update_task(
    task_data: UpdateTaskRequest,
    project: Project = Depends(get_member_project),
):
    task = await ProjectService().update_task(
        project.id,
        task_data.task_id,
        task_data.title,
        task_data.content,
        task_data.level,
    )
    return TaskResponse(task=TaskInfo.model_validate(task))


@router.delete("/project/{project_id}/task", response_model=MessageResponse)
async def delete_task(
    task_data: DeleteTaskRequest,
    project: Project = Depends(get_member_project),
):
    await ProjectService().delete_task(project.id, task_data.task_id)
    return MessageResponse(message="Task deleted")
