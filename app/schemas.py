from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.models import Project, User


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys (``taskId``), snake_case also accepted."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ===== Users & authentication =====


class UserLogin(CamelModel):
    email: str = Field(..., description="Email used at signup")
    password: str = Field(..., description="Password for login")


class AuthResponse(CamelModel):
    user_id: UUID = Field(..., description="Id of the authenticated user")
    email: str
    token: str = Field(..., description="JWT access token")


class UserInfo(CamelModel):
    id: UUID = Field(..., description="User unique identifier")
    name: str
    surname: str
    age: int | None = None
    email: str
    image: str | None = None
    projects: list[str] = Field(default_factory=list)
    chats: list[str] = Field(default_factory=list)

    @classmethod
    def from_model(cls, user: User) -> "UserInfo":
        return cls(
            id=user.id,
            name=user.name,
            surname=user.surname,
            age=user.age,
            email=user.email,
            image=user.image,
            projects=list(user.project_ids),
            chats=list(user.chat_ids),
        )


class UserResponse(CamelModel):
    user: UserInfo


class UserListResponse(CamelModel):
    users: list[UserInfo]


# ===== Projects & tasks =====


class TaskInfo(CamelModel):
    id: str
    creator: str | None = None
    title: str
    content: str | None = None
    level: int | None = None
    status: str
    created_at: str | None = None


class ProjectInfo(CamelModel):
    id: UUID
    creator: UUID
    title: str
    description: str
    status: str
    image: str | None = None
    tasks: list[TaskInfo] = Field(default_factory=list)
    workers: list[str] = Field(default_factory=list)

    @classmethod
    def from_model(cls, project: Project) -> "ProjectInfo":
        return cls(
            id=project.id,
            creator=project.creator_id,
            title=project.title,
            description=project.description,
            status=project.status,
            image=project.image,
            tasks=[TaskInfo.model_validate(t) for t in project.task_list()],
            workers=list(project.worker_ids),
        )


class ProjectResponse(CamelModel):
    project: ProjectInfo


class ProjectListResponse(CamelModel):
    projects: list[ProjectInfo]


class ProjectCreatedResponse(CamelModel):
    project_id: UUID


class UpdateProjectRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)


class TaskListResponse(CamelModel):
    tasks: list[TaskInfo]
    project_creator: UUID


class TaskResponse(CamelModel):
    task: TaskInfo


class AddTaskRequest(CamelModel):
    title: str | None = Field(None, max_length=200)
    content: str | None = None
    level: int | None = Field(None, ge=0)


class AddFirstTaskRequest(AddTaskRequest):
    project_id: UUID


class UpdateTaskRequest(CamelModel):
    task_id: str
    title: str = Field(..., min_length=1, max_length=200)
    content: str | None = None
    level: int | None = Field(None, ge=0)


class DeleteTaskRequest(CamelModel):
    task_id: str


class AddWorkersRequest(CamelModel):
    workers: list[str] = Field(..., min_length=1)

    @field_validator("workers")
    @classmethod
    def strip_names(cls, v: list[str]) -> list[str]:
        return [name.strip() for name in v]


class WorkerInfo(CamelModel):
    id: UUID
    name: str
    surname: str

    @classmethod
    def from_model(cls, user: User) -> "WorkerInfo":
        return cls(id=user.id, name=user.name, surname=user.surname)


class WorkersResponse(CamelModel):
    workers: list[WorkerInfo]


class MessageResponse(CamelModel):
    message: str = Field(..., description="Response message")


def error_body(message: str) -> dict[str, Any]:
    return {"message": message}
