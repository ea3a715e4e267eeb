"""
Project model: the aggregate that owns its tasks and lists its workers.

Tasks have no table of their own. They live in the `tasks` JSON mapping keyed
by task id, so a lookup is a dict access and a task disappears with its
project. Workers are referenced by user id in `worker_ids`.

Invariant (maintained by the project service, not by the database):
    the creator's `User.project_ids` contains `Project.id`, and so does every
    worker's, for as long as the project exists.
"""

import uuid
from typing import Any

from sqlalchemy import Column, ForeignKey, Index, String, Text, Uuid

from app.models.base import (
    Base,
    EmbeddedDocuments,
    IdList,
    TimestampMixin,
    UUIDMixin,
    utcnow,
)

PROJECT_STATUS_ACTIVE = "active"
TASK_STATUS_ACTIVE = "active"
DEFAULT_TASK_TITLE = "Nameless"


class Project(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "projects"
    __table_args__ = (Index("ix_projects_creator_id", "creator_id"),)

    creator_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        comment="User who created the project",
    )

    title = Column(String(200), nullable=False)

    description = Column(Text, nullable=False)

    status = Column(
        String(20),
        nullable=False,
        default=PROJECT_STATUS_ACTIVE,
        comment="Project status, 'active' on creation",
    )

    image = Column(
        String(500),
        nullable=True,
        comment="Path of the uploaded project image relative to the upload root",
    )

    tasks = Column(
        EmbeddedDocuments,
        nullable=False,
        default=dict,
        comment="Embedded tasks keyed by task id, in insertion order",
    )

    worker_ids = Column(
        IdList,
        nullable=False,
        default=list,
        comment="Ordered ids of users assigned to the project",
    )

    def get_task(self, task_id: uuid.UUID | str) -> dict[str, Any] | None:
        return self.tasks.get(str(task_id))

    def task_list(self) -> list[dict[str, Any]]:
        return list(self.tasks.values())

    def has_member(self, user_id: uuid.UUID) -> bool:
        return user_id == self.creator_id or str(user_id) in self.worker_ids

    @staticmethod
    def new_task(
        creator_id: uuid.UUID | None,
        title: str | None,
        content: str | None,
        level: int | None,
    ) -> dict[str, Any]:
        """Build an embedded task document; empty titles become 'Nameless'."""
        title = (title or "").strip()
        return {
            "id": str(uuid.uuid4()),
            "creator": str(creator_id) if creator_id else None,
            "title": title or DEFAULT_TASK_TITLE,
            "content": content,
            "level": level,
            "status": TASK_STATUS_ACTIVE,
            "created_at": utcnow().isoformat(),
        }

    def __repr__(self):
        return f"<Project(id={self.id}, title='{self.title}', creator_id={self.creator_id})>"
