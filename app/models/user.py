"""
User model for authentication and project membership.

A user owns the projects they create and takes part in the projects they were
added to as a worker. Both kinds of membership are recorded as back-references
in `project_ids`, kept consistent with the Project side by
`app.services.project_service`.

Architecture:
    User ⇄ Project → embedded Tasks
"""

from sqlalchemy import Column, Index, Integer, String

from app.models.base import Base, IdList, TimestampMixin, UUIDMixin


class User(Base, UUIDMixin, TimestampMixin):
    """
    Registered account. Passwords are stored as bcrypt hashes only.
    """

    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_email", "email", unique=True),
        Index("ix_users_full_name", "name", "surname"),
    )

    name = Column(String(100), nullable=False, comment="First name")

    surname = Column(String(100), nullable=False, comment="Last name")

    age = Column(Integer, nullable=True)

    email = Column(
        String(255),
        nullable=False,
        comment="Unique email used as the login identifier",
    )

    hashed_password = Column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password for secure authentication",
    )

    image = Column(
        String(500),
        nullable=True,
        comment="Path of the uploaded avatar relative to the upload root",
    )

    project_ids = Column(
        IdList,
        nullable=False,
        default=list,
        comment="Ordered ids of projects the user created or works on",
    )

    chat_ids = Column(
        IdList,
        nullable=False,
        default=list,
        comment="Ordered ids of chats the user takes part in",
    )

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}"

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
