"""
Database models for Project Hub.

Architecture: User ⇄ Project → embedded Tasks.
"""

from app.models.project import Project
from app.models.user import User

__all__ = [
    "User",
    "Project",
]
