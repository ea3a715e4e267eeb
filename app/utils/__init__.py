"""
Common utilities package for the Project Hub application.

- auth: bcrypt password hashing and JWT access tokens
- images: storage and best-effort removal of uploaded images
- logger: console and rotating file logging

`auth` and `images` read `app.config`, which itself logs through this package,
so only the logger is re-exported here.
"""

from app.utils.logger import setup_logger

__all__ = ["setup_logger"]
