# User accounts: signup, credential checks and lookups

import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db_handlers import UserDBHandler, check_local_db
from app.exceptions import NotFound, Unauthorized, ValidationFailed
from app.models import User
from app.utils.auth import (
    MAX_PASSWORD_BYTES,
    get_password_hash,
    verify_password,
)
from app.utils.images import remove_image
from app.utils.logger import setup_logger

logger = setup_logger(__name__)

USER_EXISTS_MESSAGE = "User exists already, please login instead"


class UserService:
    def __init__(self):
        self.user_handler = UserDBHandler()

    async def signup(
        self,
        name: str,
        surname: str,
        age: int | None,
        email: str,
        password: str,
        image: str | None = None,
    ) -> User:
        """Register a new user; the stored avatar is dropped if registration fails."""
        try:
            return await self._create_user(name, surname, age, email, password, image)
        except Exception:
            remove_image(image)
            raise

    @check_local_db
    async def _create_user(
        self,
        name: str,
        surname: str,
        age: int | None,
        email: str,
        password: str,
        image: str | None,
        *,
        db: AsyncSession = None,
    ) -> User:
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationFailed(
                f"Password must not be longer than {MAX_PASSWORD_BYTES} bytes"
            )

        email = email.strip().lower()
        if await self.user_handler.get_user_by_email(email, db=db):
            raise ValidationFailed(USER_EXISTS_MESSAGE)

        try:
            user = await self.user_handler.create(
                {
                    "name": name.strip(),
                    "surname": surname.strip(),
                    "age": age,
                    "email": email,
                    "hashed_password": get_password_hash(password),
                    "image": image,
                    "project_ids": [],
                    "chat_ids": [],
                },
                db=db,
            )
        except IntegrityError as e:
            # Lost a race against a concurrent signup with the same email
            raise ValidationFailed(USER_EXISTS_MESSAGE) from e

        logger.info(f"Registered user {user.id}")
        return user

    @check_local_db
    async def authenticate(
        self, email: str, password: str, *, db: AsyncSession = None
    ) -> User:
        user = await self.user_handler.get_user_by_email(
            email.strip().lower(), db=db
        )
        if not user or not verify_password(password, user.hashed_password):
            raise Unauthorized("Invalid credentials, could not log you in")
        return user

    @check_local_db
    async def list_users(self, *, db: AsyncSession = None) -> list[User]:
        return await self.user_handler.list_users(db=db)

    @check_local_db
    async def get_user(self, user_id: uuid.UUID, *, db: AsyncSession = None) -> User:
        user = await self.user_handler.get(user_id, db=db)
        if user is None:
            raise NotFound("Could not find user for provided id")
        return user
