import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends
from pwdlib import PasswordHash
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database import sessionDep
from errors import ConflictError, NotFoundError, UnauthorizedError
from models.usermodel import UserModel
from schemas.userschema import UpdateUserSchema, UserSchema, UserViewSchema

logger = logging.getLogger(__name__)

hasher = PasswordHash.recommended()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def to_view(user: UserModel) -> UserViewSchema:
    # the password hash never leaves this module
    return UserViewSchema(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class UserDirectory:
    """User records: identity, profile and credential hash."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, user_id: str) -> UserModel | None:
        return await self.session.get(UserModel, user_id)

    async def get_by_email(self, email: str) -> UserModel | None:
        query = select(UserModel).where(UserModel.email == normalize_email(email))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: str) -> UserViewSchema:
        user = await self.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User with ID {user_id} not found")
        return to_view(user)

    async def find_by_email(self, email: str) -> UserViewSchema:
        user = await self.get_by_email(email)
        if user is None:
            raise NotFoundError(f"User with email {email} not found")
        return to_view(user)

    async def create(self, newUser: UserSchema) -> UserModel:
        if await self.get_by_email(newUser.email) is not None:
            raise ConflictError("User with this email already exists")

        user = UserModel(
            first_name=newUser.first_name,
            last_name=newUser.last_name,
            email=normalize_email(newUser.email),
            password=hasher.hash(newUser.password),
        )

        try:
            self.session.add(user)
            await self.session.commit()
        except IntegrityError:
            # lost a race against a concurrent signup with the same email
            await self.session.rollback()
            raise ConflictError("User with this email already exists")

        logger.info("User %s signed up", user.id)
        return user

    async def save(self, user: UserModel) -> UserModel:
        user.updated_at = datetime.now(timezone.utc)
        try:
            self.session.add(user)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return user

    def validate_credential(self, user: UserModel, password: str) -> bool:
        return hasher.verify(password, user.password)

    async def authenticate(self, email: str, password: str) -> UserModel:
        user = await self.get_by_email(email)

        # unknown email and wrong password are indistinguishable to the caller
        if user is None or not self.validate_credential(user, password):
            raise UnauthorizedError("Invalid email or password")

        return user

    async def update_profile(
        self, user_id: str, userUpdate: UpdateUserSchema
    ) -> UserViewSchema:
        user = await self.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User with ID {user_id} not found")

        if userUpdate.first_name is not None:
            user.first_name = userUpdate.first_name
        if userUpdate.last_name is not None:
            user.last_name = userUpdate.last_name

        await self.save(user)
        logger.info("User %s updated profile", user_id)
        return to_view(user)

    async def update_password(
        self, user_id: str, current_password: str, new_password: str
    ) -> None:
        user = await self.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User with ID {user_id} not found")

        if not self.validate_credential(user, current_password):
            raise UnauthorizedError("Current password is incorrect")

        user.password = hasher.hash(new_password)
        await self.save(user)
        logger.info("User %s changed password", user_id)


def get_user_directory(session: sessionDep) -> UserDirectory:
    return UserDirectory(session)


userDirectoryDep = Annotated[UserDirectory, Depends(get_user_directory)]
