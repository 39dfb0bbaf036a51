from fastapi import APIRouter, Request

from limiter import limiter
from auth import currentUserDep, TokenUser
from errors import ForbiddenError
from services.users_service import normalize_email, userDirectoryDep
from schemas.userschema import (
    MessageSchema,
    UpdateUserSchema,
    UserNewPasswordSchema,
    UserViewSchema,
)
from constants import LIMIT_VALUE_USERS, SCOPE_USERS

router_users = APIRouter(prefix="/user", tags=["Users"])


def ensure_self(caller: TokenUser, user_id: str) -> None:
    if caller.id != user_id:
        raise ForbiddenError("Access denied")


@router_users.get(
    "/email/{email}",
    description="Accepts email and bearer token. Returns the profile of the caller if the email is theirs",
    summary="Get user by email",
    response_model=UserViewSchema,
)
@limiter.shared_limit(LIMIT_VALUE_USERS, SCOPE_USERS)
async def get_user_by_email(
    email: str, request: Request, directory: userDirectoryDep, caller: currentUserDep
):
    # 403 before the lookup, so unknown and foreign emails look the same
    if normalize_email(email) != (caller.email or ""):
        raise ForbiddenError("Access denied")

    user = await directory.find_by_email(email)
    ensure_self(caller, user.id)

    return user


@router_users.get(
    "/{user_id}",
    description="Accepts user id and bearer token. Returns the profile of the caller",
    summary="Get user by id",
    response_model=UserViewSchema,
)
@limiter.shared_limit(LIMIT_VALUE_USERS, SCOPE_USERS)
async def get_user(
    user_id: str, request: Request, directory: userDirectoryDep, caller: currentUserDep
):
    ensure_self(caller, user_id)

    return await directory.find_by_id(user_id)


@router_users.post(
    "/{user_id}",
    description="Accepts first and last name and bearer token. Email and password are not changed here",
    summary="Update profile",
    response_model=UserViewSchema,
)
@limiter.shared_limit(LIMIT_VALUE_USERS, SCOPE_USERS)
async def update_user(
    user_id: str,
    userUpdate: UpdateUserSchema,
    request: Request,
    directory: userDirectoryDep,
    caller: currentUserDep,
):
    ensure_self(caller, user_id)

    return await directory.update_profile(user_id, userUpdate)


@router_users.post(
    "/{user_id}/password",
    description="Accepts current and new passwords and bearer token. 401 if the current password is wrong",
    summary="Update password",
    response_model=MessageSchema,
)
@limiter.shared_limit(LIMIT_VALUE_USERS, SCOPE_USERS)
async def update_password(
    user_id: str,
    userNewPassword: UserNewPasswordSchema,
    request: Request,
    directory: userDirectoryDep,
    caller: currentUserDep,
):
    ensure_self(caller, user_id)

    await directory.update_password(
        user_id, userNewPassword.current_password, userNewPassword.new_password
    )
    return MessageSchema(message="Password updated successfully")
