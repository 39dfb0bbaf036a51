from typing import Annotated

from fastapi import APIRouter, Header, Request

from limiter import limiter
from auth import authentication, extract_bearer
from errors import NotFoundError, UnauthorizedError
from services.users_service import userDirectoryDep, to_view
from schemas.userschema import (
    AuthResponseSchema,
    UserCredsSchema,
    UserSchema,
    VerifyResponseSchema,
)
from constants import LIMIT_VALUE_AUTH, SCOPE_AUTH

router_auth = APIRouter(prefix="/auth", tags=["Authentication"])


@router_auth.post(
    "/signup",
    description="Accepts user object. Creates the user and returns a bearer token with the user profile. 409 if the email is taken",
    summary="Register user",
    status_code=201,
    response_model=AuthResponseSchema,
)
@limiter.shared_limit(LIMIT_VALUE_AUTH, SCOPE_AUTH)
async def signup(newUser: UserSchema, request: Request, directory: userDirectoryDep):
    user = await directory.create(newUser)
    token = authentication.issue_token(user.id, user.email)

    return AuthResponseSchema(token=token, user=to_view(user))


@router_auth.post(
    "/login",
    description="Accepts creds object. Returns a bearer token with the user profile if creds are valid, 401 otherwise",
    summary="Login user",
    response_model=AuthResponseSchema,
)
@limiter.shared_limit(LIMIT_VALUE_AUTH, SCOPE_AUTH)
async def login(creds: UserCredsSchema, request: Request, directory: userDirectoryDep):
    user = await directory.authenticate(creds.email, creds.password)
    token = authentication.issue_token(user.id, user.email)

    return AuthResponseSchema(token=token, user=to_view(user))


@router_auth.post(
    "/verify",
    description="Accepts bearer token from the Authorization header. Returns the user it belongs to, 401 if the token is missing, invalid or expired",
    summary="Verify token",
    response_model=VerifyResponseSchema,
)
@limiter.shared_limit(LIMIT_VALUE_AUTH, SCOPE_AUTH)
async def verify(
    request: Request,
    directory: userDirectoryDep,
    authorization: Annotated[str | None, Header()] = None,
):
    token_user = authentication.verify_token(extract_bearer(authorization))

    try:
        user = await directory.find_by_id(token_user.id)
    except NotFoundError:
        raise UnauthorizedError("User not found")

    return VerifyResponseSchema(user=user)
