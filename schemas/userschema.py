from datetime import datetime

from pydantic import Field, EmailStr

from constants import MIN_PASSWORD_LENGTH
from schemas.base import CamelSchema


class UserEmailSchema(CamelSchema):
    email: EmailStr


class UserPasswordSchema(CamelSchema):
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class UserCredsSchema(UserEmailSchema):
    password: str = Field(min_length=1)


class UserNamesSchema(CamelSchema):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)


class UserSchema(UserNamesSchema, UserEmailSchema, UserPasswordSchema):
    pass


class UpdateUserSchema(CamelSchema):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)


class UserNewPasswordSchema(CamelSchema):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class UserViewSchema(CamelSchema):
    id: str
    first_name: str
    last_name: str
    email: str
    created_at: datetime
    updated_at: datetime


class AuthResponseSchema(CamelSchema):
    token: str
    user: UserViewSchema


class VerifyResponseSchema(CamelSchema):
    user: UserViewSchema


class MessageSchema(CamelSchema):
    message: str
