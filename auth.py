import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Annotated

from authx import AuthX, AuthXConfig
from fastapi import Depends
from jwt import decode
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from config import settings
from errors import UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenUser:
    """Identity carried by a verified bearer token."""

    id: str
    email: str | None


class Authentication:

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        expires_hours: int = settings.jwt_expires_hours,
    ):
        config = AuthXConfig()
        config.JWT_SECRET_KEY = secret_key
        config.JWT_TOKEN_LOCATION = ["headers"]
        config.JWT_ALGORITHM = "HS256"
        config.JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=expires_hours)

        self.config = config
        self.auth = AuthX(config)

    def issue_token(self, user_id: str, email: str) -> str:
        return self.auth.create_access_token(uid=str(user_id), data={"email": email})

    def verify_token(self, token: str) -> TokenUser:
        config = self.config

        try:
            payload: dict = decode(
                token, key=config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM]
            )
        except ExpiredSignatureError:
            raise UnauthorizedError("Token has expired")
        except InvalidTokenError as e:
            logger.info("Rejected bearer token: %s", e)
            raise UnauthorizedError("Invalid token")

        user_id = payload.get("sub")
        if not user_id:
            raise UnauthorizedError("Invalid token")

        return TokenUser(id=str(user_id), email=payload.get("email"))


def extract_bearer(authorization: str | None) -> str:
    if not authorization:
        raise UnauthorizedError("Authorization header is required")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise UnauthorizedError("Invalid authorization header format")

    return parts[1]


authentication = Authentication()


async def current_user(
    access_payload=Depends(authentication.auth.access_token_required),
) -> TokenUser:
    return TokenUser(
        id=str(access_payload.sub), email=getattr(access_payload, "email", None)
    )


currentUserDep = Annotated[TokenUser, Depends(current_user)]
