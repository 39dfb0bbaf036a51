import asyncio
import os
import tempfile

# must be set before the app modules read their settings
os.environ["URL_DATABASE"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.gettempdir(), f"notes_api_test_{os.getpid()}.db"
)
os.environ["RATE_LIMIT_ENABLED"] = "False"

import pytest
from fastapi.testclient import TestClient

from database import db
from main import app
from models.usermodel import UserModel


async def _reset_tables() -> None:
    await db.drop_all_tables()
    await db.create_all_tables()


@pytest.fixture(autouse=True)
def reset_database():
    asyncio.run(_reset_tables())
    yield


@pytest.fixture
def tester():
    yield TestClient(app=app)


@pytest.fixture
def register_user(tester):
    def register(email: str = "jane@example.com", password: str = "password123") -> dict:
        response = tester.post(
            url="/auth/signup",
            json={
                "firstName": "Jane",
                "lastName": "Doe",
                "email": email,
                "password": password,
            },
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return {
            "token": body["token"],
            "user": body["user"],
            "headers": {"Authorization": f"Bearer {body['token']}"},
        }

    return register


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def session(anyio_backend):
    async with db.session() as ses:
        yield ses


@pytest.fixture
async def owner_id(session):
    user = UserModel(first_name="Olive", last_name="Owner", email="olive@example.com", password="x")
    session.add(user)
    await session.commit()
    return user.id


@pytest.fixture
async def stranger_id(session):
    user = UserModel(first_name="Sam", last_name="Stranger", email="sam@example.com", password="x")
    session.add(user)
    await session.commit()
    return user.id
