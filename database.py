from typing import AsyncGenerator, Annotated, Any
from fastapi import Depends
from sqlalchemy import event
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool
from sqlalchemy.ext.asyncio.engine import create_async_engine
from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession, AsyncEngine

from config import settings


# Base class for all tables to create with one command
class Base(DeclarativeBase):
    pass


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    def __init__(
        self, url: str | None = settings.database_url, echo: bool = settings.sql_echo
    ) -> None:
        if url is None:
            raise ValueError("URL of database not found")

        engine_options: dict[str, Any] = {"echo": echo}
        is_sqlite = url.startswith("sqlite")
        if is_sqlite:
            # connections must not outlive the event loop that opened them
            engine_options["poolclass"] = NullPool

        self.engine: AsyncEngine = create_async_engine(url=url, **engine_options)
        if is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine, expire_on_commit=False
        )

    def get_engine(self) -> AsyncEngine:
        return self.engine

    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self.session() as ses:
            yield ses

    async def create_all_tables(self) -> None:
        async with self.get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all_tables(self) -> None:
        async with self.get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)


db = Database()
sessionDep = Annotated[AsyncSession, Depends(db.get_session)]
