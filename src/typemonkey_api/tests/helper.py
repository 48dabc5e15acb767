from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from alembic import command
from alembic.config import Config
from asgi_lifespan import LifespanManager
from fakeredis import FakeAsyncRedis, FakeServer
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ..lib.server_setup import create_server
from ..repositories.typing_test import TypingTestRepo
from ..repositories.user import UserRepo
from ..types.setting import Setting

API_PREFIX = "/api/v1"
ADMIN_KEY = "admin-key"
PASSWORD = "password123"

tmp_now = datetime.now(UTC)
NOW = datetime(year=tmp_now.year, month=tmp_now.month, day=tmp_now.day, tzinfo=UTC)


@pytest.fixture
def setting(tmp_path: Path) -> Setting:
    setting = Setting.from_file()
    setting.db.driver = "sqlite"
    setting.db.sqlite_path = str(tmp_path / "typemonkey.db")
    setting.token.secret = "typemonkey-test-secret-0123456789abcdef"
    setting.auth.bcrypt_rounds = 4
    setting.admin.api_key = ADMIN_KEY
    return setting


@pytest.fixture
def db_migration(setting: Setting):
    config = Config()
    config.set_main_option("script_location", setting.db.migration_location)
    config.set_main_option("sqlalchemy.url", setting.db.dsn)
    command.upgrade(config, "head")

    yield

    command.downgrade(config, "base")


@pytest_asyncio.fixture
async def sessionmaker(db_migration, setting: Setting):
    engine = create_async_engine(url=setting.db.async_dsn, **setting.db.engine_options)
    sessionmaker = async_sessionmaker(engine, expire_on_commit=False)

    yield sessionmaker

    await engine.dispose()


@pytest_asyncio.fixture
async def redis_conn():
    redis_conn = FakeAsyncRedis(server=FakeServer())

    yield redis_conn

    await redis_conn.flushdb()
    await redis_conn.aclose()


@pytest_asyncio.fixture
async def down_redis_conn():
    """
    redis connection whose server is unreachable, every command raises
    """
    server = FakeServer()
    server.connected = False
    redis_conn = FakeAsyncRedis(server=server)

    yield redis_conn

    await redis_conn.aclose()


@pytest_asyncio.fixture
async def client(db_migration, setting: Setting):
    app = create_server(setting, redis_conn=FakeAsyncRedis(server=FakeServer()))

    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        base_url = f"http://localhost:{setting.server.port}"
        async with AsyncClient(transport=transport, base_url=base_url) as client:
            yield client


def submit_body(
    wpm: float = 60,
    accuracy: float = 95,
    submission_id: str | None = None,
    **kwargs,
) -> dict[str, Any]:
    """
    minimal 'POST /tests/submit' body, kwargs override top level fields
    """
    body: dict[str, Any] = {
        "test_config": {
            "text_type": "random",
            "difficulty": "medium",
            "duration": 60,
            "language": "english",
        },
        "test_content": {"original_text": "the quick brown fox"},
        "results": {
            "wpm": wpm,
            "accuracy": accuracy,
            "time_elapsed": 60,
            "total_characters": 100,
            "correct_characters": 95,
            "incorrect_characters": 5,
        },
        "wpm_history": [
            {"timestamp": 1000, "wpm": wpm},
            {"timestamp": 2000, "wpm": wpm},
        ],
    }
    if submission_id is not None:
        body["submission_id"] = submission_id
    body.update(kwargs)
    return body


async def register(client: AsyncClient, username: str) -> tuple[str, dict]:
    """
    register through the api, returns (token, user)
    """
    ret = await client.post(
        f"{API_PREFIX}/users/register",
        json={
            "username": username,
            "email": f"{username}@typemonkey.io",
            "password": PASSWORD,
        },
    )
    assert ret.status_code == 201
    data = ret.json()
    return data["token"], data["user"]


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def typing_test_values(
    user_id: int | None,
    wpm: float,
    accuracy: float,
    **kwargs,
) -> dict[str, Any]:
    """
    values for TypingTestRepo.create, kwargs override any column
    """
    values: dict[str, Any] = {
        "user_id": user_id,
        "is_guest": user_id is None,
        "text_type": "random",
        "difficulty": "medium",
        "duration": 60,
        "language": "english",
        "original_text": "the quick brown fox",
        "wpm": wpm,
        "accuracy": accuracy,
        "time_elapsed": 60,
        "total_characters": 100,
        "correct_characters": 95,
        "incorrect_characters": 5,
    }
    values.update(kwargs)
    return values


async def create_user(
    sessionmaker: async_sessionmaker[AsyncSession],
    username: str,
    **values,
) -> int:
    """
    insert a user directly, values are passed to UserRepo.update
    """
    async with sessionmaker() as session:
        repo = UserRepo(session)
        user = await repo.create(
            username=username,
            email=f"{username}@typemonkey.io",
            password="not-a-hash",
        )
        if values:
            await repo.update(user.id, values)
        await session.commit()
        return user.id


async def insert_tests(
    sessionmaker: async_sessionmaker[AsyncSession], values: list[dict]
) -> list[int]:
    """
    insert typing tests directly, see typing_test_values
    """
    ids = []
    async with sessionmaker() as session:
        repo = TypingTestRepo(session)
        for item in values:
            test = await repo.create(item)
            ids.append(test.id)
        await session.commit()
    return ids
