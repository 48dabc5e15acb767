from logging import getLogger

from fastapi import FastAPI
from redis.asyncio import Redis
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ..types.errors import DBNotReady
from ..types.setting import Setting
from .password import PasswordHasher
from .text_generator import TextGenerator

logger = getLogger(__name__)


class TypemonkeyServer(FastAPI):
    def __init__(
        self, setting: Setting, *args, redis_conn: Redis | None = None, **kwargs
    ):
        """
        - redis_conn: use this connection instead of connecting to setting.redis
        """
        super().__init__(*args, **kwargs)
        self._setting = setting
        self._injected_redis_conn = redis_conn

    async def prepare(self):
        # text generator
        self._text_generator = TextGenerator(self._setting)
        self._text_generator.load_words()

        self._password_hasher = PasswordHasher(self._setting)

        # database
        self._engine = create_async_engine(
            url=self._setting.db.async_dsn, **self._setting.db.engine_options
        )
        self._sessionmaker = async_sessionmaker(self._engine, expire_on_commit=False)

        # cache (redis)
        if self._injected_redis_conn is not None:
            self._redis_conn = self._injected_redis_conn
        else:
            self._redis_conn = Redis(
                host=self._setting.redis.host,
                port=self._setting.redis.port,
                db=self._setting.redis.db,
            )

        if not self._setting.token.secret:
            logger.warning("token secret is empty, set 'TM_TOKEN__SECRET'")

    async def cleanup(self):
        await self._engine.dispose()
        await self._redis_conn.aclose()

    async def ready(self) -> bool:
        try:
            # database
            async with self._sessionmaker() as session:
                ret = await session.scalar(text("SELECT 1"))
                if ret != 1:
                    raise DBNotReady(f"unexpected result: {ret}")

            # redis
            await self._redis_conn.ping()

        except Exception as ex:
            logger.warning("failed 'ready' check, error: %s", str(ex))
            return False

        else:
            return True

    @property
    def text_generator(self) -> TextGenerator:
        return self._text_generator

    @property
    def password_hasher(self) -> PasswordHasher:
        return self._password_hasher

    @property
    def sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        return self._sessionmaker

    @property
    def redis_conn(self) -> Redis:
        return self._redis_conn

    @property
    def setting(self) -> Setting:
        return self._setting
