from logging import getLogger

from redis.asyncio import Redis

from ..lib.util import get_dict_hash
from ..types.setting import Setting

logger = getLogger(__name__)


class LeaderboardCacheRepo:
    """
    Caches rendered leaderboard responses per query.

    Every key carries the current generation number, bumping the generation
    invalidates all cached queries at once and old keys expire on their own.
    """

    GENERATION_KEY = "leaderboard-cache-generation"

    def __init__(self, redis_conn: Redis, setting: Setting) -> None:
        self._redis_conn = redis_conn
        self._setting = setting

    async def _gen_cache_key(self, params: dict) -> str:
        generation: bytes | None = await self._redis_conn.get(self.GENERATION_KEY)
        generation_str = generation.decode() if generation is not None else "0"
        return f"leaderboard-cache-{generation_str}-{get_dict_hash(params)}"

    async def get(self, params: dict) -> str | None:
        key = await self._gen_cache_key(params)
        ret: bytes | None = await self._redis_conn.get(key)
        if ret is None:
            logger.debug("cache miss, key: %s", key)
            return None

        return ret.decode()

    async def set(self, params: dict, value: str):
        key = await self._gen_cache_key(params)
        await self._redis_conn.set(
            name=key,
            value=value,
            ex=self._setting.leaderboard.cache_expire_time,
        )

    async def invalidate(self) -> int:
        generation = await self._redis_conn.incr(self.GENERATION_KEY)
        logger.debug("leaderboard cache generation: %s", generation)
        return generation
