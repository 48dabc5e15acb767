from unittest.mock import AsyncMock

import pytest
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...lib.text_generator import TextGenerator
from ...repositories.leaderboard_cache import LeaderboardCacheRepo
from ...repositories.text_content import TextContentRepo
from ...repositories.typing_test import TypingTestRepo
from ...repositories.user import UserRepo
from ...services.typing_test import TypingTestService
from ...types.enums import ErrorCode
from ...types.requests.typing_test import SubmitTestRequest
from ...types.setting import Setting
from ..helper import *


def new_service(
    setting: Setting,
    sessionmaker: async_sessionmaker[AsyncSession],
    redis_conn: Redis,
) -> TypingTestService:
    return TypingTestService(
        sessionmaker=sessionmaker,
        text_generator=TextGenerator(setting),
        leaderboard_cache_repo=LeaderboardCacheRepo(redis_conn, setting),
    )


def new_request(*args, **kwargs) -> SubmitTestRequest:
    return SubmitTestRequest.model_validate(submit_body(*args, **kwargs))


@pytest.mark.asyncio
async def test_typing_test_service_submit(
    setting: Setting,
    sessionmaker: async_sessionmaker[AsyncSession],
    redis_conn: Redis,
):
    service = new_service(setting, sessionmaker, redis_conn)
    user_id = await create_user(sessionmaker, "alice")

    ret = await service.submit(new_request(85, 99, "sub-1"), user_id=user_id)
    assert ret.ok
    assert ret.data
    assert not ret.data.duplicate
    assert ret.data.test.user_id == user_id
    assert not ret.data.test.is_guest
    assert ret.data.test.consistency_score == 100
    assert ret.data.detailed_stats.basic.wpm == 85
    assert [item.name for item in ret.data.achievements_unlocked] == [
        "First Steps",
        "Speed Demon",
        "Perfectionist",
    ]

    # the leaderboard cache is invalidated
    assert await redis_conn.get(LeaderboardCacheRepo.GENERATION_KEY) == b"1"

    ret = await service.submit(new_request(105, 90), user_id=user_id)
    assert ret.ok
    assert ret.data
    assert [item.name for item in ret.data.achievements_unlocked] == ["Century Club"]

    async with sessionmaker() as session:
        user = await UserRepo(session).get(user_id)
    assert user
    assert user.total_tests == 2
    assert user.best_wpm == 105
    assert user.best_accuracy == 99
    assert user.average_wpm == 95


@pytest.mark.asyncio
async def test_typing_test_service_submit_duplicate(
    setting: Setting,
    sessionmaker: async_sessionmaker[AsyncSession],
    redis_conn: Redis,
):
    service = new_service(setting, sessionmaker, redis_conn)
    user_id = await create_user(sessionmaker, "alice")

    ret = await service.submit(new_request(60, 95, "sub-1"), user_id=user_id)
    assert ret.ok and ret.data
    test_id = ret.data.test.id

    # -------------------------------------------
    # retried with the same submission id
    # -------------------------------------------
    ret = await service.submit(new_request(60, 95, "sub-1"), user_id=user_id)
    assert ret.ok and ret.data
    assert ret.data.duplicate
    assert ret.data.test.id == test_id
    assert ret.data.achievements_unlocked == []

    # -------------------------------------------
    # concurrent request stored it between the lookup and the insert
    # -------------------------------------------
    async with sessionmaker() as session:
        existing = await TypingTestRepo(session).get(test_id)

    service._get_by_submission_id = AsyncMock(side_effect=[None, existing])
    ret = await service.submit(new_request(60, 95, "sub-1"), user_id=user_id)
    assert ret.ok and ret.data
    assert ret.data.duplicate
    assert ret.data.test.id == test_id

    async with sessionmaker() as session:
        assert await TypingTestRepo(session).count_by_user(user_id) == 1
        user = await UserRepo(session).get(user_id)
    assert user and user.total_tests == 1


@pytest.mark.asyncio
async def test_typing_test_service_submit_guest(
    setting: Setting,
    sessionmaker: async_sessionmaker[AsyncSession],
    redis_conn: Redis,
):
    service = new_service(setting, sessionmaker, redis_conn)
    user_id = await create_user(sessionmaker, "alice")
    inactive_id = await create_user(sessionmaker, "bob", is_active=False)

    ret = await service.submit(new_request())
    assert ret.ok and ret.data
    assert ret.data.test.is_guest
    assert ret.data.test.user_id is None
    assert ret.data.test.guest_id and ret.data.test.guest_id.startswith("guest_")
    assert ret.data.achievements_unlocked == []

    ret = await service.submit(new_request(guest_id="guest_1"))
    assert ret.ok and ret.data
    assert ret.data.test.guest_id == "guest_1"

    # a deactivated account is stored as guest
    ret = await service.submit(new_request(), user_id=inactive_id)
    assert ret.ok and ret.data
    assert ret.data.test.is_guest

    # explicit guest submission with a token
    ret = await service.submit(new_request(is_guest=True), user_id=user_id)
    assert ret.ok and ret.data
    assert ret.data.test.is_guest

    async with sessionmaker() as session:
        user = await UserRepo(session).get(user_id)
    assert user and user.total_tests == 0


@pytest.mark.asyncio
async def test_typing_test_service_submit_invalid(
    setting: Setting,
    sessionmaker: async_sessionmaker[AsyncSession],
    redis_conn: Redis,
):
    service = new_service(setting, sessionmaker, redis_conn)

    request = new_request()
    request.results.correct_characters = 101
    ret = await service.submit(request)
    assert not ret.ok
    assert ret.error
    assert ret.error.code == ErrorCode.INVALID_RESULTS

    async with sessionmaker() as session:
        assert await TypingTestRepo(session).count() == 0


@pytest.mark.asyncio
async def test_typing_test_service_get_test(
    setting: Setting,
    sessionmaker: async_sessionmaker[AsyncSession],
    redis_conn: Redis,
):
    service = new_service(setting, sessionmaker, redis_conn)
    alice = await create_user(sessionmaker, "alice")
    bob = await create_user(sessionmaker, "bob")

    ret = await service.submit(new_request(is_public=False), user_id=alice)
    assert ret.ok and ret.data
    private_id = ret.data.test.id

    ret = await service.submit(new_request(is_public=False, guest_id="guest_1"))
    assert ret.ok and ret.data
    guest_id = ret.data.test.id

    ret = await service.submit(new_request(), user_id=bob)
    assert ret.ok and ret.data
    public_id = ret.data.test.id

    # -------------------------------------------
    # visible
    # -------------------------------------------
    ret = await service.get_test(private_id, user_id=alice)
    assert ret.ok and ret.data
    assert ret.data.username == "alice"
    assert ret.data.detailed_stats.characters.correct == 95

    ret = await service.get_test(guest_id, guest_id="guest_1")
    assert ret.ok and ret.data
    assert ret.data.username is None

    ret = await service.get_test(public_id)
    assert ret.ok and ret.data
    assert ret.data.username == "bob"

    # -------------------------------------------
    # not visible
    # -------------------------------------------
    for test_id, user_id, guest in (
        (private_id, bob, None),
        (private_id, None, None),
        (guest_id, None, "guest_2"),
        (guest_id, alice, None),
    ):
        ret = await service.get_test(test_id, user_id=user_id, guest_id=guest)
        assert not ret.ok
        assert ret.error and ret.error.code == ErrorCode.ACCESS_DENIED

    ret = await service.get_test(public_id + 100)
    assert not ret.ok
    assert ret.error and ret.error.code == ErrorCode.TEST_NOT_FOUND


@pytest.mark.asyncio
async def test_typing_test_service_history_and_delete(
    setting: Setting,
    sessionmaker: async_sessionmaker[AsyncSession],
    redis_conn: Redis,
):
    service = new_service(setting, sessionmaker, redis_conn)
    alice = await create_user(sessionmaker, "alice")
    bob = await create_user(sessionmaker, "bob")

    test_ids = []
    for wpm in (50, 60, 70):
        ret = await service.submit(new_request(wpm), user_id=alice)
        assert ret.ok and ret.data
        test_ids.append(ret.data.test.id)

    ret = await service.history(alice, page=1, limit=2)
    assert ret.ok and ret.data
    assert ret.data.total_records == 3
    assert ret.data.total_pages == 2
    assert ret.data.current == 1
    assert len(ret.data.tests) == 2

    ret = await service.history(bob)
    assert ret.ok and ret.data
    assert ret.data.total_records == 0
    assert ret.data.total_pages == 0
    assert ret.data.tests == []

    # -------------------------------------------
    # delete
    # -------------------------------------------
    generation = int(await redis_conn.get(LeaderboardCacheRepo.GENERATION_KEY))

    ret = await service.delete_test(test_ids[0], bob)
    assert not ret.ok
    assert ret.error and ret.error.code == ErrorCode.ACCESS_DENIED

    ret = await service.delete_test(test_ids[0], alice)
    assert ret.ok
    assert int(await redis_conn.get(LeaderboardCacheRepo.GENERATION_KEY)) == (
        generation + 1
    )

    ret = await service.delete_test(test_ids[0], alice)
    assert not ret.ok
    assert ret.error and ret.error.code == ErrorCode.TEST_NOT_FOUND

    ret = await service.history(alice)
    assert ret.ok and ret.data
    assert ret.data.total_records == 2


@pytest.mark.asyncio
async def test_typing_test_service_get_text(
    setting: Setting,
    sessionmaker: async_sessionmaker[AsyncSession],
    redis_conn: Redis,
):
    service = new_service(setting, sessionmaker, redis_conn)

    # -------------------------------------------
    # empty database, generated text
    # -------------------------------------------
    ret = await service.get_text()
    assert ret.ok and ret.data
    assert ret.data.is_default
    assert ret.data.category == "default"
    assert ret.data.id is None

    ret = await service.get_text(category="quotes", difficulty="hard")
    assert ret.ok and ret.data
    assert ret.data.is_default
    assert ret.data.category == "quotes"
    assert ret.data.difficulty == "hard"
    assert ret.data.author == "Various Authors"

    ret = await service.options()
    assert ret.ok and ret.data
    assert ret.data["difficulties"] == ["easy", "medium", "hard"]
    assert "programming" in ret.data["categories"]

    # -------------------------------------------
    # stored passage
    # -------------------------------------------
    async with sessionmaker() as session:
        text = await TextContentRepo(session).create(
            title="fox",
            content="the quick brown fox",
            category="quotes",
            difficulty="easy",
        )
        await session.commit()

    ret = await service.get_text(category="quotes", difficulty="easy")
    assert ret.ok and ret.data
    assert not ret.data.is_default
    assert ret.data.id == text.id
    assert ret.data.word_count == 4

    async with sessionmaker() as session:
        stored = await session.get(type(text), text.id)
    assert stored and stored.usage_count == 1

    ret = await service.options()
    assert ret.ok and ret.data
    assert ret.data == {
        "categories": ["quotes"],
        "difficulties": ["easy"],
        "languages": ["english"],
    }


@pytest.mark.asyncio
async def test_typing_test_service_redis_down(
    setting: Setting,
    sessionmaker: async_sessionmaker[AsyncSession],
    down_redis_conn: Redis,
):
    service = new_service(setting, sessionmaker, down_redis_conn)
    alice = await create_user(sessionmaker, "alice")

    ret = await service.submit(new_request(60), user_id=alice)
    assert ret.ok and ret.data
    test_id = ret.data.test.id

    ret = await service.delete_test(test_id, alice)
    assert ret.ok

    async with sessionmaker() as session:
        assert await TypingTestRepo(session).get(test_id) is None
