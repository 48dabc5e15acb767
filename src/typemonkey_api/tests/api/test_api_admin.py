import pytest
from httpx import AsyncClient

from ...lib.text_pools import SEED_TEXTS
from ...types.enums import ErrorCode
from ...types.requests.admin import RESET_CONFIRMATION
from ...types.responses.admin import AdminStatsResponse, SeedResponse
from ..helper import *

ADMIN_HEADER = {"X-Admin-Key": ADMIN_KEY}


@pytest.mark.asyncio
async def test_api_admin_key(client: AsyncClient):
    for headers in ({}, {"X-Admin-Key": "wrong"}):
        ret = await client.post(f"{API_PREFIX}/admin/seed", headers=headers)
        assert ret.status_code == 403
        assert ret.json()["error"]["code"] == ErrorCode.ACCESS_DENIED

        ret = await client.get(f"{API_PREFIX}/admin/stats", headers=headers)
        assert ret.status_code == 403


@pytest.mark.asyncio
async def test_api_admin_seed_and_stats(client: AsyncClient):
    ret = await client.post(f"{API_PREFIX}/admin/seed", headers=ADMIN_HEADER)
    assert ret.status_code == 201
    data = SeedResponse.model_validate(ret.json())
    assert data.inserted_count == len(SEED_TEXTS)
    assert all(item.id is not None for item in data.texts)

    ret = await client.post(f"{API_PREFIX}/admin/seed", headers=ADMIN_HEADER)
    assert ret.status_code == 400
    assert ret.json()["error"]["code"] == ErrorCode.ALREADY_SEEDED

    # seeded passages are served instead of generated ones
    ret = await client.get(f"{API_PREFIX}/tests/text")
    assert ret.status_code == 200
    assert not ret.json()["text"]["is_default"]

    token, _ = await register(client, "alice")
    ret = await client.post(
        f"{API_PREFIX}/tests/submit", headers=auth_header(token), json=submit_body()
    )
    assert ret.status_code == 201

    ret = await client.get(f"{API_PREFIX}/admin/stats", headers=ADMIN_HEADER)
    assert ret.status_code == 200
    data = AdminStatsResponse.model_validate(ret.json())
    assert data.database.total_users == 1
    assert data.database.total_tests == 1
    assert data.database.total_texts == len(SEED_TEXTS)
    assert data.database.recent_tests == 1


@pytest.mark.asyncio
async def test_api_admin_reset(client: AsyncClient):
    token, _ = await register(client, "alice")
    ret = await client.post(
        f"{API_PREFIX}/tests/submit", headers=auth_header(token), json=submit_body()
    )
    assert ret.status_code == 201

    ret = await client.post(
        f"{API_PREFIX}/admin/reset", headers=ADMIN_HEADER, json={"confirm": "yes"}
    )
    assert ret.status_code == 400
    assert ret.json()["error"]["code"] == ErrorCode.CONFIRMATION_REQUIRED

    ret = await client.post(
        f"{API_PREFIX}/admin/reset",
        headers=ADMIN_HEADER,
        json={"confirm": RESET_CONFIRMATION},
    )
    assert ret.status_code == 200
    assert ret.json()["ok"]

    ret = await client.get(f"{API_PREFIX}/leaderboard")
    assert ret.json()["leaderboard"] == []

    ret = await client.get(f"{API_PREFIX}/admin/stats", headers=ADMIN_HEADER)
    data = AdminStatsResponse.model_validate(ret.json())
    assert data.database.total_users == 0
    assert data.database.total_tests == 0
