"""
用户游戏库缓存测试
"""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from game_advisor.database.crud.game_crud import cache_game_details, get_cached_game_details
from game_advisor.database.crud.library_crud import (
    cache_user_library, get_cached_library, invalidate_user_cache
)
from game_advisor.database.crud.profile_crud import cache_user_profile
from game_advisor.database.crud.recommendation_crud import (
    cache_recommendation, get_cached_recommendation
)
from game_advisor.database.crud.status_crud import get_user_statuses, set_game_status
from game_advisor.database.models import Game
from game_advisor.schemas.games import GameDetailsData
from game_advisor.schemas.library import OwnedGame
from game_advisor.schemas.profile import ProfileData

STEAM_ID = "76561198000000001"


def owned(app_id, name="", playtime=0, recent=0, last_played=None):
    return OwnedGame(
        appid=app_id,
        name=name,
        playtime_forever=playtime,
        playtime_2weeks=recent,
        rtime_last_played=last_played,
    )


def broken_entry():
    """缺少 app_id 的条目，写入时触发 NOT NULL 约束"""
    return OwnedGame.model_construct(
        app_id=None, name="Broken", playtime_forever=0, playtime_2weeks=0, rtime_last_played=None
    )


@pytest.mark.asyncio
async def test_library_round_trip(store, clock):
    await cache_user_library(store, STEAM_ID, [
        owned(620, "Portal 2", playtime=1200, recent=30, last_played=1700000000),
        owned(220, "Half-Life 2", playtime=600),
    ])

    library = await get_cached_library(store, STEAM_ID)

    assert [game.app_id for game in library] == [220, 620]
    portal = library[1]
    assert portal.playtime_forever == 1200
    assert portal.playtime_2weeks == 30
    assert portal.last_played_at == 1700000000
    assert portal.synced_at == clock.current
    assert library[0].last_played_at is None


@pytest.mark.asyncio
async def test_library_accepts_raw_steam_entries(store):
    """可直接使用 GetOwnedGames 的原始字典"""
    raw = [{"appid": 440, "name": "Team Fortress 2", "playtime_forever": 42}]
    await cache_user_library(store, STEAM_ID, [OwnedGame.model_validate(g) for g in raw])

    library = await get_cached_library(store, STEAM_ID)
    assert library[0].app_id == 440
    assert library[0].playtime_2weeks == 0


@pytest.mark.asyncio
async def test_library_freshness_window(store, clock):
    await cache_user_library(store, STEAM_ID, [owned(220, "Half-Life 2")])

    clock.advance(minutes=4, seconds=59)
    assert await get_cached_library(store, STEAM_ID) is not None

    clock.advance(seconds=1)
    assert await get_cached_library(store, STEAM_ID) is None


@pytest.mark.asyncio
async def test_resync_replaces_snapshot(store, clock):
    """重新同步删除已移除的游戏，而不是合并"""
    await cache_user_library(store, STEAM_ID, [owned(10, "Counter-Strike"), owned(20, "Team Fortress Classic")])
    clock.advance(minutes=10)

    await cache_user_library(store, STEAM_ID, [owned(20, "Team Fortress Classic"), owned(30, "Day of Defeat")])

    library = await get_cached_library(store, STEAM_ID)
    assert [game.app_id for game in library] == [20, 30]
    assert all(game.synced_at == clock.current for game in library)


@pytest.mark.asyncio
async def test_empty_library_is_a_miss(store):
    await cache_user_library(store, STEAM_ID, [])
    assert await get_cached_library(store, STEAM_ID) is None


@pytest.mark.asyncio
async def test_failed_write_keeps_previous_snapshot(store):
    """批量写入中途失败时整体回滚，保留旧快照"""
    await cache_user_library(store, STEAM_ID, [owned(10, "Counter-Strike"), owned(20, "Team Fortress Classic")])

    with pytest.raises(IntegrityError):
        await cache_user_library(store, STEAM_ID, [owned(30, "Day of Defeat"), broken_entry()])

    library = await get_cached_library(store, STEAM_ID)
    assert [game.app_id for game in library] == [10, 20]

    async with store.session() as db:
        stub = await db.get(Game, 30)
    assert stub is None


@pytest.mark.asyncio
async def test_failed_first_write_leaves_no_snapshot(store):
    with pytest.raises(IntegrityError):
        await cache_user_library(store, STEAM_ID, [owned(30, "Day of Defeat"), broken_entry()])

    assert await get_cached_library(store, STEAM_ID) is None


@pytest.mark.asyncio
async def test_repeated_app_id_keeps_last_entry(store):
    """GetOwnedGames 返回重复条目时以最后一条为准"""
    await cache_user_library(store, STEAM_ID, [
        owned(1, "First", playtime=10),
        owned(2, "Second", playtime=5),
        owned(1, "First", playtime=99),
    ])

    library = await get_cached_library(store, STEAM_ID)
    assert [(game.app_id, game.playtime_forever) for game in library] == [(1, 99), (2, 5)]


@pytest.mark.asyncio
async def test_library_creates_game_stubs(store):
    """写入游戏库时为未知游戏创建仅含名称的记录"""
    await cache_user_library(store, STEAM_ID, [owned(220, "Half-Life 2")])

    async with store.session() as db:
        game = (await db.execute(select(Game).where(Game.app_id == 220))).scalar_one()
    assert game.name == "Half-Life 2"

    # 占位记录不算作已抓取的元数据
    assert await get_cached_game_details(store, 220) is None


@pytest.mark.asyncio
async def test_library_stub_never_blanks_existing_name(store):
    await cache_game_details(store, 70, GameDetailsData(name="Half-Life", genres=["Action"]))

    await cache_user_library(store, STEAM_ID, [owned(70, "")])
    await cache_user_library(store, STEAM_ID, [owned(70, "HL1")])

    details = await get_cached_game_details(store, 70)
    assert details.name == "Half-Life"
    assert details.genres == ["Action"]


@pytest.mark.asyncio
async def test_library_stub_fills_empty_name(store):
    await cache_user_library(store, STEAM_ID, [owned(70, "")])
    await cache_user_library(store, STEAM_ID, [owned(70, "Half-Life")])

    async with store.session() as db:
        game = await db.get(Game, 70)
    assert game.name == "Half-Life"


@pytest.mark.asyncio
async def test_libraries_are_isolated_per_user(store):
    other = "76561198000000002"
    await cache_user_library(store, STEAM_ID, [owned(10, "Counter-Strike")])
    await cache_user_library(store, other, [owned(20, "Team Fortress Classic")])

    await cache_user_library(store, STEAM_ID, [owned(30, "Day of Defeat")])

    assert [g.app_id for g in await get_cached_library(store, other)] == [20]


@pytest.mark.asyncio
async def test_invalidate_only_touches_user_scoped_rows(store):
    """清除用户缓存不影响元数据、推荐与状态"""
    await cache_user_profile(store, STEAM_ID, ProfileData(display_name="Gordon"))
    await cache_user_library(store, STEAM_ID, [owned(220, "Half-Life 2")])
    await cache_game_details(store, 220, GameDetailsData(name="Half-Life 2"))
    await cache_recommendation(store, STEAM_ID, None, "general", "[]", 12)
    await set_game_status(store, STEAM_ID, 220, "Half-Life 2", "liked")

    await invalidate_user_cache(store, STEAM_ID)

    assert await get_cached_library(store, STEAM_ID) is None
    assert await get_cached_game_details(store, 220) is not None
    assert await get_cached_recommendation(store, STEAM_ID, None, "general") is not None
    assert "220" in await get_user_statuses(store, STEAM_ID)
