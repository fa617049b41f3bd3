"""
游戏元数据缓存测试
"""

import pytest
from sqlalchemy import func, select

from game_advisor.database.crud.game_crud import (
    cache_game_details, delete_game, get_cached_game_details, get_game_tags_from_cache
)
from game_advisor.database.models import GameGenre, GameTag
from game_advisor.schemas.games import GameDetailsData, TagRank

APPDETAILS = {
    "type": "game",
    "name": "Half-Life 2",
    "short_description": "The sequel.",
    "header_image": "https://cdn.example/220/header.jpg",
    "developers": ["Valve"],
    "publishers": ["Valve"],
    "metacritic": {"score": 96, "url": "https://www.metacritic.com/game/half-life-2"},
    "release_date": {"coming_soon": False, "date": "16 Nov, 2004"},
    "price_overview": {"final_formatted": "$9.99"},
    "genres": [{"id": "1", "description": "Action"}],
}


async def _count(store, model, app_id):
    async with store.session() as db:
        return (await db.execute(
            select(func.count()).select_from(model).where(model.app_id == app_id)
        )).scalar()


@pytest.mark.asyncio
async def test_details_round_trip(store, clock):
    details = GameDetailsData.from_appdetails(APPDETAILS)
    await cache_game_details(store, 220, details, [TagRank(tag="FPS", rank=1)])

    cached = await get_cached_game_details(store, 220)

    assert cached.app_id == 220
    assert cached.name == "Half-Life 2"
    assert cached.type == "game"
    assert cached.developers == ["Valve"]
    assert cached.publishers == ["Valve"]
    assert cached.metacritic_score == 96
    assert cached.release_date == "16 Nov, 2004"
    assert cached.price == "$9.99"
    assert cached.genres == ["Action"]
    assert cached.tags == [TagRank(tag="FPS", rank=1)]
    assert cached.last_fetched_at == clock.current


@pytest.mark.asyncio
async def test_missing_details_is_a_miss(store):
    assert await get_cached_game_details(store, 404) is None


@pytest.mark.asyncio
async def test_details_expire_after_seven_days(store, clock):
    await cache_game_details(store, 220, GameDetailsData(name="Half-Life 2"))

    clock.advance(days=6, hours=23, minutes=59)
    assert await get_cached_game_details(store, 220) is not None

    clock.advance(minutes=1)
    assert await get_cached_game_details(store, 220) is None


@pytest.mark.asyncio
async def test_empty_name_does_not_overwrite(store):
    await cache_game_details(store, 70, GameDetailsData(name="Half-Life"))

    await cache_game_details(store, 70, GameDetailsData(name=""))
    assert (await get_cached_game_details(store, 70)).name == "Half-Life"

    await cache_game_details(store, 70, GameDetailsData(name="Half-Life 2"))
    assert (await get_cached_game_details(store, 70)).name == "Half-Life 2"


@pytest.mark.asyncio
async def test_tags_are_ordered_by_rank(store):
    await cache_game_details(store, 250900, GameDetailsData(name="The Binding of Isaac: Rebirth"), [
        TagRank(tag="Roguelike", rank=2),
        TagRank(tag="Indie", rank=1),
    ])

    cached = await get_cached_game_details(store, 250900)
    assert [t.tag for t in cached.tags] == ["Indie", "Roguelike"]

    tags = await get_game_tags_from_cache(store, 250900)
    assert [t.tag for t in tags] == ["Indie", "Roguelike"]


@pytest.mark.asyncio
async def test_tags_only_ignores_freshness(store, clock):
    await cache_game_details(store, 620, GameDetailsData(name="Portal 2"), [TagRank(tag="Puzzle", rank=1)])
    clock.advance(days=30)

    assert await get_cached_game_details(store, 620) is None
    assert [t.tag for t in await get_game_tags_from_cache(store, 620)] == ["Puzzle"]


@pytest.mark.asyncio
async def test_genres_are_set_replaced(store):
    """刷新时删除新集合中不存在的品类"""
    await cache_game_details(store, 220, GameDetailsData(name="Half-Life 2", genres=["Action", "Adventure"]))
    await cache_game_details(store, 220, GameDetailsData(name="Half-Life 2", genres=["Action", "Shooter", "Action"]))

    cached = await get_cached_game_details(store, 220)
    assert cached.genres == ["Action", "Shooter"]


@pytest.mark.asyncio
async def test_tags_kept_when_not_provided(store):
    """未提供标签或标签为空时保留已有标签"""
    await cache_game_details(store, 220, GameDetailsData(name="Half-Life 2"), [TagRank(tag="FPS", rank=1)])

    await cache_game_details(store, 220, GameDetailsData(name="Half-Life 2"))
    assert [t.tag for t in (await get_cached_game_details(store, 220)).tags] == ["FPS"]

    await cache_game_details(store, 220, GameDetailsData(name="Half-Life 2"), [])
    assert [t.tag for t in await get_game_tags_from_cache(store, 220)] == ["FPS"]

    await cache_game_details(store, 220, GameDetailsData(name="Half-Life 2"), [TagRank(tag="Classic", rank=1)])
    assert [t.tag for t in await get_game_tags_from_cache(store, 220)] == ["Classic"]


@pytest.mark.asyncio
async def test_duplicate_tags_keep_first_rank(store):
    await cache_game_details(store, 220, GameDetailsData(name="Half-Life 2"), [
        TagRank(tag="FPS", rank=3),
        TagRank(tag="FPS", rank=1),
        TagRank(tag="Classic", rank=2),
    ])

    tags = await get_game_tags_from_cache(store, 220)
    assert tags == [TagRank(tag="Classic", rank=2), TagRank(tag="FPS", rank=3)]


@pytest.mark.asyncio
async def test_delete_cascades_to_genres_and_tags(store):
    await cache_game_details(
        store, 220,
        GameDetailsData(name="Half-Life 2", genres=["Action"]),
        [TagRank(tag="FPS", rank=1)]
    )
    assert await _count(store, GameGenre, 220) == 1
    assert await _count(store, GameTag, 220) == 1

    assert await delete_game(store, 220) is True

    assert await get_cached_game_details(store, 220) is None
    assert await _count(store, GameGenre, 220) == 0
    assert await _count(store, GameTag, 220) == 0
    assert await delete_game(store, 220) is False
