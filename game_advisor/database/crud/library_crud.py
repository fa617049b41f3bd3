"""
用户游戏库缓存相关的 CRUD 操作
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from game_advisor.config import settings
from game_advisor.database.connection import CacheStore
from game_advisor.database.models import Game, UserGame, UserProfile
from game_advisor.schemas.library import CachedUserGame, OwnedGame
from game_advisor.logging_config import get_logger
from game_advisor.utils.logger import log_cache_operation

logger = get_logger(__name__)

# 仅有名称的游戏占位记录视为从未抓取过详情
STUB_FETCHED_AT = datetime(1970, 1, 1)


async def ensure_game_stub(db: AsyncSession, app_id: int, name: str) -> Game:
    """
    确保 games 表中存在该游戏（至少带名称）

    已有非空名称时不会被空名称覆盖

    Args:
        db: 数据库会话（需处于事务中）
        app_id: Steam App ID
        name: 游戏名称

    Returns:
        游戏记录
    """
    game = await db.get(Game, app_id)
    if game is None:
        game = Game(app_id=app_id, name=name or "", last_fetched_at=STUB_FETCHED_AT)
        db.add(game)
    elif not game.name and name:
        game.name = name
    return game


async def cache_user_library(store: CacheStore, steam_id: str, games: Iterable[OwnedGame]) -> None:
    """
    缓存用户游戏库

    在同一个事务中删除该用户的全部旧记录后重新写入，任何失败都会整体回滚。
    同一 app_id 出现多次时以最后一条为准

    Args:
        store: 缓存存储
        steam_id: Steam ID
        games: 游戏库条目
    """
    games = list({game.app_id: game for game in games}.values())
    now = store.now()

    try:
        async with store.transaction() as db:
            await db.execute(delete(UserGame).where(UserGame.steam_id == steam_id))

            if games:
                await db.execute(
                    insert(UserGame),
                    [
                        {
                            "steam_id": steam_id,
                            "app_id": game.app_id,
                            "playtime_forever": game.playtime_forever,
                            "playtime_2weeks": game.playtime_2weeks,
                            "last_played_at": game.rtime_last_played,
                            "synced_at": now,
                        }
                        for game in games
                    ]
                )

            for game in games:
                await ensure_game_stub(db, game.app_id, game.name)
    except Exception as e:
        logger.error(f"Failed to cache library for {steam_id}: {e}")
        raise

    log_cache_operation("SET", "user_games", steam_id, count=len(games))


async def get_cached_library(store: CacheStore, steam_id: str) -> Optional[List[CachedUserGame]]:
    """
    获取缓存的用户游戏库

    只要该用户存在一条 LIBRARY_TTL_MINUTES 内同步的记录即视为命中，
    命中时返回该用户的全部记录

    Args:
        store: 缓存存储
        steam_id: Steam ID

    Returns:
        游戏库条目列表或None
    """
    cutoff = store.now() - timedelta(minutes=settings.LIBRARY_TTL_MINUTES)

    async with store.session() as db:
        fresh = await db.execute(
            select(UserGame.synced_at).where(
                UserGame.steam_id == steam_id,
                UserGame.synced_at > cutoff
            ).limit(1)
        )
        if fresh.first() is None:
            log_cache_operation("GET", "user_games", steam_id, hit=False)
            return None

        result = await db.execute(
            select(UserGame)
            .where(UserGame.steam_id == steam_id)
            .order_by(UserGame.app_id)
        )
        rows = result.scalars().all()

    log_cache_operation("GET", "user_games", steam_id, hit=True)
    return [CachedUserGame.model_validate(row) for row in rows]


async def invalidate_user_cache(store: CacheStore, steam_id: str) -> None:
    """
    清除用户的游戏库与资料缓存，强制下次完整同步

    不影响游戏元数据、推荐缓存、反馈与状态记录

    Args:
        store: 缓存存储
        steam_id: Steam ID
    """
    async with store.transaction() as db:
        await db.execute(delete(UserGame).where(UserGame.steam_id == steam_id))
        await db.execute(delete(UserProfile).where(UserProfile.steam_id == steam_id))

    logger.info(f"Invalidated cache for user {steam_id}")
