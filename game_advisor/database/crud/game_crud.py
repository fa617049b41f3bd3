"""
游戏元数据缓存相关的 CRUD 操作
"""

import json
from datetime import timedelta
from typing import List, Optional, Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from game_advisor.config import settings
from game_advisor.database.connection import CacheStore
from game_advisor.database.models import Game, GameGenre, GameTag
from game_advisor.schemas.games import CachedGameDetails, GameDetailsData, TagRank
from game_advisor.logging_config import get_logger
from game_advisor.utils.logger import log_cache_operation

logger = get_logger(__name__)


def _dedupe(values: Sequence[str]) -> List[str]:
    """去重并保持原有顺序"""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


async def _replace_genres(db: AsyncSession, app_id: int, genres: Sequence[str]) -> None:
    await db.execute(delete(GameGenre).where(GameGenre.app_id == app_id))
    genres = _dedupe(genres)
    if genres:
        await db.execute(
            insert(GameGenre),
            [{"app_id": app_id, "genre": genre} for genre in genres]
        )


async def _replace_tags(db: AsyncSession, app_id: int, tags: Sequence[TagRank]) -> None:
    await db.execute(delete(GameTag).where(GameTag.app_id == app_id))

    # 同名标签只保留第一次出现的排名
    rows = {}
    for t in tags:
        rows.setdefault(t.tag, t.rank)
    if rows:
        await db.execute(
            insert(GameTag),
            [{"app_id": app_id, "tag": tag, "rank": rank} for tag, rank in rows.items()]
        )


async def _load_tags(db: AsyncSession, app_id: int) -> List[TagRank]:
    result = await db.execute(
        select(GameTag.tag, GameTag.rank)
        .where(GameTag.app_id == app_id)
        .order_by(GameTag.rank.asc(), GameTag.tag.asc())
    )
    return [TagRank(tag=tag, rank=rank) for tag, rank in result.all()]


async def cache_game_details(
    store: CacheStore,
    app_id: int,
    details: GameDetailsData,
    tags: Optional[Sequence[TagRank]] = None
) -> None:
    """
    缓存游戏元数据

    元数据写入、品类替换与标签替换在同一个事务中完成。
    名称为空时保留已有名称；tags 为空或 None 时保留已有标签

    Args:
        store: 缓存存储
        app_id: Steam App ID
        details: 游戏元数据
        tags: 社区标签（可选，为空时不替换）
    """
    try:
        async with store.transaction() as db:
            game = await db.get(Game, app_id)
            if game is None:
                game = Game(app_id=app_id, name=details.name or "")
                db.add(game)
            elif details.name:
                game.name = details.name

            game.type = details.type
            game.short_description = details.short_description
            game.header_image = details.header_image
            game.developers = json.dumps(details.developers) if details.developers is not None else None
            game.publishers = json.dumps(details.publishers) if details.publishers is not None else None
            game.metacritic_score = details.metacritic_score
            game.release_date = details.release_date
            game.price = details.price
            game.last_fetched_at = store.now()

            # 先落库父记录，保证子表外键有效
            await db.flush()

            await _replace_genres(db, app_id, details.genres)
            if tags:
                await _replace_tags(db, app_id, tags)
    except Exception as e:
        logger.error(f"Failed to cache details for app {app_id}: {e}")
        raise

    log_cache_operation("SET", "games", app_id)


async def get_cached_game_details(store: CacheStore, app_id: int) -> Optional[CachedGameDetails]:
    """
    获取缓存的游戏元数据

    仅当最后抓取时间距今不足 GAME_METADATA_TTL_DAYS 时命中，命中时附带品类与标签

    Args:
        store: 缓存存储
        app_id: Steam App ID

    Returns:
        游戏元数据或None
    """
    cutoff = store.now() - timedelta(days=settings.GAME_METADATA_TTL_DAYS)

    async with store.session() as db:
        result = await db.execute(
            select(Game).where(Game.app_id == app_id, Game.last_fetched_at > cutoff)
        )
        game = result.scalar_one_or_none()
        if game is None:
            log_cache_operation("GET", "games", app_id, hit=False)
            return None

        genres_result = await db.execute(
            select(GameGenre.genre).where(GameGenre.app_id == app_id).order_by(GameGenre.genre)
        )
        genres = list(genres_result.scalars().all())
        tags = await _load_tags(db, app_id)

    log_cache_operation("GET", "games", app_id, hit=True)
    return CachedGameDetails(
        app_id=game.app_id,
        name=game.name,
        type=game.type,
        short_description=game.short_description,
        header_image=game.header_image,
        developers=json.loads(game.developers) if game.developers else None,
        publishers=json.loads(game.publishers) if game.publishers else None,
        metacritic_score=game.metacritic_score,
        release_date=game.release_date,
        price=game.price,
        genres=genres,
        tags=tags,
        last_fetched_at=game.last_fetched_at,
    )


async def get_game_tags_from_cache(store: CacheStore, app_id: int) -> List[TagRank]:
    """
    获取游戏的社区标签（按排名升序），不检查新鲜度

    Args:
        store: 缓存存储
        app_id: Steam App ID

    Returns:
        标签列表
    """
    async with store.session() as db:
        return await _load_tags(db, app_id)


async def delete_game(store: CacheStore, app_id: int) -> bool:
    """
    删除游戏元数据，品类与标签通过外键级联删除

    Args:
        store: 缓存存储
        app_id: Steam App ID

    Returns:
        是否删除了记录
    """
    async with store.transaction() as db:
        result = await db.execute(delete(Game).where(Game.app_id == app_id))
        deleted = result.rowcount > 0

    if deleted:
        logger.info(f"Deleted cached game {app_id}")
    return deleted
