"""
推荐结果缓存相关的 CRUD 操作

推荐表只追加不更新，读取时选取最新且未过期的一条
"""

from datetime import timedelta
from typing import Optional

from sqlalchemy import select

from game_advisor.config import get_rec_ttl_hours
from game_advisor.database.connection import CacheStore
from game_advisor.database.models import Recommendation
from game_advisor.schemas.recommendations import CachedRecommendation, RecType
from game_advisor.utils.logger import log_cache_operation


def _cache_key(steam_id: str, source_app_id: Optional[int], rec_type: str) -> str:
    return f"{steam_id}:{source_app_id if source_app_id is not None else '-'}:{rec_type}"


async def cache_recommendation(
    store: CacheStore,
    steam_id: str,
    source_app_id: Optional[int],
    rec_type: RecType,
    result_json: str,
    ttl_hours: Optional[float] = None
) -> CachedRecommendation:
    """
    缓存推荐结果（总是插入新记录）

    Args:
        store: 缓存存储
        steam_id: Steam ID
        source_app_id: 来源游戏ID，通用推荐为 None
        rec_type: 推荐类型 (similar/library/general)
        result_json: 序列化后的推荐结果
        ttl_hours: 缓存时长（小时），默认按推荐类型读取配置

    Returns:
        写入的推荐记录
    """
    if ttl_hours is None:
        ttl_hours = get_rec_ttl_hours(rec_type)

    now = store.now()
    record = Recommendation(
        steam_id=steam_id,
        source_app_id=source_app_id,
        rec_type=rec_type,
        result_json=result_json,
        created_at=now,
        expires_at=now + timedelta(hours=ttl_hours),
    )

    async with store.transaction() as db:
        db.add(record)
        await db.flush()
        cached = CachedRecommendation.model_validate(record)

    log_cache_operation("SET", "recommendations", _cache_key(steam_id, source_app_id, rec_type))
    return cached


async def get_cached_recommendation(
    store: CacheStore,
    steam_id: str,
    source_app_id: Optional[int],
    rec_type: RecType
) -> Optional[CachedRecommendation]:
    """
    获取最新且未过期的推荐结果

    source_app_id 为 None 时只匹配来源为空的记录，不会匹配任意来源

    Args:
        store: 缓存存储
        steam_id: Steam ID
        source_app_id: 来源游戏ID
        rec_type: 推荐类型

    Returns:
        推荐记录或None
    """
    if source_app_id is None:
        source_clause = Recommendation.source_app_id.is_(None)
    else:
        source_clause = Recommendation.source_app_id == source_app_id

    async with store.session() as db:
        result = await db.execute(
            select(Recommendation)
            .where(
                Recommendation.steam_id == steam_id,
                Recommendation.rec_type == rec_type,
                source_clause,
                Recommendation.expires_at > store.now()
            )
            .order_by(Recommendation.created_at.desc(), Recommendation.id.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()

    key = _cache_key(steam_id, source_app_id, rec_type)
    log_cache_operation("GET", "recommendations", key, hit=row is not None)
    if row is None:
        return None
    return CachedRecommendation.model_validate(row)
