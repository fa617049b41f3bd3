"""
推荐反馈相关的 CRUD 操作
"""

from typing import List

from sqlalchemy import select

from game_advisor.database.connection import CacheStore
from game_advisor.database.crud.status_crud import get_games_by_status
from game_advisor.database.models import RecommendationFeedback
from game_advisor.schemas.recommendations import FeedbackAction
from game_advisor.logging_config import get_logger

logger = get_logger(__name__)


async def record_recommendation_feedback(
    store: CacheStore,
    steam_id: str,
    recommended_app_id: int,
    action: FeedbackAction
) -> None:
    """
    记录推荐反馈，同一游戏只保留最新一次操作

    Args:
        store: 缓存存储
        steam_id: Steam ID
        recommended_app_id: 被推荐游戏的 App ID
        action: 操作 (saved/dismissed/clicked)
    """
    async with store.transaction() as db:
        row = await db.get(RecommendationFeedback, (steam_id, recommended_app_id))
        if row is None:
            row = RecommendationFeedback(steam_id=steam_id, recommended_app_id=recommended_app_id)
            db.add(row)
        row.action = action
        row.created_at = store.now()

    logger.debug(f"Recorded feedback {action} for user {steam_id}, app {recommended_app_id}")


async def get_dismissed_app_ids(store: CacheStore, steam_id: str) -> List[int]:
    """
    获取用户忽略过的推荐游戏ID

    Args:
        store: 缓存存储
        steam_id: Steam ID

    Returns:
        App ID 列表
    """
    async with store.session() as db:
        result = await db.execute(
            select(RecommendationFeedback.recommended_app_id)
            .where(
                RecommendationFeedback.steam_id == steam_id,
                RecommendationFeedback.action == "dismissed"
            )
            .order_by(RecommendationFeedback.recommended_app_id)
        )
        return list(result.scalars().all())


async def get_excluded_app_ids(store: CacheStore, steam_id: str) -> List[int]:
    """
    生成推荐时需要排除的游戏：标记为不感兴趣的游戏与忽略过的推荐

    Args:
        store: 缓存存储
        steam_id: Steam ID

    Returns:
        去重排序后的 App ID 列表
    """
    not_interested = await get_games_by_status(store, steam_id, "not_interested")
    dismissed = await get_dismissed_app_ids(store, steam_id)
    return sorted({entry.app_id for entry in not_interested} | set(dismissed))
