"""
用户资料缓存相关的 CRUD 操作
"""

from datetime import timedelta
from typing import Optional

from sqlalchemy import select

from game_advisor.config import settings
from game_advisor.database.connection import CacheStore
from game_advisor.database.models import UserProfile
from game_advisor.schemas.profile import CachedUserProfile, ProfileData
from game_advisor.utils.logger import log_cache_operation


async def cache_user_profile(store: CacheStore, steam_id: str, profile: ProfileData) -> None:
    """
    缓存用户资料（存在则整体覆盖），并刷新同步时间

    Args:
        store: 缓存存储
        steam_id: Steam ID
        profile: 用户资料
    """
    async with store.transaction() as db:
        row = await db.get(UserProfile, steam_id)
        if row is None:
            row = UserProfile(steam_id=steam_id)
            db.add(row)

        row.display_name = profile.display_name
        row.avatar_url = profile.avatar_url
        row.profile_url = profile.profile_url
        row.last_synced_at = store.now()

    log_cache_operation("SET", "user_profiles", steam_id)


async def get_cached_profile(store: CacheStore, steam_id: str) -> Optional[CachedUserProfile]:
    """
    获取缓存的用户资料

    仅当最后同步时间距今不足 PROFILE_TTL_HOURS 时命中

    Args:
        store: 缓存存储
        steam_id: Steam ID

    Returns:
        用户资料或None
    """
    cutoff = store.now() - timedelta(hours=settings.PROFILE_TTL_HOURS)

    async with store.session() as db:
        result = await db.execute(
            select(UserProfile).where(
                UserProfile.steam_id == steam_id,
                UserProfile.last_synced_at > cutoff
            )
        )
        row = result.scalar_one_or_none()

    log_cache_operation("GET", "user_profiles", steam_id, hit=row is not None)
    if row is None:
        return None
    return CachedUserProfile.model_validate(row)
