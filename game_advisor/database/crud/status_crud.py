"""
用户游戏状态相关的 CRUD 操作

所有读写在执行前都会确保旧版 JSON 状态文件已迁移
"""

from typing import Dict, List

from sqlalchemy import delete, select

from game_advisor.database.connection import CacheStore
from game_advisor.database.migration import ensure_migrated
from game_advisor.database.models import GameStatus
from game_advisor.schemas.status import (
    GameStatusEntry, GameStatusType, StatusSummary, StatusSummaryItem
)


def _to_entry(row: GameStatus) -> GameStatusEntry:
    return GameStatusEntry(
        app_id=row.app_id,
        name=row.name,
        status=row.status,
        updated_at=row.updated_at,
    )


async def get_user_statuses(store: CacheStore, steam_id: str) -> Dict[str, GameStatusEntry]:
    """
    获取用户的全部游戏状态

    Args:
        store: 缓存存储
        steam_id: Steam ID

    Returns:
        以 App ID 字符串为键的状态字典
    """
    await ensure_migrated(store)

    async with store.session() as db:
        result = await db.execute(
            select(GameStatus).where(GameStatus.steam_id == steam_id).order_by(GameStatus.app_id)
        )
        return {str(row.app_id): _to_entry(row) for row in result.scalars().all()}


async def set_game_status(
    store: CacheStore,
    steam_id: str,
    app_id: int,
    name: str,
    status: GameStatusType
) -> GameStatusEntry:
    """
    设置游戏状态（存在则覆盖）

    Args:
        store: 缓存存储
        steam_id: Steam ID
        app_id: Steam App ID
        name: 游戏名称
        status: 状态 (played/liked/not_interested)

    Returns:
        写入后的状态
    """
    await ensure_migrated(store)
    now = store.now()

    async with store.transaction() as db:
        row = await db.get(GameStatus, (steam_id, app_id))
        if row is None:
            row = GameStatus(steam_id=steam_id, app_id=app_id)
            db.add(row)
        row.name = name
        row.status = status
        row.updated_at = now

    return GameStatusEntry(app_id=app_id, name=name, status=status, updated_at=now)


async def remove_game_status(store: CacheStore, steam_id: str, app_id: int) -> bool:
    """
    删除游戏状态

    Returns:
        是否删除了记录
    """
    await ensure_migrated(store)

    async with store.transaction() as db:
        result = await db.execute(
            delete(GameStatus).where(GameStatus.steam_id == steam_id, GameStatus.app_id == app_id)
        )
        return result.rowcount > 0


async def get_games_by_status(
    store: CacheStore,
    steam_id: str,
    status: GameStatusType
) -> List[GameStatusEntry]:
    """获取用户某一状态下的全部游戏"""
    await ensure_migrated(store)

    async with store.session() as db:
        result = await db.execute(
            select(GameStatus)
            .where(GameStatus.steam_id == steam_id, GameStatus.status == status)
            .order_by(GameStatus.app_id)
        )
        return [_to_entry(row) for row in result.scalars().all()]


async def get_status_summary_for_prompt(store: CacheStore, steam_id: str) -> StatusSummary:
    """
    按状态分组，生成推荐提示词所需的摘要

    Args:
        store: 缓存存储
        steam_id: Steam ID

    Returns:
        played / liked / not_interested 三组游戏
    """
    summary = StatusSummary()
    for entry in (await get_user_statuses(store, steam_id)).values():
        item = StatusSummaryItem(name=entry.name, app_id=entry.app_id)
        getattr(summary, entry.status).append(item)
    return summary
