"""
旧版 JSON 状态文件迁移

旧版本把用户游戏状态保存在数据目录下的 game-statuses.json 中：

    {
        "<steam_id>": {
            "<appid 或名称>": {"appid": 440, "name": "...", "status": "liked", "updatedAt": "..."}
        }
    }

首次访问状态表时导入一次，成功后重命名为 .bak，保留以便人工检查。
文件损坏时只记录日志，不影响应用启动。
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from game_advisor.database.connection import CacheStore
from game_advisor.database.models import GameStatus
from game_advisor.schemas.status import LegacyStatusEntry
from game_advisor.logging_config import get_logger
from game_advisor.utils.logger import log_performance

logger = get_logger(__name__)

BACKUP_SUFFIX = ".bak"


def _load_legacy_document(path: Path) -> Optional[Dict[str, Any]]:
    """读取并解析旧版文件，失败时返回 None"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(f"Legacy status file {path} is unreadable, skipping migration: {e}")
        return None

    if not isinstance(document, dict):
        logger.error(f"Legacy status file {path} has unexpected shape, skipping migration")
        return None
    return document


def parse_legacy_statuses(document: Dict[str, Any]) -> List[Tuple[str, LegacyStatusEntry]]:
    """
    校验旧版文件中的每一条记录

    无效记录会被丢弃并记录日志，不影响其他记录

    Args:
        document: 解析后的 JSON 对象

    Returns:
        (steam_id, 状态记录) 列表
    """
    entries = []
    for steam_id, statuses in document.items():
        if not isinstance(statuses, dict):
            logger.warning(f"Skipping legacy statuses for {steam_id}: expected an object")
            continue

        for key, raw in statuses.items():
            try:
                entries.append((steam_id, LegacyStatusEntry.model_validate(raw)))
            except ValidationError as e:
                logger.warning(
                    f"Skipping invalid legacy status {steam_id}/{key}: {e.error_count()} error(s)"
                )
    return entries


async def migrate_legacy_statuses(store: CacheStore) -> int:
    """
    将旧版 JSON 状态文件导入 game_statuses 表

    Args:
        store: 缓存存储

    Returns:
        导入的记录数
    """
    path = store.legacy_status_path
    if not path.exists():
        return 0

    document = _load_legacy_document(path)
    if document is None:
        return 0

    entries = parse_legacy_statuses(document)
    now = store.now()

    try:
        with log_performance("legacy_status_migration", logger=logger, path=str(path)):
            async with store.transaction() as db:
                for steam_id, entry in entries:
                    await db.merge(GameStatus(
                        steam_id=steam_id,
                        app_id=entry.appid,
                        name=entry.name,
                        status=entry.status,
                        updated_at=entry.updatedAt or now,
                    ))
    except Exception as e:
        # 文件保留原样，便于人工恢复
        logger.error(f"Legacy status import failed, leaving {path} in place: {e}")
        return 0

    try:
        path.rename(path.with_name(path.name + BACKUP_SUFFIX))
    except OSError as e:
        logger.error(f"Migrated legacy statuses but could not rename {path}: {e}")

    logger.info(f"Migrated {len(entries)} legacy game statuses from {path}")
    return len(entries)


async def ensure_migrated(store: CacheStore) -> None:
    """
    确保旧版状态文件已迁移（每个存储实例只执行一次）

    Args:
        store: 缓存存储
    """
    if store.migrated:
        return

    async with store.migration_lock:
        if store.migrated:
            return
        await store.open()
        await migrate_legacy_statuses(store)
        store.migrated = True
