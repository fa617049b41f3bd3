"""
缓存存储初始化测试
"""

import pytest
from sqlalchemy import inspect, text

from game_advisor.database.connection import CacheStore, StorageUnavailableError


EXPECTED_TABLES = {
    "user_profiles", "games", "game_genres", "game_tags", "user_games",
    "recommendations", "recommendation_feedback", "game_statuses",
}


@pytest.mark.asyncio
async def test_open_creates_directory_and_tables(store, data_dir):
    """首次打开时递归创建数据目录并建表"""
    assert not data_dir.exists()
    assert not store.is_open

    engine = await store.open()

    assert data_dir.is_dir()
    assert (data_dir / "game-statuses.db").exists()
    async with engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
    assert EXPECTED_TABLES <= tables


@pytest.mark.asyncio
async def test_open_is_idempotent(store):
    """重复打开返回同一个引擎"""
    first = await store.open()
    second = await store.open()
    assert first is second


@pytest.mark.asyncio
async def test_reopen_existing_database(data_dir, clock):
    """已存在的数据库文件可以再次打开"""
    first = CacheStore(data_dir=data_dir, clock=clock)
    await first.open()
    await first.close()

    second = CacheStore(data_dir=data_dir, clock=clock)
    await second.open()
    assert second.is_open
    await second.close()


@pytest.mark.asyncio
async def test_pragmas_are_applied(store):
    """启用 WAL 与外键约束"""
    async with store.session() as db:
        journal_mode = (await db.execute(text("PRAGMA journal_mode"))).scalar()
        foreign_keys = (await db.execute(text("PRAGMA foreign_keys"))).scalar()

    assert journal_mode.lower() == "wal"
    assert foreign_keys == 1


@pytest.mark.asyncio
async def test_unavailable_directory_raises(tmp_path, clock):
    """数据目录无法创建时立即失败"""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    store = CacheStore(data_dir=blocker / "data", clock=clock)
    with pytest.raises(StorageUnavailableError):
        await store.open()
    assert not store.is_open
