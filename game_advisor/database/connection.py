"""
数据库连接管理

CacheStore 持有嵌入式 SQLite 存储的引擎与会话工厂。首次访问时才真正打开数据库，
由应用工厂创建并通过依赖注入传递给调用方。
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncGenerator, Callable, Optional, Union

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from game_advisor.config import get_database_url, get_legacy_status_path, settings
from game_advisor.logging_config import get_logger

logger = get_logger(__name__)

# 创建基础模型类
Base = declarative_base()


class StorageUnavailableError(RuntimeError):
    """数据目录或数据库文件无法创建/打开"""


def utcnow() -> datetime:
    """当前 UTC 时间（不带时区，与库中存储格式一致）"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _on_connect(dbapi_connection, connection_record):
    # 关闭驱动自带的隐式 BEGIN，由 _on_begin 显式发出
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _on_begin(conn):
    conn.exec_driver_sql("BEGIN")


class CacheStore:
    """嵌入式缓存存储"""

    def __init__(
        self,
        data_dir: Union[str, Path, None] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.data_dir = Path(data_dir) if data_dir is not None else Path(settings.DATA_DIR)
        self.legacy_status_path = get_legacy_status_path(self.data_dir)
        self.clock = clock or utcnow

        self._engine: Optional[AsyncEngine] = None
        self._session_maker: Optional[async_sessionmaker] = None
        self._init_lock = asyncio.Lock()

        # 旧版 JSON 迁移状态（每个存储实例只执行一次）
        self.migrated = False
        self.migration_lock = asyncio.Lock()

    def now(self) -> datetime:
        """获取当前时间（可在测试中注入时钟）"""
        return self.clock()

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    async def open(self) -> AsyncEngine:
        """
        打开数据库（幂等）

        首次调用时创建数据目录、建立引擎、设置 PRAGMA 并创建所有表

        Returns:
            异步引擎

        Raises:
            StorageUnavailableError: 目录或数据库文件不可用时抛出
        """
        if self._engine is not None:
            return self._engine

        async with self._init_lock:
            if self._engine is not None:
                return self._engine

            try:
                self.data_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(f"Failed to create data directory {self.data_dir}: {e}", exc_info=True)
                raise StorageUnavailableError(f"Cannot create data directory {self.data_dir}") from e

            database_url = get_database_url(self.data_dir)
            logger.info(f"Opening cache store: {database_url}")

            engine = create_async_engine(database_url, echo=settings.DEBUG)
            event.listen(engine.sync_engine, "connect", _on_connect)
            event.listen(engine.sync_engine, "begin", _on_begin)

            # 导入所有模型以确保它们被注册
            from game_advisor.database import models  # noqa

            try:
                async with engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
            except Exception as e:
                await engine.dispose()
                logger.error(f"Failed to initialize cache store: {e}", exc_info=True)
                raise StorageUnavailableError(f"Cannot open cache store at {self.data_dir}") from e

            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False
            )
            self._engine = engine
            logger.info("Cache store initialized successfully")
            return engine

    async def close(self) -> None:
        """关闭数据库连接"""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_maker = None
            logger.info("Cache store closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        获取只读会话

        Yields:
            数据库会话
        """
        await self.open()
        async with self._session_maker() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """
        获取事务会话，正常退出时提交，出现异常时整体回滚

        Yields:
            数据库会话
        """
        await self.open()
        async with self._session_maker() as session:
            async with session.begin():
                yield session
