"""
开发环境启动脚本
"""

import sys
import asyncio
import subprocess
import logging
from pathlib import Path

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from game_advisor.config import settings
from game_advisor.database.connection import CacheStore, StorageUnavailableError
from game_advisor.database.migration import ensure_migrated

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def check_dependencies():
    """检查依赖是否安装"""
    logger.info("Checking dependencies...")

    try:
        import fastapi  # noqa
        import uvicorn  # noqa
        import sqlalchemy  # noqa
        import aiosqlite  # noqa
        import pydantic  # noqa
        logger.info("All dependencies are installed")
        return True
    except ImportError as e:
        logger.error(f"Missing dependency: {e}")
        logger.info("Please run: pip install -e .")
        return False


async def check_store():
    """确认数据目录可写，并提前完成旧版状态迁移"""
    logger.info(f"Checking cache store in {settings.DATA_DIR}...")
    store = CacheStore()

    try:
        await store.open()
        await ensure_migrated(store)
        logger.info("Cache store OK")
        return True
    except StorageUnavailableError as e:
        logger.error(f"Cache store unavailable: {e}")
        return False
    finally:
        await store.close()


def start_server():
    """启动开发服务器"""
    logger.info("Starting development server...")

    cmd = [
        "uvicorn",
        "game_advisor.main:app",
        "--reload",
        "--host", "0.0.0.0",
        "--port", "8000",
        "--log-level", settings.LOG_LEVEL.lower()
    ]

    try:
        subprocess.run(cmd, cwd=project_root)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")


async def main():
    """主函数"""
    logger.info("Starting Game Advisor Backend Development Server...")

    if not check_dependencies():
        logger.error("Dependencies check failed")
        return

    if not await check_store():
        logger.error("Cache store check failed")
        return

    logger.info("Server will be available at: http://localhost:8000")
    if settings.DEBUG:
        logger.info("API documentation: http://localhost:8000/docs")
    logger.info("Press Ctrl+C to stop the server")

    start_server()


if __name__ == "__main__":
    asyncio.run(main())
