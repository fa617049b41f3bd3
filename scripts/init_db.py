"""
数据库初始化脚本

创建数据目录与所有表，并导入旧版 JSON 状态文件（如存在）
"""

import asyncio
import sys
import logging
from pathlib import Path

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from game_advisor.database.connection import CacheStore
from game_advisor.database.migration import ensure_migrated

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main():
    """主函数"""
    data_dir = sys.argv[1] if len(sys.argv) > 1 else None
    store = CacheStore(data_dir=data_dir)

    try:
        logger.info("Initializing cache store...")
        await store.open()

        logger.info("Checking for legacy status file...")
        await ensure_migrated(store)

        logger.info("Database initialization completed successfully!")

    except Exception as e:
        logger.error(f"Initialization failed: {e}")
        sys.exit(1)
    finally:
        await store.close()


if __name__ == "__main__":
    asyncio.run(main())
