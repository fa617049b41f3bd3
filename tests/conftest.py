"""
测试公共夹具
"""

import os
from datetime import datetime, timedelta

# 测试中不写日志文件
os.environ.setdefault("ENABLE_FILE_LOGGING", "false")

import pytest
import pytest_asyncio

from game_advisor.database.connection import CacheStore


class FakeClock:
    """可手动推进的时钟"""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest_asyncio.fixture
async def store(data_dir, clock):
    cache_store = CacheStore(data_dir=data_dir, clock=clock)
    yield cache_store
    await cache_store.close()
