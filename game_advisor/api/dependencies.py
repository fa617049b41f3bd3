"""
FastAPI依赖注入
"""

from fastapi import Request

from game_advisor.database.connection import CacheStore


def get_store(request: Request) -> CacheStore:
    """
    获取应用的缓存存储

    存储由应用工厂创建并挂在 app.state 上，首次使用时才打开数据库
    """
    return request.app.state.store
