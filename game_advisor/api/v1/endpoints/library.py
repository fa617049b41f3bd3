"""
用户游戏库缓存相关的 API 端点
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from game_advisor.api.dependencies import get_store
from game_advisor.database.connection import CacheStore
from game_advisor.database.crud import library_crud
from game_advisor.schemas.common import ResponseModel
from game_advisor.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/cached", response_model=ResponseModel)
async def get_cached_library(
    steam_id: str = Query(..., min_length=1, description="Steam ID"),
    store: CacheStore = Depends(get_store)
):
    """
    获取缓存的游戏库

    **返回**: 缓存未命中或已过期时 games 为 null，调用方应重新从 Steam 拉取
    """
    games = await library_crud.get_cached_library(store, steam_id)
    return ResponseModel(data={"steam_id": steam_id, "games": games})


@router.post("/refresh", response_model=ResponseModel)
async def refresh_library(
    steam_id: str = Query(..., min_length=1, description="Steam ID"),
    store: CacheStore = Depends(get_store)
):
    """
    清除用户的游戏库与资料缓存，下次访问时强制完整同步
    """
    try:
        await library_crud.invalidate_user_cache(store, steam_id)
    except Exception as e:
        logger.error(f"Failed to invalidate cache: {e}")
        raise HTTPException(status_code=500, detail="Failed to refresh")

    return ResponseModel(data={"success": True})
