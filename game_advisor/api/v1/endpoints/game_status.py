"""
游戏状态相关的 API 端点
"""

from fastapi import APIRouter, Body, Depends, Query

from game_advisor.api.dependencies import get_store
from game_advisor.database.connection import CacheStore
from game_advisor.database.crud import status_crud
from game_advisor.schemas.common import ResponseModel
from game_advisor.schemas.status import SetStatusRequest
from game_advisor.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=ResponseModel)
async def get_statuses(
    steam_id: str = Query(..., min_length=1, description="Steam ID"),
    store: CacheStore = Depends(get_store)
):
    """
    获取当前用户的全部游戏状态

    **返回**: 以 App ID 为键的状态字典
    """
    statuses = await status_crud.get_user_statuses(store, steam_id)
    return ResponseModel(data={"statuses": statuses})


@router.post("", response_model=ResponseModel)
async def set_status(
    request: SetStatusRequest = Body(...),
    store: CacheStore = Depends(get_store)
):
    """
    设置游戏状态

    **请求体**:
    - **steam_id**: Steam ID
    - **app_id**: 游戏ID
    - **name**: 游戏名称
    - **status**: played/liked/not_interested
    """
    entry = await status_crud.set_game_status(
        store,
        steam_id=request.steam_id,
        app_id=request.app_id,
        name=request.name,
        status=request.status
    )
    logger.info(f"Set status {request.status} for user {request.steam_id}, app {request.app_id}")
    return ResponseModel(data={"entry": entry})


@router.delete("", response_model=ResponseModel)
async def delete_status(
    steam_id: str = Query(..., min_length=1, description="Steam ID"),
    app_id: int = Query(..., description="游戏ID"),
    store: CacheStore = Depends(get_store)
):
    """
    删除游戏状态

    **返回**: 是否删除了记录
    """
    removed = await status_crud.remove_game_status(store, steam_id, app_id)
    return ResponseModel(data={"removed": removed})
