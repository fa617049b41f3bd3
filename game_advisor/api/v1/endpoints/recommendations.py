"""
推荐反馈相关API端点
"""

from fastapi import APIRouter, Depends, Query

from game_advisor.api.dependencies import get_store
from game_advisor.database.connection import CacheStore
from game_advisor.database.crud import feedback_crud
from game_advisor.schemas.common import ResponseModel
from game_advisor.schemas.recommendations import ExcludedGamesResponse, FeedbackRequest

router = APIRouter()


@router.post("/feedback", response_model=ResponseModel)
async def record_feedback(
    feedback: FeedbackRequest,
    store: CacheStore = Depends(get_store)
):
    """
    记录推荐反馈

    - **steam_id**: Steam ID
    - **app_id**: 被推荐的游戏ID
    - **action**: saved/dismissed/clicked

    同一游戏只保留最新一次操作
    """
    await feedback_crud.record_recommendation_feedback(
        store, feedback.steam_id, feedback.app_id, feedback.action
    )
    return ResponseModel(data={"success": True})


@router.get("/excluded", response_model=ResponseModel)
async def get_excluded(
    steam_id: str = Query(..., min_length=1, description="Steam ID"),
    store: CacheStore = Depends(get_store)
):
    """
    获取生成推荐时需要排除的游戏（不感兴趣 + 已忽略）
    """
    app_ids = await feedback_crud.get_excluded_app_ids(store, steam_id)
    return ResponseModel(data=ExcludedGamesResponse(app_ids=app_ids))
