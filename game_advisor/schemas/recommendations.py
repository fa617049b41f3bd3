"""
推荐缓存与反馈相关的Pydantic模式
"""

from typing import List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

RecType = Literal["similar", "library", "general"]
FeedbackAction = Literal["saved", "dismissed", "clicked"]


class CachedRecommendation(BaseModel):
    """缓存的推荐结果"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    steam_id: str
    source_app_id: Optional[int] = None
    rec_type: str
    result_json: str
    created_at: datetime
    expires_at: datetime


class FeedbackRequest(BaseModel):
    """推荐反馈请求"""
    steam_id: str = Field(..., min_length=1, description="Steam ID")
    app_id: int = Field(..., description="被推荐游戏的 App ID")
    action: FeedbackAction = Field(..., description="saved/dismissed/clicked")


class ExcludedGamesResponse(BaseModel):
    """推荐排除列表"""
    app_ids: List[int]
