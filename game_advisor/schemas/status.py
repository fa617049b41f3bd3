"""
游戏状态相关的 Pydantic 模型
"""

from typing import List, Literal, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, field_validator

GameStatusType = Literal["played", "liked", "not_interested"]


class GameStatusEntry(BaseModel):
    """用户对某个游戏的状态"""
    app_id: int
    name: str
    status: GameStatusType
    updated_at: datetime


class SetStatusRequest(BaseModel):
    """设置状态请求"""
    steam_id: str = Field(..., min_length=1, description="Steam ID")
    app_id: int = Field(..., gt=0, description="Steam App ID")
    name: str = Field(..., min_length=1, description="游戏名称")
    status: GameStatusType = Field(..., description="played/liked/not_interested")


class StatusSummaryItem(BaseModel):
    """提示词摘要中的游戏"""
    name: str
    app_id: int


class StatusSummary(BaseModel):
    """按状态分组的摘要，供推荐提示词使用"""
    played: List[StatusSummaryItem] = Field(default_factory=list)
    liked: List[StatusSummaryItem] = Field(default_factory=list)
    not_interested: List[StatusSummaryItem] = Field(default_factory=list)


class LegacyStatusEntry(BaseModel):
    """旧版 JSON 文件中的状态记录"""
    model_config = ConfigDict(extra="ignore")

    appid: int = Field(..., ge=0, lt=2**63)
    name: str
    status: GameStatusType
    updatedAt: Optional[datetime] = None

    @field_validator("updatedAt")
    @classmethod
    def to_naive_utc(cls, v):
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v
