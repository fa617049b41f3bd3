"""
用户游戏库相关的 Pydantic 模型
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class OwnedGame(BaseModel):
    """Steam GetOwnedGames 返回的游戏条目"""
    model_config = ConfigDict(populate_by_name=True)

    app_id: int = Field(..., alias="appid", description="Steam App ID")
    name: str = Field("", description="游戏名称")
    playtime_forever: int = Field(0, description="总游玩时长（分钟）")
    playtime_2weeks: int = Field(0, description="最近两周游玩时长（分钟）")
    rtime_last_played: Optional[int] = Field(None, description="最后游玩时间（Unix时间戳）")


class CachedUserGame(BaseModel):
    """缓存中的游戏库条目"""
    model_config = ConfigDict(from_attributes=True)

    app_id: int
    playtime_forever: int = 0
    playtime_2weeks: int = 0
    last_played_at: Optional[int] = None
    synced_at: datetime
