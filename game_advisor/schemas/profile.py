"""
用户资料缓存相关的 Pydantic 模型
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class ProfileData(BaseModel):
    """待缓存的 Steam 用户资料"""
    display_name: str = Field(..., description="显示名称")
    avatar_url: Optional[str] = Field(None, description="头像链接")
    profile_url: Optional[str] = Field(None, description="个人主页链接")


class CachedUserProfile(ProfileData):
    """缓存中的用户资料"""
    steam_id: str = Field(..., description="Steam ID")
    last_synced_at: datetime = Field(..., description="最后同步时间 (UTC)")

    class Config:
        from_attributes = True
