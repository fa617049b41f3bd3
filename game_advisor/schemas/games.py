"""
游戏元数据相关的 Pydantic 模型
"""

from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class TagRank(BaseModel):
    """带排名的社区标签"""
    tag: str
    rank: int = 0


class GameDetailsData(BaseModel):
    """待缓存的游戏元数据"""
    name: str = Field("", description="游戏名称")
    type: Optional[str] = Field(None, description="条目类型 (game/dlc/...)")
    short_description: Optional[str] = Field(None, description="简短描述")
    header_image: Optional[str] = Field(None, description="头图链接")
    developers: Optional[List[str]] = Field(None, description="开发商")
    publishers: Optional[List[str]] = Field(None, description="发行商")
    metacritic_score: Optional[int] = Field(None, description="Metacritic 评分")
    release_date: Optional[str] = Field(None, description="发布日期")
    price: Optional[str] = Field(None, description="格式化后的价格")
    genres: List[str] = Field(default_factory=list, description="游戏品类")

    @classmethod
    def from_appdetails(cls, data: Dict[str, Any]) -> "GameDetailsData":
        """
        从 Steam Store appdetails 响应中提取需要缓存的字段

        Args:
            data: appdetails 响应中的 data 对象

        Returns:
            游戏元数据
        """
        metacritic = data.get("metacritic") or {}
        release = data.get("release_date") or {}
        price = data.get("price_overview") or {}
        return cls(
            name=data.get("name") or "",
            type=data.get("type"),
            short_description=data.get("short_description"),
            header_image=data.get("header_image"),
            developers=data.get("developers"),
            publishers=data.get("publishers"),
            metacritic_score=metacritic.get("score"),
            release_date=release.get("date"),
            price=price.get("final_formatted"),
            genres=[g["description"] for g in data.get("genres") or [] if g.get("description")],
        )


class CachedGameDetails(BaseModel):
    """缓存中的游戏元数据（含品类与标签）"""
    app_id: int
    name: str
    type: Optional[str] = None
    short_description: Optional[str] = None
    header_image: Optional[str] = None
    developers: Optional[List[str]] = None
    publishers: Optional[List[str]] = None
    metacritic_score: Optional[int] = None
    release_date: Optional[str] = None
    price: Optional[str] = None
    genres: List[str] = Field(default_factory=list)
    tags: List[TagRank] = Field(default_factory=list)
    last_fetched_at: datetime
