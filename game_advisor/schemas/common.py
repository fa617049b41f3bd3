"""
通用的 Pydantic 模型
"""

from typing import Any, Optional
from pydantic import BaseModel, Field


class ResponseModel(BaseModel):
    """
    统一的 API 响应模型

    缓存未命中时 data 中对应字段为 null：
    {
        "code": 200,
        "message": "success",
        "data": {"steam_id": "7656...", "games": null}
    }
    """
    code: int = Field(200, description="状态码")
    message: str = Field("success", description="响应消息")
    data: Optional[Any] = Field(None, description="响应数据")

    class Config:
        json_schema_extra = {
            "example": {
                "code": 200,
                "message": "success",
                "data": {"statuses": {}}
            }
        }
