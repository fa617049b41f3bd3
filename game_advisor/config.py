"""
应用配置管理
"""

from pathlib import Path
from typing import List, Optional, Union
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """应用配置"""

    # API配置
    API_V1_PREFIX: str = "/api/v1"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # 日志配置
    LOG_DIR: Optional[str] = None  # 日志目录，默认为项目根目录下的 logs
    ENABLE_FILE_LOGGING: bool = True
    ENABLE_CONSOLE_LOGGING: bool = True
    SLOW_REQUEST_THRESHOLD: float = 1.0  # 慢请求阈值（秒）

    # 存储配置
    DATA_DIR: str = "data"  # 数据目录，相对路径基于当前工作目录
    DB_FILENAME: str = "game-statuses.db"
    LEGACY_STATUS_FILENAME: str = "game-statuses.json"  # 旧版 JSON 状态文件

    # 缓存新鲜度配置
    PROFILE_TTL_HOURS: int = 24
    LIBRARY_TTL_MINUTES: int = 5
    GAME_METADATA_TTL_DAYS: int = 7

    # 推荐缓存配置（按推荐类型）
    SIMILAR_REC_TTL_HOURS: int = 24
    LIBRARY_REC_TTL_HOURS: int = 12
    GENERAL_REC_TTL_HOURS: int = 12

    # CORS配置
    ALLOWED_ORIGINS: List[str] = ["*"]

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",")]
        return v

    model_config = {
        "env_file": ".env",
        "case_sensitive": True
    }


# 全局配置实例
settings = Settings()


def get_database_url(data_dir: Union[str, Path, None] = None) -> str:
    """
    获取数据库连接URL

    数据库文件固定位于数据目录下，使用 aiosqlite 异步驱动
    """
    base = Path(data_dir) if data_dir is not None else Path(settings.DATA_DIR)
    return f"sqlite+aiosqlite:///{base / settings.DB_FILENAME}"


def get_legacy_status_path(data_dir: Union[str, Path, None] = None) -> Path:
    """获取旧版 JSON 状态文件路径"""
    base = Path(data_dir) if data_dir is not None else Path(settings.DATA_DIR)
    return base / settings.LEGACY_STATUS_FILENAME


def get_rec_ttl_hours(rec_type: str) -> int:
    """
    获取推荐类型对应的缓存时长（小时）

    Args:
        rec_type: 推荐类型 (similar/library/general)

    Returns:
        缓存时长
    """
    ttl_map = {
        "similar": settings.SIMILAR_REC_TTL_HOURS,
        "library": settings.LIBRARY_REC_TTL_HOURS,
        "general": settings.GENERAL_REC_TTL_HOURS,
    }
    return ttl_map.get(rec_type, settings.GENERAL_REC_TTL_HOURS)
