"""
API v1 路由汇总
"""

from fastapi import APIRouter

from game_advisor.api.v1.endpoints import game_status, library, recommendations

api_router = APIRouter()

# 包含各个模块的路由
api_router.include_router(game_status.router, prefix="/game-status", tags=["game-status"])
api_router.include_router(library.router, prefix="/library", tags=["library"])
api_router.include_router(recommendations.router, prefix="/recommendations", tags=["recommendations"])
