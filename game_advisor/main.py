"""
Game Advisor Backend - 主应用入口
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from game_advisor.config import settings
from game_advisor.api.v1.api import api_router
from game_advisor.database.connection import CacheStore
from game_advisor.logging_config import setup_logging, get_logger
from game_advisor.utils.logger import log_request, log_slow_request

logger = get_logger(__name__)


def create_application(store: Optional[CacheStore] = None) -> FastAPI:
    """
    创建FastAPI应用

    Args:
        store: 缓存存储，默认使用配置中的数据目录
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Game Advisor Backend...")
        yield
        logger.info("Shutting down Game Advisor Backend...")
        await app.state.store.close()

    app = FastAPI(
        title="Game Advisor API",
        description="Steam 游戏推荐缓存服务",
        version="1.0.0",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # 数据库在首次访问时才打开
    app.state.store = store or CacheStore()

    # 添加中间件
    setup_middleware(app)

    # 添加路由
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    # 添加异常处理器
    setup_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        """健康检查"""
        return {
            "status": "healthy",
            "timestamp": time.time(),
            "version": "1.0.0"
        }

    return app


def setup_middleware(app: FastAPI) -> None:
    """设置中间件"""

    # CORS中间件
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 请求日志中间件
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """记录所有HTTP请求"""
        start_time = time.time()
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        client_ip = request.client.host if request.client else None
        if "x-forwarded-for" in request.headers:
            client_ip = request.headers["x-forwarded-for"].split(",")[0].strip()

        steam_id = request.query_params.get("steam_id")

        response = await call_next(request)
        process_time = (time.time() - start_time) * 1000

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.2f}"

        log_request(
            method=request.method,
            path=str(request.url.path),
            status_code=response.status_code,
            duration_ms=process_time,
            steam_id=steam_id,
            ip=client_ip,
            request_id=request_id
        )
        log_slow_request(
            method=request.method,
            path=str(request.url.path),
            duration_ms=process_time,
            threshold=settings.SLOW_REQUEST_THRESHOLD * 1000,
            request_id=request_id
        )
        return response


def setup_exception_handlers(app: FastAPI) -> None:
    """设置异常处理器"""

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """全局异常处理器"""
        request_id = getattr(request.state, "request_id", None)

        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                'method': request.method,
                'path': str(request.url.path),
                'request_id': request_id
            }
        )

        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred",
                "request_id": request_id
            }
        )


# 初始化日志系统
setup_logging(
    log_dir=settings.LOG_DIR,
    log_level=settings.LOG_LEVEL,
    enable_file_logging=settings.ENABLE_FILE_LOGGING,
    enable_console_logging=settings.ENABLE_CONSOLE_LOGGING
)

# 创建应用实例
app = create_application()
