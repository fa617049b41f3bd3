"""
日志工具类
提供便捷的日志记录方法
"""

import logging
import time
from typing import Any, Optional
from contextlib import contextmanager

from game_advisor.logging_config import get_logger


@contextmanager
def log_performance(operation_name: str, logger: Optional[logging.Logger] = None, **extra_fields):
    """
    性能日志上下文管理器

    Usage:
        with log_performance("legacy_status_migration", path=str(path)):
            # 执行操作
            ...
    """
    if logger is None:
        logger = get_logger(__name__)

    start_time = time.time()
    logger.debug(f"Starting {operation_name}", extra=extra_fields)

    try:
        yield
    except Exception as e:
        duration = (time.time() - start_time) * 1000
        logger.error(
            f"{operation_name} failed after {duration:.2f}ms: {str(e)}",
            exc_info=True,
            extra={**extra_fields, 'duration_ms': duration}
        )
        raise
    else:
        duration = (time.time() - start_time) * 1000
        logger.info(
            f"{operation_name} completed in {duration:.2f}ms",
            extra={**extra_fields, 'duration_ms': duration}
        )


def log_request(
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    steam_id: Optional[str] = None,
    ip: Optional[str] = None,
    request_id: Optional[str] = None,
    **kwargs
):
    """
    记录HTTP请求日志

    Args:
        method: HTTP方法
        path: 请求路径
        status_code: 响应状态码
        duration_ms: 请求耗时（毫秒）
        steam_id: Steam 用户ID
        ip: 客户端IP
        request_id: 请求ID
        **kwargs: 其他字段
    """
    logger = get_logger('game_advisor.api.request')

    extra = {
        'method': method,
        'path': path,
        'status_code': status_code,
        'duration_ms': duration_ms,
        **kwargs
    }

    if steam_id:
        extra['steam_id'] = steam_id
    if ip:
        extra['ip'] = ip
    if request_id:
        extra['request_id'] = request_id

    if status_code >= 500:
        logger.error(f"{method} {path} - {status_code} - {duration_ms:.2f}ms", extra=extra)
    elif status_code >= 400:
        logger.warning(f"{method} {path} - {status_code} - {duration_ms:.2f}ms", extra=extra)
    else:
        logger.info(f"{method} {path} - {status_code} - {duration_ms:.2f}ms", extra=extra)


def log_slow_request(
    method: str,
    path: str,
    duration_ms: float,
    threshold: float = 1000.0,
    **kwargs
):
    """
    记录慢请求日志

    Args:
        method: HTTP方法
        path: 请求路径
        duration_ms: 请求耗时（毫秒）
        threshold: 慢请求阈值（毫秒）
        **kwargs: 其他字段
    """
    if duration_ms > threshold:
        logger = get_logger('game_advisor.api.slow_request')
        logger.warning(
            f"Slow request: {method} {path} took {duration_ms:.2f}ms (threshold: {threshold}ms)",
            extra={'method': method, 'path': path, 'duration_ms': duration_ms, **kwargs}
        )


def log_cache_operation(
    operation: str,
    table: str,
    key: Any,
    hit: Optional[bool] = None,
    **kwargs
):
    """
    记录缓存操作日志

    Args:
        operation: 操作类型（GET, SET, DELETE等）
        table: 缓存表名
        key: 缓存键
        hit: 是否命中（仅GET操作）
        **kwargs: 其他字段
    """
    logger = get_logger('game_advisor.cache.operation')

    extra = {
        'operation': operation,
        'table': table,
        **kwargs
    }

    if hit is not None:
        extra['hit'] = hit

    if operation == 'GET' and hit is not None:
        status = "HIT" if hit else "MISS"
        logger.debug(f"Cache {operation} {table}:{key} - {status}", extra=extra)
    else:
        logger.debug(f"Cache {operation} {table}:{key}", extra=extra)
