"""
中间件模块 - 请求追踪与全局错误处理
统一的错误响应格式: {"error": ...}
"""
import time
from typing import Callable
from uuid import uuid4

from fastapi import HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from mindradix.core.config import get_settings
from mindradix.core.errors import BaseApplicationError
from mindradix.core.logging import LogEvent, create_request_logger, get_logger

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """为每个请求生成请求ID并记录处理耗时"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid4())
        request.state.request_id = request_id
        request_logger = create_request_logger(request_id)

        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        request_logger.info(
            LogEvent.REQUEST_COMPLETED,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration=round(process_time, 4),
        )
        return response


async def error_handler(request: Request, exc: Exception) -> JSONResponse:
    """全局错误处理"""
    if isinstance(exc, BaseApplicationError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.to_dict()}
        )
    if isinstance(exc, HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail}
        )

    logger.error(
        LogEvent.REQUEST_FAILED,
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    error_detail = str(exc) if get_settings().is_development else "Internal server error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": error_detail}
    )
