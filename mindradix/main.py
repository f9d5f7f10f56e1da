from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from mindradix.api.v1 import health, similarity
from mindradix.core.config import get_settings
from mindradix.core.errors import BaseApplicationError
from mindradix.core.logging import LogEvent, configure_logging, get_logger
from mindradix.core.middleware import RequestContextMiddleware, error_handler

settings = get_settings()
configure_logging(settings.log_level, settings.json_logs)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info(
        LogEvent.APP_STARTED,
        version=settings.version,
        environment=settings.environment,
        api_prefix=settings.api_v1_prefix,
        web_search=bool(settings.serpapi_api_key),
    )
    try:
        yield
    finally:
        logger.info(LogEvent.APP_STOPPED)


app = FastAPI(
    title=settings.project_name,
    version=settings.version,
    openapi_url=f"{settings.api_v1_prefix}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# 中间件配置 - 安全的 CORS 设置
origins = settings.get_cors_origins()
# 浏览器规范：当 allow_origins 为 "*" 时，不能允许 credentials
allow_credentials = settings.cors_allow_credentials and origins != ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestContextMiddleware)

# 错误处理
app.add_exception_handler(BaseApplicationError, error_handler)
app.add_exception_handler(Exception, error_handler)

# 路由注册
app.include_router(
    health.router,
    prefix=f"{settings.api_v1_prefix}/health",
    tags=["health"]
)
app.include_router(similarity.router, prefix=settings.api_v1_prefix)

# Prometheus监控
Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    """根路径"""
    return {
        "name": settings.project_name,
        "version": settings.version,
        "docs": "/docs",
        "api_prefix": settings.api_v1_prefix,
    }


@app.get(f"{settings.api_v1_prefix}")
async def api_root():
    """API根路径"""
    return {
        "version": "v1",
        "endpoints": {
            "health": f"{settings.api_v1_prefix}/health",
            "similarity": f"{settings.api_v1_prefix}/similarity",
            "plagiarism": f"{settings.api_v1_prefix}/plagiarism",
            "audit": f"{settings.api_v1_prefix}/audit",
        }
    }


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(
        "mindradix.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
