"""
结构化日志配置模块 - 使用structlog实现JSON格式日志
日志即文档：每个事件都带上文件名、URL或文档数量等上下文
"""
import logging
import sys
from typing import Any

import structlog
from structlog.types import FilteringBoundLogger, Processor


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    配置结构化日志系统

    Args:
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: 是否输出JSON格式日志
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Processor] = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.format_exc_info,
    ]

    if json_logs:
        # 生产环境：JSON格式
        processors.append(structlog.processors.JSONRenderer())
    else:
        # 开发环境：彩色控制台输出
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )


def get_logger(name: str, **initial_context: Any) -> FilteringBoundLogger:
    """
    获取结构化日志记录器

    Args:
        name: 日志记录器名称（通常使用模块名）
        **initial_context: 初始上下文数据
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


class LogEvent:
    """标准化的日志事件类型"""

    # 应用生命周期
    APP_STARTED = "app_started"
    APP_STOPPED = "app_stopped"

    # API请求
    REQUEST_COMPLETED = "request_completed"
    REQUEST_FAILED = "request_failed"

    # 文本抽取
    EXTRACTION_FAILED = "extraction_failed"
    PDF_PARSER_UNAVAILABLE = "pdf_parser_unavailable"

    # 外部服务
    WEB_SEARCH = "web_search"
    WEB_SEARCH_FAILED = "web_search_failed"
    WEB_SCRAPE_FAILED = "web_scrape_failed"
    WEB_PASS_TIMEOUT = "web_pass_timeout"

    # 业务逻辑
    SIMILARITY_STARTED = "similarity_started"
    SIMILARITY_COMPLETED = "similarity_completed"
    PLAGIARISM_COMPLETED = "plagiarism_completed"


def create_request_logger(request_id: str) -> FilteringBoundLogger:
    """创建绑定了请求ID的日志记录器"""
    return get_logger("request", request_id=request_id)
