from typing import AsyncIterator

from fastapi import Depends

from mindradix.services import ServiceFactory
from mindradix.services.content_auditor import ContentAuditor
from mindradix.services.health_service import HealthService
from mindradix.services.plagiarism_service import PlagiarismService
from mindradix.services.similarity_orchestrator import SimilarityOrchestrator
from mindradix.services.web_fetcher import WebCorroborationFetcher


async def get_web_fetcher() -> AsyncIterator[WebCorroborationFetcher]:
    """每个请求一个抓取器，请求结束时关闭 HTTP 连接池"""
    fetcher = ServiceFactory.get_web_fetcher()
    try:
        yield fetcher
    finally:
        await fetcher.aclose()


def get_similarity_orchestrator(
    fetcher: WebCorroborationFetcher = Depends(get_web_fetcher),
) -> SimilarityOrchestrator:
    """组装相似度编排服务"""
    return ServiceFactory.get_similarity_orchestrator(fetcher=fetcher)


def get_plagiarism_service(
    fetcher: WebCorroborationFetcher = Depends(get_web_fetcher),
) -> PlagiarismService:
    """组装抄袭检查服务"""
    return ServiceFactory.get_plagiarism_service(fetcher=fetcher)


def get_content_auditor() -> ContentAuditor:
    """获取启发式内容审计器"""
    return ServiceFactory.get_content_auditor()


def get_health_service() -> HealthService:
    """获取健康检查服务单例"""
    return ServiceFactory.get_health_service()
