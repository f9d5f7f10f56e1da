"""
服务工厂 - 统一的服务创建和管理
"""
from typing import TYPE_CHECKING, Optional

# 避免循环导入，使用TYPE_CHECKING
if TYPE_CHECKING:
    from mindradix.services.content_auditor import ContentAuditor
    from mindradix.services.health_service import HealthService
    from mindradix.services.plagiarism_service import PlagiarismService
    from mindradix.services.similarity_orchestrator import SimilarityOrchestrator
    from mindradix.services.web_fetcher import WebCorroborationFetcher
    from mindradix.services.web_similarity import WebSimilarityChecker
    from mindradix.tools.readers import TextExtractor


class ServiceFactory:
    """
    服务工厂 - 提供统一的服务访问接口

    每次调用都创建新的编排实例，除配置与抽取器外不跨请求共享状态
    """

    @staticmethod
    def get_text_extractor() -> 'TextExtractor':
        """获取文本抽取器"""
        from mindradix.tools.readers import get_text_extractor
        return get_text_extractor()

    @staticmethod
    def get_content_auditor() -> 'ContentAuditor':
        """获取启发式内容审计器"""
        from mindradix.services.content_auditor import ContentAuditor
        return ContentAuditor()

    @staticmethod
    def get_web_fetcher() -> 'WebCorroborationFetcher':
        """获取网页佐证抓取器（调用方负责 aclose）"""
        from mindradix.services.web_fetcher import WebCorroborationFetcher
        return WebCorroborationFetcher()

    @staticmethod
    def get_similarity_orchestrator(
        fetcher: Optional['WebCorroborationFetcher'] = None,
    ) -> 'SimilarityOrchestrator':
        """获取相似度编排服务"""
        from mindradix.services.similarity_orchestrator import SimilarityOrchestrator
        return SimilarityOrchestrator(extractor=ServiceFactory.get_text_extractor(), fetcher=fetcher)

    @staticmethod
    def get_web_similarity_checker(fetcher: 'WebCorroborationFetcher') -> 'WebSimilarityChecker':
        """获取实时网络相似度检测"""
        from mindradix.services.web_similarity import WebSimilarityChecker
        return WebSimilarityChecker(fetcher)

    @staticmethod
    def get_plagiarism_service(
        fetcher: Optional['WebCorroborationFetcher'] = None,
    ) -> 'PlagiarismService':
        """获取抄袭检查服务；提供 fetcher 时启用实时网络比对"""
        from mindradix.services.plagiarism_service import PlagiarismService
        web_backend = ServiceFactory.get_web_similarity_checker(fetcher) if fetcher is not None else None
        return PlagiarismService(
            extractor=ServiceFactory.get_text_extractor(),
            auditor=ServiceFactory.get_content_auditor(),
            web_backend=web_backend,
        )

    @staticmethod
    def get_health_service() -> 'HealthService':
        """获取健康检查服务"""
        from mindradix.services.health_service import HealthService
        return HealthService(extractor=ServiceFactory.get_text_extractor())
