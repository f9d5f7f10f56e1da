"""
健康检查服务 - 应用健康状态和就绪状态检查
"""
from datetime import datetime
from typing import Any, Dict, Optional

from mindradix.core.config import Settings
from mindradix.services.base_service import BaseService, singleton
from mindradix.tools.readers import TextExtractor, get_text_extractor


@singleton
class HealthService(BaseService):
    """健康检查服务 - 监控系统状态"""

    def __init__(self, settings: Optional[Settings] = None, extractor: Optional[TextExtractor] = None):
        super().__init__(settings)
        self.start_time = datetime.now()
        self.extractor = extractor or get_text_extractor()

    async def check_health(self) -> Dict[str, Any]:
        """基础健康检查 - 应用是否运行"""
        uptime = (datetime.now() - self.start_time).total_seconds()
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "uptime_seconds": uptime,
            "version": self.settings.version,
            "environment": self.settings.environment,
        }

    async def check_readiness(self) -> Dict[str, Any]:
        """
        就绪检查

        TF-IDF 与文本抽取都在进程内完成，始终就绪；
        PDF 后端和网页搜索只作为可选能力报告
        """
        checks = {
            "api": True,
            "tokenizer": self._check_tokenizer(),
            "pdf_backend": self.extractor.capabilities.parse_pdf is not None,
            "web_search": bool(self.settings.serpapi_api_key),
        }
        ready = checks["api"] and checks["tokenizer"]
        result: Dict[str, Any] = {
            "ready": ready,
            "checks": checks,
            "timestamp": datetime.now().isoformat(),
        }
        if not ready:
            result["reason"] = "stop word list unavailable"
        return result

    def _check_tokenizer(self) -> bool:
        try:
            from spacy.lang.en.stop_words import STOP_WORDS
        except ImportError as e:
            self.logger.error("Tokenizer check failed", error=str(e))
            return False
        return bool(STOP_WORDS)
