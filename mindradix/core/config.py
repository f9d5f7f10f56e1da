"""
配置管理 - 使用Pydantic Settings实现环境变量管理
所有阈值与资源上限集中在此处，便于调优
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用配置类 - 所有配置项通过环境变量管理"""

    # API配置
    api_v1_prefix: str = Field(default="/api/v1", description="API路由前缀")
    project_name: str = Field(default="MindRadix Similarity Service", description="项目名称")
    version: str = Field(default="1.0.0", description="版本号")
    environment: str = Field(default="development", description="运行环境")

    # 日志配置
    log_level: str = Field(default="INFO", description="日志级别")
    json_logs: bool = Field(default=False, description="是否输出JSON格式日志")

    # Web 搜索 (SerpAPI)
    serpapi_api_key: Optional[str] = Field(default=None, description="SerpAPI key; web search is disabled without it")
    serpapi_url: str = Field(default="https://serpapi.com/search", description="SerpAPI endpoint")
    search_result_limit: int = Field(default=5, description="每次搜索返回的最大URL数")
    search_timeout: float = Field(default=10.0, description="搜索请求超时时间(秒)")
    search_retry_attempts: int = Field(default=2, description="搜索请求重试次数")
    search_excluded_domains: str = Field(
        default="youtube.com,youtu.be,vimeo.com,dailymotion.com,tiktok.com",
        description="搜索结果中排除的视频站点，逗号分隔",
    )

    # 网页抓取
    scrape_timeout: float = Field(default=5.0, description="单个网页抓取超时(秒)")
    scrape_max_chars: int = Field(default=10_000, description="单个网页保留的最大字符数")
    min_web_document_chars: int = Field(default=100, description="网页文本少于该长度视为噪声")
    web_pass_timeout: float = Field(default=20.0, description="一次网页佐证流程的软超时(秒)")
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; MindRadixBot/1.0)",
        description="抓取网页时使用的 User-Agent",
    )

    # TF-IDF 与结果裁剪
    max_document_chars: int = Field(default=200_000, description="单文档文本上限")
    terms_per_document: int = Field(default=800, description="每个文档参与词表的top词数")
    default_threshold: float = Field(default=0.6, description="默认相似度阈值")
    default_top_n: int = Field(default=20, description="默认返回的相似对数量")
    max_top_n: int = Field(default=200, description="返回相似对数量上限")
    excerpt_chars: int = Field(default=200, description="报告中文档摘录长度")

    # 上传限制
    max_upload_bytes: int = Field(default=20 * 1024 * 1024, description="单个上传文件大小上限")

    # CORS 配置
    cors_allow_origins: str = Field(default="http://localhost:3000", description="允许的跨域来源，逗号分隔")
    cors_allow_credentials: bool = Field(default=False, description="是否允许携带凭据")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # 忽略未定义的环境变量
    )

    @property
    def is_development(self) -> bool:
        """是否为开发环境"""
        return self.environment.lower() == "development"

    def get_excluded_domains(self) -> list[str]:
        """返回搜索时需要排除的域名列表"""
        return [d.strip().lower() for d in self.search_excluded_domains.split(",") if d.strip()]

    def get_cors_origins(self) -> list[str]:
        """返回允许的 CORS 来源列表"""
        raw = (self.cors_allow_origins or "").strip()
        if not raw:
            return ["*"]
        return [o.strip() for o in raw.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """
    获取配置单例
    使用lru_cache确保全局只有一个Settings实例
    """
    return Settings()
