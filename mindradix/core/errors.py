"""
错误处理模块 - 定义自定义异常类和错误处理逻辑
抽取与网络类错误在服务内部被降级为空结果，只有调用方校验错误会冒泡到HTTP层
"""
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import status


class ErrorCode(str, Enum):
    """错误代码枚举"""
    # 客户端错误
    INVALID_INPUT = "INVALID_INPUT"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

    # 服务端错误
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # 可恢复的流水线错误
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    WEB_FETCH_FAILED = "WEB_FETCH_FAILED"

    # 业务逻辑错误
    DETECTION_FAILED = "DETECTION_FAILED"


class BaseApplicationError(Exception):
    """应用基础异常类"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class InvalidInputError(BaseApplicationError):
    """输入验证错误"""
    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_INPUT,
            details=details,
            status_code=status.HTTP_400_BAD_REQUEST
        )


class PayloadTooLargeError(BaseApplicationError):
    """上传文件过大"""
    def __init__(self, filename: str, limit: int):
        super().__init__(
            message=f"File '{filename}' exceeds {limit} bytes",
            error_code=ErrorCode.PAYLOAD_TOO_LARGE,
            details={"filename": filename, "limit": limit},
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        )


class ExtractionError(BaseApplicationError):
    """文本抽取失败 - 作为 ExtractionResult.error 携带，不抛给调用方"""
    def __init__(self, message: str, filename: Optional[str] = None, fmt: Optional[str] = None):
        details = {}
        if filename:
            details["filename"] = filename
        if fmt:
            details["format"] = fmt

        super().__init__(
            message=f"Text extraction failed: {message}",
            error_code=ErrorCode.EXTRACTION_FAILED,
            details=details,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
        )


class WebFetchError(BaseApplicationError):
    """搜索或抓取失败 - 仅在抓取器内部使用"""
    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        details: Dict[str, Any] = {}
        if url:
            details["url"] = url
        if status_code is not None:
            details["http_status"] = status_code

        super().__init__(
            message=f"Web fetch failed: {message}",
            error_code=ErrorCode.WEB_FETCH_FAILED,
            details=details,
            status_code=status.HTTP_502_BAD_GATEWAY
        )


class DetectionError(BaseApplicationError):
    """检测失败错误"""
    def __init__(self, message: str, stage: Optional[str] = None):
        details = {}
        if stage:
            details["stage"] = stage

        super().__init__(
            message=f"Detection failed: {message}",
            error_code=ErrorCode.DETECTION_FAILED,
            details=details,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
