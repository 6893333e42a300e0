"""
客户端异常定义
定义图片生成客户端中使用的所有异常类型
"""

from enum import Enum
from typing import Any, Dict, Optional


class ReveErrorType(str, Enum):
    """错误类型"""
    AUTHENTICATION_ERROR = "authentication_error"
    API_ERROR = "api_error"
    REQUEST_ERROR = "request_error"
    TIMEOUT_ERROR = "timeout_error"
    GENERATION_ERROR = "generation_error"
    POLLING_ERROR = "polling_error"
    UNEXPECTED_RESPONSE = "unexpected_response"
    UNKNOWN_ERROR = "unknown_error"


class ReveError(Exception):
    """
    客户端基础异常

    所有对外抛出的异常都是该类或其子类。

    Attributes:
        message: 错误消息
        error_type: 错误类型
        status_code: HTTP状态码（如有）
        details: 错误详情
    """

    def __init__(
        self,
        message: str,
        error_type: ReveErrorType = ReveErrorType.UNKNOWN_ERROR,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(type={self.error_type.value!r}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )


class AuthenticationError(ReveError):
    """认证错误（401/403 或令牌过期）"""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, ReveErrorType.AUTHENTICATION_ERROR, status_code, details)


class ApiError(ReveError):
    """服务端返回的其他4xx/5xx错误"""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, ReveErrorType.API_ERROR, status_code, details)


class RequestError(ReveError):
    """网络请求错误"""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, ReveErrorType.REQUEST_ERROR, status_code, details)


class TransportTimeoutError(ReveError):
    """传输层请求超时"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, ReveErrorType.TIMEOUT_ERROR, details=details)


class GenerationError(ReveError):
    """服务端报告的生成失败"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, ReveErrorType.GENERATION_ERROR, details=details)


class ParameterValidationError(GenerationError):
    """调用参数超出允许范围（在任何网络请求之前抛出）"""


class PollingError(ReveError):
    """轮询次数耗尽仍未到达终止状态"""

    def __init__(self, message: str, attempts: int, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, ReveErrorType.POLLING_ERROR, details=details)
        self.attempts = attempts


class UnexpectedResponseError(ReveError):
    """响应结构不符合任何已知格式"""

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message, ReveErrorType.UNEXPECTED_RESPONSE, details={"payload": payload})
        self.payload = payload


__all__ = [
    'ReveErrorType',
    'ReveError',
    'AuthenticationError',
    'ApiError',
    'RequestError',
    'TransportTimeoutError',
    'GenerationError',
    'ParameterValidationError',
    'PollingError',
    'UnexpectedResponseError',
]
