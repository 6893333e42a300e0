"""
revegen - 异步图片生成客户端

将"根据提示词生成N张图片"的请求编排为提交、增强、轮询、下载与结果汇总的异步流程。
"""

from revegen.client import ReveImageClient
from revegen.core.config import Settings, get_settings
from revegen.core.exceptions import (
    ApiError,
    AuthenticationError,
    GenerationError,
    ParameterValidationError,
    PollingError,
    RequestError,
    ReveError,
    ReveErrorType,
    TransportTimeoutError,
    UnexpectedResponseError,
)
from revegen.schemas.generation import BatchResult, GenerationRequest, SeedSpec

__version__ = "1.0.0"

__all__ = [
    "ReveImageClient",
    "Settings",
    "get_settings",
    "BatchResult",
    "GenerationRequest",
    "SeedSpec",
    "ReveError",
    "ReveErrorType",
    "AuthenticationError",
    "ApiError",
    "RequestError",
    "TransportTimeoutError",
    "GenerationError",
    "ParameterValidationError",
    "PollingError",
    "UnexpectedResponseError",
]
