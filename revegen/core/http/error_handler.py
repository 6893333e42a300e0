"""
HTTP错误转换
将httpx及其他异常统一转换为 ReveError
"""

import json
from typing import Any, Optional

import httpx

from revegen.core.exceptions import (
    ApiError,
    AuthenticationError,
    RequestError,
    ReveError,
    ReveErrorType,
    TransportTimeoutError,
)


def _response_payload(response: Optional[httpx.Response]) -> Any:
    """读取响应内容，优先解析为JSON"""
    if response is None:
        return None
    try:
        return response.json()
    except (ValueError, httpx.ResponseNotRead):
        try:
            return response.text
        except httpx.ResponseNotRead:
            return None


def _service_message(payload: Any, fallback: str) -> str:
    """提取服务端返回的错误消息"""
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return fallback


def _request_details(error: httpx.HTTPError, payload: Any) -> str:
    """构建详细模式下的请求/响应描述"""
    lines = ["", "Request details:"]
    try:
        request = error.request
    except RuntimeError:
        request = None
    if request is not None:
        lines.append(f"- URL: {request.method} {request.url}")
        if request.content:
            try:
                body = json.dumps(json.loads(request.content), indent=2, ensure_ascii=False)
            except ValueError:
                body = "[Could not parse]"
            lines.append(f"- Request data: {body}")
    response = getattr(error, "response", None)
    if response is not None:
        lines.append(f"- Status: {response.status_code}")
    if payload is not None:
        rendered = payload if isinstance(payload, str) else json.dumps(payload, indent=2, ensure_ascii=False)
        lines.append(f"- Response: {rendered}")
    return "\n".join(lines)


def handle_http_error(error: Exception, operation: str, verbose: bool = False) -> ReveError:
    """
    将异常转换为 ReveError

    Args:
        error: 原始异常
        operation: 失败的操作描述，如 "polling generation status"
        verbose: 是否附加请求与响应详情

    Returns:
        ReveError: 转换后的异常
    """
    if isinstance(error, ReveError):
        return error

    if not isinstance(error, httpx.HTTPError):
        return ReveError(f"Error during {operation}: {error}", ReveErrorType.UNKNOWN_ERROR)

    response = error.response if isinstance(error, httpx.HTTPStatusError) else None
    status_code = response.status_code if response is not None else None
    payload = _response_payload(response)
    details = _request_details(error, payload) if verbose else ""

    if status_code in (401, 403):
        message = f"Authentication error: {_service_message(payload, str(error))}"
        return AuthenticationError(message + details, status_code=status_code)

    if isinstance(error, httpx.TimeoutException):
        return TransportTimeoutError(f"Request timed out during {operation}" + details)

    if isinstance(error, httpx.NetworkError):
        return RequestError(f"Network error during {operation}: {error}" + details)

    if status_code is not None and status_code >= 400:
        message = f"API error during {operation}: {_service_message(payload, str(error))}"
        return ApiError(message + details, status_code=status_code, details={"response": payload})

    return RequestError(f"Request error during {operation}: {error}" + details, status_code=status_code)
