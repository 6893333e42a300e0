"""
HTTP传输层
封装 httpx.AsyncClient：附加认证信息、重试网络错误与5xx、统一错误转换
"""

import asyncio
from typing import Any, Dict, Optional, Tuple

import httpx

from revegen.core.auth import AuthCredentials
from revegen.core.config import Settings
from revegen.core.exceptions import AuthenticationError, UnexpectedResponseError
from revegen.core.http.error_handler import handle_http_error
from revegen.core.log_messages import log_messages
from revegen.core.log_utils import get_logger

logger = get_logger(__name__)


def build_default_headers(settings: Settings) -> Dict[str, str]:
    """构建浏览器风格的默认请求头"""
    origin = settings.origin
    return {
        "content-type": "application/json",
        "accept": "*/*",
        "accept-language": "en-US,en;q=0.5",
        "origin": origin,
        "referer": f"{origin}/app",
        "dnt": "1",
        "sec-fetch-dest": "empty",
        "sec-fetch-mode": "cors",
        "sec-fetch-site": "same-origin",
        "sec-gpc": "1",
        "user-agent": "Mozilla/5.0 (X11; Linux x86_64; rv:136.0) Gecko/20100101 Firefox/136.0",
    }


class ReveTransport:
    """
    共享的请求传输对象

    所有并发任务共用同一个实例；除缓存令牌外不修改任何共享状态。
    """

    def __init__(
        self,
        settings: Settings,
        credentials: AuthCredentials,
        http_transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = settings
        self.credentials = credentials
        self.verbose = settings.verbose
        self.max_retries = settings.max_retries
        self.retry_delay_base = settings.retry_delay_base

        headers = build_default_headers(settings)
        headers.update(settings.custom_headers)

        self._client = httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.timeout,
            headers=headers,
            transport=http_transport,
        )

    async def __aenter__(self) -> "ReveTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """关闭底层连接池"""
        await self._client.aclose()

    def _auth_headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "authorization": self.credentials.authorization,
            "cookie": self.credentials.cookie,
        }
        headers.update(self.settings.custom_headers)
        if extra:
            headers.update(extra)
        return headers

    def _log_request(self, method: str, path: str, headers: Dict[str, str], body: Any) -> None:
        sanitized = dict(headers)
        for key in ("authorization", "cookie"):
            if key in sanitized:
                sanitized[key] = AuthCredentials.mask(sanitized[key])
        logger.info(
            log_messages.REQUEST_SENT,
            method=method,
            url=path,
            headers=sanitized,
            body=body
        )

    def _log_response(self, response: httpx.Response) -> None:
        content_type = response.headers.get("content-type", "")
        body = response.text if "json" in content_type else f"<{len(response.content)} bytes>"
        logger.info(
            log_messages.RESPONSE_RECEIVED,
            status_code=response.status_code,
            url=str(response.request.url),
            body=body
        )

    def _retry_delay(self, attempt: int) -> float:
        """指数退避延迟"""
        return self.retry_delay_base * (2 ** attempt)

    async def request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        """
        发送请求

        网络错误和5xx响应按指数退避重试；超时不重试直接抛出。

        Args:
            method: HTTP方法
            path: 相对于 base_url 的路径
            operation: 操作描述，用于错误消息
            json: 请求体
            headers: 额外请求头

        Returns:
            httpx.Response: 状态码小于400的响应

        Raises:
            ReveError: 所有失败均转换为 ReveError
        """
        self.credentials.ensure_valid()
        token = self.credentials.token
        request_headers = self._auth_headers(headers)

        if self.verbose:
            self._log_request(method, path, request_headers, json)

        attempt = 0
        while True:
            try:
                response = await self._client.request(method, path, json=json, headers=request_headers)
            except httpx.TimeoutException as e:
                raise handle_http_error(e, operation, self.verbose) from e
            except httpx.TransportError as e:
                if attempt >= self.max_retries:
                    raise handle_http_error(e, operation, self.verbose) from e
                logger.warning(
                    log_messages.REQUEST_RETRY,
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    error=str(e)
                )
                await asyncio.sleep(self._retry_delay(attempt))
                attempt += 1
                continue
            except httpx.HTTPError as e:
                raise handle_http_error(e, operation, self.verbose) from e

            if response.status_code >= 500 and attempt < self.max_retries:
                logger.warning(
                    log_messages.REQUEST_RETRY,
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    status_code=response.status_code
                )
                await asyncio.sleep(self._retry_delay(attempt))
                attempt += 1
                continue
            break

        if self.verbose:
            self._log_response(response)

        if response.status_code == 401 and token:
            self.credentials.invalidate(token)
            raise AuthenticationError("Authentication token expired", status_code=401)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise handle_http_error(e, operation, self.verbose) from e

        return response

    @staticmethod
    def _parse_json(response: httpx.Response, operation: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise UnexpectedResponseError(
                f"Invalid JSON response during {operation}",
                payload=response.text
            ) from e

    async def get_json(self, path: str, *, operation: str) -> Any:
        response = await self.request("GET", path, operation=operation)
        return self._parse_json(response, operation)

    async def post_json(self, path: str, payload: Any, *, operation: str) -> Any:
        response = await self.request("POST", path, operation=operation, json=payload)
        return self._parse_json(response, operation)

    async def get_binary(
        self,
        path: str,
        *,
        operation: str,
        accept: str = "*/*"
    ) -> Tuple[bytes, Optional[str]]:
        """
        获取二进制内容

        Returns:
            Tuple[bytes, Optional[str]]: (内容, 响应声明的Content-Type)
        """
        response = await self.request("GET", path, operation=operation, headers={"accept": accept})
        return response.content, response.headers.get("content-type")
