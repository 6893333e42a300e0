"""
传输层与错误转换单元测试
"""

import httpx
import pytest

from revegen.core.auth import AuthCredentials
from revegen.core.exceptions import (
    ApiError,
    AuthenticationError,
    RequestError,
    ReveError,
    ReveErrorType,
    TransportTimeoutError,
    UnexpectedResponseError,
)
from revegen.core.http.error_handler import handle_http_error
from revegen.core.http.transport import ReveTransport, build_default_headers
from tests.utils.settings_utils import make_settings


def make_transport(handler, **overrides) -> ReveTransport:
    settings = make_settings(**overrides)
    credentials = AuthCredentials(settings.authorization, settings.cookie)
    return ReveTransport(settings, credentials, http_transport=httpx.MockTransport(handler))


def status_error(status_code: int, body=None) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://preview.reve.art/api/projects")
    response = httpx.Response(status_code, json=body if body is not None else {}, request=request)
    return httpx.HTTPStatusError("error", request=request, response=response)


@pytest.mark.unit
@pytest.mark.transport
class TestHandleHttpError:
    """测试异常转换"""

    def test_reve_error_passthrough(self):
        error = ApiError("already converted")
        assert handle_http_error(error, "op") is error

    @pytest.mark.parametrize("status_code", [401, 403])
    def test_authentication_status(self, status_code):
        result = handle_http_error(status_error(status_code, {"message": "denied"}), "op")

        assert isinstance(result, AuthenticationError)
        assert result.status_code == status_code
        assert str(result) == "Authentication error: denied"

    def test_api_error_uses_service_message(self):
        result = handle_http_error(status_error(422, {"message": "bad caption"}), "submitting generation")

        assert isinstance(result, ApiError)
        assert result.status_code == 422
        assert str(result) == "API error during submitting generation: bad caption"

    def test_timeout(self):
        request = httpx.Request("GET", "https://preview.reve.art/api/projects")
        result = handle_http_error(httpx.ReadTimeout("slow", request=request), "getting project ID")

        assert isinstance(result, TransportTimeoutError)
        assert result.error_type is ReveErrorType.TIMEOUT_ERROR
        assert str(result) == "Request timed out during getting project ID"

    def test_network_error(self):
        request = httpx.Request("GET", "https://preview.reve.art/api/projects")
        result = handle_http_error(httpx.ConnectError("refused", request=request), "op")

        assert isinstance(result, RequestError)
        assert str(result).startswith("Network error during op")

    def test_unknown_error(self):
        result = handle_http_error(ValueError("boom"), "op")

        assert type(result) is ReveError
        assert result.error_type is ReveErrorType.UNKNOWN_ERROR
        assert str(result) == "Error during op: boom"

    def test_verbose_details(self):
        result = handle_http_error(status_error(500, {"message": "oops"}), "op", verbose=True)

        assert "Request details:" in str(result)
        assert "- Status: 500" in str(result)


@pytest.mark.unit
@pytest.mark.transport
class TestReveTransport:
    """ReveTransport 单元测试类"""

    def test_default_headers(self):
        headers = build_default_headers(make_settings(base_url="https://example.com/"))

        assert headers["origin"] == "https://example.com"
        assert headers["referer"] == "https://example.com/app"

    @pytest.mark.asyncio
    async def test_attaches_credentials_and_custom_headers(self):
        """测试每个请求都附加认证信息与自定义请求头"""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        transport = make_transport(handler, custom_headers={"x-client": "tests"})
        assert await transport.get_json("/api/projects", operation="op") == {"ok": True}

        request = seen[0]
        assert request.headers["authorization"] == "Bearer test-token"
        assert request.headers["cookie"] == "session=test-cookie"
        assert request.headers["x-client"] == "tests"
        await transport.aclose()

    @pytest.mark.asyncio
    async def test_retries_server_errors(self):
        """测试5xx响应按次数重试"""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503, json={"message": "busy"})
            return httpx.Response(200, json=[])

        transport = make_transport(handler, max_retries=3)

        assert await transport.get_json("/api/projects", operation="op") == []
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_retries_exhausted(self):
        """测试重试耗尽后抛出API错误"""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(502, json={"message": "bad gateway"})

        transport = make_transport(handler, max_retries=2)

        with pytest.raises(ApiError) as exc_info:
            await transport.get_json("/api/projects", operation="op")

        assert exc_info.value.status_code == 502
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_retries_network_errors(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={"ok": True})

        transport = make_transport(handler, max_retries=1)

        assert await transport.get_json("/api/projects", operation="op") == {"ok": True}
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_timeout_not_retried(self):
        """测试超时不重试"""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ReadTimeout("slow", request=request)

        transport = make_transport(handler, max_retries=3)

        with pytest.raises(TransportTimeoutError):
            await transport.get_json("/api/projects", operation="op")
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_decoding_error_converted(self):
        """测试响应解码失败同样转换为 ReveError"""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.DecodingError("bad gzip", request=request)

        transport = make_transport(handler, max_retries=3)

        with pytest.raises(RequestError) as exc_info:
            await transport.get_json("/api/projects", operation="getting project ID")

        assert exc_info.value.error_type is ReveErrorType.REQUEST_ERROR
        assert "bad gzip" in str(exc_info.value)
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(400, json={"message": "bad request"})

        transport = make_transport(handler, max_retries=3)

        with pytest.raises(ApiError, match="bad request"):
            await transport.get_json("/api/projects", operation="op")
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_401_invalidates_token(self):
        """测试401清除缓存令牌，之后的请求直接失败"""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(401, json={"message": "expired"})

        transport = make_transport(handler)

        with pytest.raises(AuthenticationError, match="Authentication token expired"):
            await transport.get_json("/api/projects", operation="op")
        assert transport.credentials.token is None

        with pytest.raises(AuthenticationError):
            await transport.get_json("/api/projects", operation="op")
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>")

        transport = make_transport(handler)

        with pytest.raises(UnexpectedResponseError) as exc_info:
            await transport.post_json("/api/misc/model_infer_sync", {}, operation="enhancing prompt")
        assert exc_info.value.payload == "<html>"

    @pytest.mark.asyncio
    async def test_get_binary(self):
        """测试获取二进制内容并传递Accept头"""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"\x00\x01", headers={"content-type": "image/webp"})

        transport = make_transport(handler)
        content, content_type = await transport.get_binary(
            "/api/project/p/image/i/url", operation="op", accept="image/webp,*/*"
        )

        assert content == b"\x00\x01"
        assert content_type == "image/webp"
        assert seen[0].headers["accept"] == "image/webp,*/*"

    @pytest.mark.asyncio
    async def test_async_context_manager_closes_client(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={})

        async with make_transport(handler) as transport:
            await transport.get_json("/api/projects", operation="op")

        assert transport._client.is_closed
