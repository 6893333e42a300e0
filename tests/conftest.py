"""
测试配置和fixtures
为所有测试提供共享的配置和fixtures

所有测试均为单元测试：网络请求通过 httpx.MockTransport 在内存中完成，
轮询间隔与重试延迟设为0，保证快速执行。
"""

import pytest

from revegen.client import ReveImageClient
from revegen.core.auth import AuthCredentials
from revegen.core.config import Settings
from revegen.core.http.transport import ReveTransport
from revegen.services.generation.project_resolver import ProjectResolver
from tests.utils.fake_service import PROJECT_ID, FakeReveService
from tests.utils.settings_utils import make_settings


@pytest.fixture
def test_settings() -> Settings:
    """测试配置fixture"""
    return make_settings()


@pytest.fixture
def fake_service() -> FakeReveService:
    """模拟服务fixture"""
    return FakeReveService()


@pytest.fixture
def credentials(test_settings) -> AuthCredentials:
    return AuthCredentials(test_settings.authorization, test_settings.cookie)


@pytest.fixture
def transport(test_settings, credentials, fake_service) -> ReveTransport:
    """连接到模拟服务的传输层"""
    return ReveTransport(test_settings, credentials, http_transport=fake_service.transport)


@pytest.fixture
def project_resolver(transport) -> ProjectResolver:
    return ProjectResolver(transport, PROJECT_ID)


@pytest.fixture
def client(test_settings, fake_service) -> ReveImageClient:
    """连接到模拟服务的客户端"""
    return ReveImageClient(test_settings, http_transport=fake_service.transport)


# 测试标记配置
def pytest_configure(config):
    """配置pytest标记"""
    config.addinivalue_line("markers", "unit: 单元测试")
    config.addinivalue_line("markers", "logging: 日志相关测试")
    config.addinivalue_line("markers", "auth: 认证相关测试")
    config.addinivalue_line("markers", "transport: 传输层相关测试")
    config.addinivalue_line("markers", "generation: 图片生成相关测试")
    config.addinivalue_line("markers", "validation: 参数验证相关测试")
    config.addinivalue_line("markers", "images: 图片数据相关测试")
