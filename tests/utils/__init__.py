"""
测试工具包
提供模拟服务与通用的测试辅助函数
"""

from .fake_service import PROJECT_ID, FakeJob, FakeReveService
from .settings_utils import make_settings, make_token

__all__ = [
    'PROJECT_ID',
    'FakeJob',
    'FakeReveService',
    'make_settings',
    'make_token',
]
