"""
客户端配置管理模块
统一管理认证、服务地址、轮询与重试等配置信息
"""

from typing import Dict, Optional

from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings

from revegen.utils.config_utils import get_config_path, parse_json_config


class Settings(BaseSettings):
    """客户端配置类 - 环境变量前缀为 REVE_"""

    # ==================== 认证配置 ====================
    authorization: str = ""
    cookie: str = ""
    project_id: Optional[str] = None

    # ==================== 服务配置 ====================
    base_url: str = "https://preview.reve.art"
    api_prefix: str = "/api"
    timeout: float = 30.0  # 秒

    # ==================== 轮询配置 ====================
    max_polling_attempts: int = 60
    polling_interval: float = 2.0  # 秒

    # ==================== 重试配置 ====================
    max_retries: int = 3
    retry_delay_base: float = 0.5

    # ==================== 请求配置 ====================
    verbose: bool = False
    custom_headers: Dict[str, str] = {}

    # ==================== 模型配置 ====================
    default_model: str = "text2image_v1/prod/20250325-2246"
    enhancer_model_id: str = "promptenhancer_v1/prod/20250224-0952"
    default_mime_type: str = "image/webp"

    # ==================== 图片生成默认值 ====================
    image_default_width: int = 1024
    image_default_height: int = 1024

    # ==================== 日志配置 ====================
    debug: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # ==================== 验证器 ====================
    @field_validator("custom_headers", mode="before")
    @classmethod
    def parse_custom_headers(cls, value):
        """支持以JSON字符串形式配置自定义请求头"""
        if isinstance(value, str):
            return parse_json_config(value) or {}
        return value

    @field_validator("max_polling_attempts")
    @classmethod
    def check_polling_attempts(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_polling_attempts must be at least 1")
        return value

    # ==================== 计算属性 ====================
    @property
    def origin(self) -> str:
        """服务来源地址（用于origin/referer请求头）"""
        return self.base_url.rstrip("/")

    def api_path(self, path: str) -> str:
        """拼接带前缀的接口路径"""
        return f"{self.api_prefix.rstrip('/')}/{path.lstrip('/')}"

    model_config = ConfigDict(
        env_prefix="REVE_",
        env_file=get_config_path(".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True
    )


def get_settings(**overrides) -> Settings:
    """获取配置实例，显式参数优先于环境变量"""
    return Settings(**overrides)


# 全局配置实例
settings = get_settings()
