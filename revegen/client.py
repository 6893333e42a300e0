"""
图片生成客户端
组装配置、凭据、传输层与各生成组件，对外提供统一的生成接口
"""

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from revegen.core.auth import AuthCredentials
from revegen.core.config import Settings, get_settings
from revegen.core.exceptions import ParameterValidationError
from revegen.core.http.transport import ReveTransport
from revegen.core.log_utils import get_logger
from revegen.schemas.generation import BatchResult, GenerationRequest
from revegen.services.generation.batch_orchestrator import BatchOrchestrator
from revegen.services.generation.job_submitter import JobSubmitter
from revegen.services.generation.project_resolver import ProjectResolver
from revegen.services.generation.prompt_enhancer import PromptEnhancer
from revegen.services.generation.seed_deriver import SeedDeriver
from revegen.services.generation.status_poller import StatusPoller

logger = get_logger(__name__)


class ReveImageClient:
    """
    图片生成客户端

    每个实例持有独立的连接池与缓存令牌，可作为异步上下文管理器使用：

        async with ReveImageClient(authorization="Bearer ...", cookie="...") as client:
            result = await client.generate_image("a cat", batch_size=2)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
        seed_deriver: Optional[SeedDeriver] = None,
        **overrides: Any
    ):
        if settings is None:
            settings = get_settings(**overrides)
        elif overrides:
            settings = settings.model_copy(update=overrides)
        self.settings = settings

        self.credentials = AuthCredentials(settings.authorization, settings.cookie)
        self.transport = ReveTransport(settings, self.credentials, http_transport=http_transport)

        self.project_resolver = ProjectResolver(self.transport, settings.project_id)
        self.enhancer = PromptEnhancer(self.transport, self.project_resolver, settings.enhancer_model_id)
        self.submitter = JobSubmitter(self.transport, self.project_resolver)
        self.poller = StatusPoller(
            self.transport,
            max_attempts=settings.max_polling_attempts,
            interval=settings.polling_interval,
            default_mime_type=settings.default_mime_type
        )
        self.orchestrator = BatchOrchestrator(
            settings,
            self.enhancer,
            self.submitter,
            self.poller,
            seed_deriver=seed_deriver
        )

        logger.debug("图片生成客户端已初始化", base_url=settings.base_url, user_id=self.credentials.user_id)

    async def __aenter__(self) -> "ReveImageClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def get_project_id(self) -> str:
        """获取当前使用的项目ID（未配置时自动发现）"""
        return await self.project_resolver.resolve()

    async def generate(self, request: GenerationRequest) -> BatchResult:
        """
        按请求模型生成图片

        Args:
            request: 生成请求

        Returns:
            BatchResult: 批量结果
        """
        return await self.orchestrator.generate(request)

    async def generate_image(self, prompt: str, **options: Any) -> BatchResult:
        """
        以关键字参数形式生成图片

        Args:
            prompt: 提示词
            **options: negative_prompt、width、height、batch_size、seed、model、enhance_prompt
                （也接受驼峰形式，如 batchSize）

        Returns:
            BatchResult: 批量结果

        Raises:
            ParameterValidationError: 参数类型不合法
        """
        options.setdefault("width", self.settings.image_default_width)
        options.setdefault("height", self.settings.image_default_height)
        try:
            request = GenerationRequest(prompt=prompt, **options)
        except ValidationError as e:
            raise ParameterValidationError(
                f"Invalid generation options: {e.errors()[0].get('msg', str(e))}",
                details={"errors": e.errors(include_url=False)}
            ) from e
        return await self.generate(request)
