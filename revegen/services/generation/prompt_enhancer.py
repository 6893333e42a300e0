"""
提示词增强
调用同步推理接口获取提示词的多个改写变体，任何失败都回退为原始提示词
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence

from revegen.core.exceptions import ReveError
from revegen.core.http.transport import ReveTransport
from revegen.core.log_messages import log_messages
from revegen.core.log_utils import get_logger
from revegen.services.generation.project_resolver import ProjectResolver

logger = get_logger(__name__)


class EnhancementStatus(str, Enum):
    """增强结果状态"""
    ENHANCED = "enhanced"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class EnhancementResult:
    """
    提示词增强结果

    Attributes:
        status: ENHANCED 表示使用服务端返回的变体；FALLBACK 表示回退为原始提示词
        prompts: 有序的提示词列表，至少包含一个元素
        reason: 回退原因（仅 FALLBACK 时有值）
    """
    status: EnhancementStatus
    prompts: List[str]
    reason: Optional[str] = None

    @classmethod
    def enhanced(cls, prompts: Sequence[str]) -> "EnhancementResult":
        return cls(EnhancementStatus.ENHANCED, list(prompts))

    @classmethod
    def fallback(cls, prompt: str, reason: str) -> "EnhancementResult":
        return cls(EnhancementStatus.FALLBACK, [prompt], reason)

    @property
    def is_fallback(self) -> bool:
        return self.status is EnhancementStatus.FALLBACK


def extract_variants(payload: Any) -> Optional[List[str]]:
    """
    从推理响应中提取变体列表

    响应是一组进度快照，只有最后一个快照是权威结果；
    其状态必须为 success 且 outputs.expanded_prompts 为非空字符串列表。
    """
    if not isinstance(payload, list) or not payload:
        return None

    last = payload[-1]
    if not isinstance(last, dict) or last.get("status") != "success":
        return None

    outputs = last.get("outputs")
    if not isinstance(outputs, dict):
        return None

    variants = outputs.get("expanded_prompts")
    if not isinstance(variants, list):
        return None

    variants = [v for v in variants if isinstance(v, str) and v.strip()]
    return variants or None


class PromptEnhancer:
    """提示词增强器"""

    def __init__(self, transport: ReveTransport, project_resolver: ProjectResolver, model_id: str):
        self.transport = transport
        self.project_resolver = project_resolver
        self.model_id = model_id

    async def enhance(self, prompt: str, num_variants: int) -> EnhancementResult:
        """
        获取 num_variants 个提示词变体

        服务端返回的变体数量可能少于请求数量。失败时不抛出异常，
        返回只包含原始提示词的 FALLBACK 结果。

        Args:
            prompt: 原始提示词
            num_variants: 请求的变体数量

        Returns:
            EnhancementResult: 增强结果
        """
        logger.info(log_messages.ENHANCE_START, num_variants=num_variants)

        try:
            payload = {
                "inputs": {
                    "num_variants": num_variants,
                    "prompt": prompt
                },
                "model_id": self.model_id,
                "project_id": await self.project_resolver.resolve()
            }
            response = await self.transport.post_json(
                self.transport.settings.api_path("misc/model_infer_sync"),
                payload,
                operation="enhancing prompt"
            )
        except ReveError as e:
            logger.warning(log_messages.ENHANCE_FALLBACK, error=str(e), error_type=e.error_type.value)
            return EnhancementResult.fallback(prompt, str(e))

        variants = extract_variants(response)
        if variants is None:
            logger.warning(log_messages.ENHANCE_FALLBACK, error="no successful enhancement result")
            return EnhancementResult.fallback(prompt, "no successful enhancement result")

        logger.info(log_messages.ENHANCE_SUCCESS, variant_count=len(variants))
        return EnhancementResult.enhanced(variants)
