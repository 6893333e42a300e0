"""
任务提交
构建单张图片的生成请求并从响应中提取任务ID
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from revegen.core.exceptions import UnexpectedResponseError
from revegen.core.http.transport import ReveTransport
from revegen.core.log_messages import log_messages
from revegen.core.log_utils import get_logger
from revegen.schemas.generation import JobHandle, JobSpec
from revegen.services.generation.project_resolver import ProjectResolver
from revegen.utils.id_utils import generate_generation_id
from revegen.utils.validation_utils import validate_image_options

logger = get_logger(__name__)

NODE_NAME = "My Generation"
NODE_DESCRIPTION = "A generation which encapsulates a request to generate an image."


@dataclass(frozen=True)
class JobIdMatch:
    """任务ID解析成功的结果，shape 为命中的响应格式名"""
    job_id: str
    shape: str


def _nested_create_node_id(data: Any) -> Optional[str]:
    """新格式: {"create": {"node": {"id": ...}}}"""
    if not isinstance(data, dict) or not isinstance(data.get("create"), dict):
        return None
    node = data["create"].get("node")
    if isinstance(node, dict) and node.get("id"):
        return str(node["id"])
    return None


def _flat_generation_id(data: Any) -> Optional[str]:
    """旧格式: {"generation_id": ...}"""
    if isinstance(data, dict) and data.get("generation_id"):
        return str(data["generation_id"])
    return None


# 按顺序尝试的响应格式，新增格式只需追加一项
JOB_ID_STRATEGIES: Tuple[Tuple[str, Callable[[Any], Optional[str]]], ...] = (
    ("create.node.id", _nested_create_node_id),
    ("generation_id", _flat_generation_id),
)


def extract_job_id(data: Any) -> Optional[JobIdMatch]:
    """
    从提交响应中提取任务ID

    Returns:
        Optional[JobIdMatch]: 命中时返回结果，所有格式都不匹配时返回None
    """
    for shape, strategy in JOB_ID_STRATEGIES:
        job_id = strategy(data)
        if job_id:
            return JobIdMatch(job_id=job_id, shape=shape)
    return None


def build_generation_payload(job: JobSpec, generation_id: str) -> Dict[str, Any]:
    """构建生成请求体"""
    return {
        "data": {
            "client_metadata": {
                "aspectRatio": f"{job.width}:{job.height}",
                "instruction": job.prompt,
                "optimizeEnabled": job.enhance_prompt,
                "unexpandedPrompt": job.prompt
            },
            "inference_inputs": {
                "caption": job.caption,
                "height": job.height,
                "negative_caption": job.negative_prompt,
                "seed": job.seed,
                "width": job.width
            },
            "inference_model": job.model
        },
        "node": {
            "description": NODE_DESCRIPTION,
            "id": generation_id,
            "name": NODE_NAME
        }
    }


class JobSubmitter:
    """任务提交器"""

    def __init__(self, transport: ReveTransport, project_resolver: ProjectResolver):
        self.transport = transport
        self.project_resolver = project_resolver

    async def submit(self, job: JobSpec) -> JobHandle:
        """
        提交单个生成任务

        Args:
            job: 任务参数

        Returns:
            JobHandle: 任务句柄

        Raises:
            ParameterValidationError: 尺寸参数非法（不发出任何请求）
            UnexpectedResponseError: 响应中找不到任务ID
        """
        validate_image_options(job.width, job.height, 1)

        project_id = await self.project_resolver.resolve()
        payload = build_generation_payload(job, generate_generation_id())

        response = await self.transport.post_json(
            self.transport.settings.api_path(f"project/{project_id}/generation"),
            payload,
            operation="submitting generation"
        )

        match = extract_job_id(response)
        if match is None:
            raise UnexpectedResponseError(
                f"Failed to get generation ID from response: {response}",
                payload=response
            )

        logger.info(
            log_messages.JOB_SUBMITTED,
            job_id=match.job_id,
            job_index=job.index,
            response_shape=match.shape
        )
        return JobHandle(project_id=project_id, job_id=match.job_id, job=job)
