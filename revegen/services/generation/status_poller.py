"""
任务状态轮询
轮询项目节点列表直到任务成功、失败或轮询次数耗尽，成功后下载图片并编码为data URI
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from revegen.core.exceptions import GenerationError, PollingError, ReveError, ReveErrorType
from revegen.core.http.transport import ReveTransport
from revegen.core.log_messages import log_messages
from revegen.core.log_utils import get_logger
from revegen.schemas.generation import JobHandle, JobOutcome
from revegen.utils.image_utils import DEFAULT_MIME_TYPE, build_data_url

logger = get_logger(__name__)


class JobState(str, Enum):
    """单次轮询观察到的任务状态"""
    NOT_FOUND = "not_found"
    PENDING = "pending"
    FAILED = "failed"
    SUCCEEDED = "succeeded"


@dataclass(frozen=True)
class JobStatus:
    """
    节点列表中某个任务的状态快照

    Attributes:
        state: 任务状态
        output: 图片ID（成功时）
        error: 服务端报告的错误（失败时）
        seed: 服务端回显的实际种子
    """
    state: JobState
    output: Optional[str] = None
    error: Optional[str] = None
    seed: Optional[int] = None


def find_job_entry(listing: Any, job_id: str) -> Optional[Dict[str, Any]]:
    """在节点列表中查找任务，列表格式不符时视为未找到"""
    if not isinstance(listing, dict) or not isinstance(listing.get("list"), list):
        return None
    for item in listing["list"]:
        if not isinstance(item, dict):
            continue
        node = item.get("node")
        if isinstance(node, dict) and node.get("id") == job_id:
            return item
    return None


def read_job_status(entry: Optional[Dict[str, Any]]) -> JobStatus:
    """
    将节点条目转换为任务状态

    - 不在列表中：NOT_FOUND（列表可见性可能滞后于提交，按处理中对待）
    - 有 output：SUCCEEDED
    - 有 error：FAILED
    - 其余：PENDING
    """
    if entry is None:
        return JobStatus(JobState.NOT_FOUND)

    data = entry.get("data")
    if not isinstance(data, dict):
        return JobStatus(JobState.PENDING)

    inputs = data.get("inference_inputs")
    seed = inputs.get("seed") if isinstance(inputs, dict) else None
    if isinstance(seed, bool) or not isinstance(seed, int):
        seed = None

    if data.get("output"):
        return JobStatus(JobState.SUCCEEDED, output=str(data["output"]), seed=seed)
    if data.get("error"):
        return JobStatus(JobState.FAILED, error=str(data["error"]), seed=seed)
    return JobStatus(JobState.PENDING, seed=seed)


class StatusPoller:
    """
    任务状态轮询器

    三种失败分别处理：
    1. 任务失败（条目带 error）：立即终止，抛出 GenerationError
    2. 图片下载失败：视为仍在处理，消耗一次轮询次数后重试（认证错误除外）
    3. 轮询次数耗尽：抛出 PollingError
    节点列表请求本身的失败（已经过传输层重试）直接终止。
    """

    def __init__(
        self,
        transport: ReveTransport,
        max_attempts: int,
        interval: float,
        default_mime_type: str = DEFAULT_MIME_TYPE
    ):
        self.transport = transport
        self.max_attempts = max_attempts
        self.interval = interval
        self.default_mime_type = default_mime_type

    async def poll(self, handle: JobHandle) -> JobOutcome:
        """
        轮询任务直到终止状态

        Args:
            handle: 任务句柄

        Returns:
            JobOutcome: 成功结果

        Raises:
            GenerationError: 服务端报告任务失败
            PollingError: 轮询次数耗尽
        """
        settings = self.transport.settings
        nodes_path = settings.api_path(f"project/{handle.project_id}/node")
        attempts = 0

        while attempts < self.max_attempts:
            listing = await self.transport.get_json(nodes_path, operation="polling generation status")
            logger.debug(
                log_messages.POLL_ATTEMPT,
                attempt=attempts + 1,
                max_attempts=self.max_attempts,
                job_id=handle.job_id
            )

            status = read_job_status(find_job_entry(listing, handle.job_id))

            if status.state is JobState.SUCCEEDED:
                logger.info(log_messages.POLL_COMPLETED, image_id=status.output, job_id=handle.job_id)
                outcome = await self._fetch_outcome(handle, status)
                if outcome is not None:
                    return outcome
            elif status.state is JobState.FAILED:
                logger.error(log_messages.POLL_FAILED, job_id=handle.job_id, error=status.error)
                raise GenerationError(
                    f"Generation failed: {status.error}",
                    details={"job_id": handle.job_id}
                )
            elif status.state is JobState.NOT_FOUND:
                logger.debug(log_messages.POLL_NOT_FOUND, job_id=handle.job_id)
            else:
                logger.debug(log_messages.POLL_PENDING, job_id=handle.job_id)

            await asyncio.sleep(self.interval)
            attempts += 1

        logger.error(log_messages.POLL_TIMEOUT, job_id=handle.job_id, attempts=attempts)
        raise PollingError(
            f"Generation timed out after {attempts} polling attempts",
            attempts=attempts,
            details={"job_id": handle.job_id}
        )

    async def _fetch_outcome(self, handle: JobHandle, status: JobStatus) -> Optional[JobOutcome]:
        """
        下载图片并构建结果

        Returns:
            Optional[JobOutcome]: 下载失败时返回None，由调用方继续轮询
        """
        image_path = self.transport.settings.api_path(
            f"project/{handle.project_id}/image/{status.output}/url"
        )
        try:
            content, content_type = await self.transport.get_binary(
                image_path,
                operation="fetching image content",
                accept="image/webp,*/*"
            )
        except ReveError as e:
            if e.error_type is ReveErrorType.AUTHENTICATION_ERROR:
                raise
            logger.warning(log_messages.POLL_FETCH_RETRY, job_id=handle.job_id, error=str(e))
            return None

        job = handle.job
        return JobOutcome(
            index=job.index,
            image_url=build_data_url(content, content_type, self.default_mime_type),
            seed=status.seed if status.seed is not None else job.seed,
            enhanced_prompt=job.enhanced_prompt
        )
