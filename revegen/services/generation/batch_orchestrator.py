"""
批量生成编排
派生种子、分配提示词变体、并发执行各任务的 提交→轮询 流水线，并汇总为批量结果
"""

import asyncio
import dataclasses
from datetime import datetime, timezone
from typing import List, Optional

from revegen.core.config import Settings
from revegen.core.exceptions import ReveError
from revegen.core.http.error_handler import handle_http_error
from revegen.core.log_messages import log_messages
from revegen.core.log_utils import get_logger
from revegen.schemas.generation import BatchResult, GenerationRequest, JobOutcome, JobSpec
from revegen.services.generation.job_submitter import JobSubmitter
from revegen.services.generation.prompt_enhancer import PromptEnhancer
from revegen.services.generation.seed_deriver import SeedDeriver
from revegen.services.generation.status_poller import StatusPoller
from revegen.utils.validation_utils import validate_image_options, validate_prompt

logger = get_logger(__name__)


class BatchOrchestrator:
    """
    批量生成编排器

    整个批次要么全部成功，要么整体失败：任一任务失败时取消其余仍在运行的任务，
    并抛出该失败，不返回部分结果。
    """

    def __init__(
        self,
        settings: Settings,
        enhancer: PromptEnhancer,
        submitter: JobSubmitter,
        poller: StatusPoller,
        seed_deriver: Optional[SeedDeriver] = None
    ):
        self.settings = settings
        self.enhancer = enhancer
        self.submitter = submitter
        self.poller = poller
        self.seed_deriver = seed_deriver or SeedDeriver()

    async def generate(self, request: GenerationRequest) -> BatchResult:
        """
        生成一批图片

        Args:
            request: 生成请求

        Returns:
            BatchResult: 按派发顺序排列的批量结果

        Raises:
            ReveError: 参数非法或任一任务失败
        """
        try:
            validate_prompt(request.prompt)
            validate_image_options(request.width, request.height, request.batch_size)

            logger.info(
                log_messages.BATCH_START,
                batch_size=request.batch_size,
                width=request.width,
                height=request.height,
                enhance_prompt=request.enhance_prompt
            )

            jobs = await self._build_jobs(request)
            outcomes = await self._run_all(jobs)
            result = self._reduce(request, outcomes)

            logger.info(log_messages.BATCH_SUCCESS, image_count=len(result.image_urls))
            return result

        except ReveError:
            raise
        except Exception as e:
            raise handle_http_error(e, "generating image", self.settings.verbose) from e

    async def _build_jobs(self, request: GenerationRequest) -> List[JobSpec]:
        """派生种子并为每个任务分配提示词变体"""
        batch_size = request.batch_size
        model = request.model or self.settings.default_model

        variants: List[Optional[str]] = [None] * batch_size
        if request.enhance_prompt and batch_size > 1:
            enhancement = await self.enhancer.enhance(request.prompt, batch_size)
            prompts = enhancement.prompts
            # 返回的变体数可能少于请求数，循环分配
            variants = [prompts[i % len(prompts)] for i in range(batch_size)]

        seeds = self.seed_deriver.derive_batch(request.seed_spec, batch_size)

        return [
            JobSpec(
                index=index,
                prompt=request.prompt,
                negative_prompt=request.negative_prompt,
                width=request.width,
                height=request.height,
                model=model,
                enhance_prompt=request.enhance_prompt,
                seed=seeds[index],
                prompt_variant=variants[index]
            )
            for index in range(batch_size)
        ]

    async def _run_job(self, job: JobSpec) -> JobOutcome:
        """单个任务流水线：（单图增强）→ 提交 → 轮询"""
        if job.enhance_prompt and job.prompt_variant is None:
            enhancement = await self.enhancer.enhance(job.prompt, 1)
            job = dataclasses.replace(job, prompt_variant=enhancement.prompts[0])

        handle = await self.submitter.submit(job)
        return await self.poller.poll(handle)

    async def _run_all(self, jobs: List[JobSpec]) -> List[JobOutcome]:
        """
        并发执行所有任务

        首个失败出现后取消其余任务；同一轮中有多个任务失败时，抛出索引最小者的异常。
        """
        tasks = [asyncio.create_task(self._run_job(job)) for job in jobs]

        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        failed = [task for task in tasks if task in done and task.exception() is not None]
        if failed:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

            error = failed[0].exception()
            logger.error(
                log_messages.BATCH_FAILED,
                cancelled=len(pending),
                error=str(error)
            )
            raise error

        return [task.result() for task in tasks]

    def _reduce(self, request: GenerationRequest, outcomes: List[JobOutcome]) -> BatchResult:
        """按派发顺序汇总结果"""
        ordered = sorted(outcomes, key=lambda outcome: outcome.index)
        first = ordered[0]

        enhanced_prompt = None
        enhanced_prompts = None
        if request.enhance_prompt:
            used = [outcome.enhanced_prompt for outcome in ordered if outcome.enhanced_prompt]
            enhanced_prompt = used[0] if used else None
            if len(set(used)) > 1:
                enhanced_prompts = used

        return BatchResult(
            image_urls=[outcome.image_url for outcome in ordered],
            seed=first.seed,
            completed_at=datetime.now(timezone.utc),
            prompt=request.prompt,
            enhanced_prompt=enhanced_prompt,
            enhanced_prompts=enhanced_prompts,
            negative_prompt=request.negative_prompt or None
        )
