"""
图片生成服务模块
包含种子派生、提示词增强、任务提交、状态轮询与批量编排
"""

from revegen.services.generation.batch_orchestrator import BatchOrchestrator
from revegen.services.generation.job_submitter import JobSubmitter, extract_job_id
from revegen.services.generation.project_resolver import ProjectResolver
from revegen.services.generation.prompt_enhancer import EnhancementResult, EnhancementStatus, PromptEnhancer
from revegen.services.generation.seed_deriver import SeedDeriver
from revegen.services.generation.status_poller import StatusPoller

__all__ = [
    "BatchOrchestrator",
    "JobSubmitter",
    "extract_job_id",
    "ProjectResolver",
    "EnhancementResult",
    "EnhancementStatus",
    "PromptEnhancer",
    "SeedDeriver",
    "StatusPoller",
]
