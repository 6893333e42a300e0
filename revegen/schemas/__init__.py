"""
数据模型
"""

from revegen.schemas.generation import (
    RANDOM_SEED_SENTINEL,
    BatchResult,
    GenerationRequest,
    JobHandle,
    JobOutcome,
    JobSpec,
    SeedMode,
    SeedSpec,
)

__all__ = [
    "RANDOM_SEED_SENTINEL",
    "BatchResult",
    "GenerationRequest",
    "JobHandle",
    "JobOutcome",
    "JobSpec",
    "SeedMode",
    "SeedSpec",
]
