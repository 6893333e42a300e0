"""
图片生成相关的数据模型
对外的请求/响应使用Pydantic模型，批次内部流转的任务数据使用dataclass
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# 旧接口中表示"随机种子"的哨兵值
RANDOM_SEED_SENTINEL = -1


# ============================================================================
# 种子
# ============================================================================

class SeedMode(str, Enum):
    """种子模式"""
    RANDOM = "random"
    EXPLICIT = "explicit"


@dataclass(frozen=True)
class SeedSpec:
    """
    用户指定的基础种子

    用显式的模式区分"随机"与"指定值"，避免把 -1 当作普通数值参与计算。
    """
    mode: SeedMode
    value: Optional[int] = None

    @classmethod
    def random(cls) -> "SeedSpec":
        return cls(SeedMode.RANDOM)

    @classmethod
    def explicit(cls, value: int) -> "SeedSpec":
        return cls(SeedMode.EXPLICIT, value)

    @classmethod
    def from_value(cls, value: Optional[int]) -> "SeedSpec":
        """None 或 -1 表示随机，其余整数表示指定值"""
        if value is None or value == RANDOM_SEED_SENTINEL:
            return cls.random()
        return cls.explicit(value)

    @property
    def is_random(self) -> bool:
        return self.mode is SeedMode.RANDOM


# ============================================================================
# 请求模型
# ============================================================================

class GenerationRequest(BaseModel):
    """图片生成请求"""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    prompt: str = Field(..., description="生成图片的提示词")
    negative_prompt: str = Field(default="", description="负面提示词")
    width: int = Field(default=1024, description="图片宽度，384-1024且能被8整除")
    height: int = Field(default=1024, description="图片高度，384-1024且能被8整除")
    batch_size: int = Field(default=1, description="生成数量，1-8")
    seed: int = Field(default=RANDOM_SEED_SENTINEL, description="基础种子，-1表示随机")
    model: Optional[str] = Field(default=None, description="生成模型，为空时使用配置的默认模型")
    enhance_prompt: bool = Field(default=True, description="是否自动增强提示词")

    @property
    def seed_spec(self) -> SeedSpec:
        return SeedSpec.from_value(self.seed)


# ============================================================================
# 批次内部数据
# ============================================================================

@dataclass(frozen=True)
class JobSpec:
    """
    单个生成任务的参数

    由批量编排器在派发前创建，任务流水线结束后丢弃。
    """
    index: int
    prompt: str
    negative_prompt: str
    width: int
    height: int
    model: str
    enhance_prompt: bool
    seed: int
    prompt_variant: Optional[str] = None

    @property
    def caption(self) -> str:
        """最终提交的提示词（增强后的变体或原始提示词）"""
        if self.enhance_prompt and self.prompt_variant:
            return self.prompt_variant
        return self.prompt

    @property
    def enhanced_prompt(self) -> Optional[str]:
        """实际使用的增强提示词，未增强或与原始提示词相同时为None"""
        if self.enhance_prompt and self.prompt_variant and self.prompt_variant != self.prompt:
            return self.prompt_variant
        return None


@dataclass(frozen=True)
class JobHandle:
    """服务端返回的任务标识，仅在轮询期间持有"""
    project_id: str
    job_id: str
    job: JobSpec


@dataclass(frozen=True)
class JobOutcome:
    """单个任务的成功结果"""
    index: int
    image_url: str
    seed: int
    enhanced_prompt: Optional[str] = None


# ============================================================================
# 响应模型
# ============================================================================

class BatchResult(BaseModel):
    """批量生成结果"""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    image_urls: List[str] = Field(..., description="按派发顺序排列的图片data URI")
    seed: int = Field(..., description="第一个任务的种子（参考种子）")
    completed_at: datetime = Field(..., description="所有任务完成的时间")
    prompt: str = Field(..., description="原始提示词")
    enhanced_prompt: Optional[str] = Field(None, description="第一个任务使用的增强提示词")
    enhanced_prompts: Optional[List[str]] = Field(None, description="使用了多个不同增强提示词时的完整列表")
    negative_prompt: Optional[str] = Field(None, description="负面提示词")

    def to_dict(self) -> Dict[str, Any]:
        """输出驼峰格式字典，省略空字段"""
        return self.model_dump(by_alias=True, exclude_none=True)
