"""
种子派生
根据用户给定的基础种子为批次中的每个任务生成种子
"""

import random
from typing import List, Optional

from revegen.schemas.generation import SeedSpec

# 随机种子取值上限（不含）
RANDOM_SEED_UPPER = 10_000_000
# 指定基础种子时每个任务叠加的随机偏移上限（不含）
SEED_JITTER_UPPER = 1000


class SeedDeriver:
    """
    种子派生器

    - 随机模式：每个任务独立地从 [0, RANDOM_SEED_UPPER) 均匀抽取
    - 指定模式：每个任务的种子为 base + [0, SEED_JITTER_UPPER) 内的随机偏移，
      保证批次内图片不完全相同；偶发的种子重复是允许的
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def derive(self, base: SeedSpec, job_index: int) -> int:
        """为第 job_index 个任务派生种子"""
        if base.is_random:
            return self._rng.randrange(RANDOM_SEED_UPPER)
        return base.value + self._rng.randrange(SEED_JITTER_UPPER)

    def derive_batch(self, base: SeedSpec, batch_size: int) -> List[int]:
        """为整个批次派生种子，顺序与任务派发顺序一致"""
        return [self.derive(base, index) for index in range(batch_size)]
