"""
验证工具模块
提供图片生成参数的验证函数，所有验证均在网络请求之前完成
"""

from typing import Any, Optional

from revegen.core.exceptions import ParameterValidationError

MIN_DIMENSION = 384
MAX_DIMENSION = 1024
DIMENSION_STEP = 8
MIN_BATCH_SIZE = 1
MAX_BATCH_SIZE = 8


def is_valid_dimension(value: Any) -> bool:
    """
    验证图片边长

    Args:
        value: 宽度或高度

    Returns:
        bool: 是否在384-1024之间且能被8整除
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return MIN_DIMENSION <= value <= MAX_DIMENSION and value % DIMENSION_STEP == 0


def is_valid_batch_size(value: Any) -> bool:
    """验证批量大小是否在1-8之间"""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return MIN_BATCH_SIZE <= value <= MAX_BATCH_SIZE


def validate_image_options(
    width: Optional[int] = None,
    height: Optional[int] = None,
    batch_size: Optional[int] = None
) -> None:
    """
    验证图片生成参数，未提供的参数不做检查

    Raises:
        ParameterValidationError: 参数超出允许范围
    """
    if width is not None and not is_valid_dimension(width):
        raise ParameterValidationError(
            f"Width must be between {MIN_DIMENSION} and {MAX_DIMENSION} and be divisible by {DIMENSION_STEP}"
        )

    if height is not None and not is_valid_dimension(height):
        raise ParameterValidationError(
            f"Height must be between {MIN_DIMENSION} and {MAX_DIMENSION} and be divisible by {DIMENSION_STEP}"
        )

    if batch_size is not None and not is_valid_batch_size(batch_size):
        raise ParameterValidationError(
            f"Batch size must be between {MIN_BATCH_SIZE} and {MAX_BATCH_SIZE}"
        )


def validate_prompt(prompt: Any) -> None:
    """验证提示词非空"""
    if not isinstance(prompt, str) or not prompt.strip():
        raise ParameterValidationError("Prompt must be a non-empty string")
