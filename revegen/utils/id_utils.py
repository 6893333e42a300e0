"""
ID生成工具模块
"""

import uuid


def generate_uuid() -> str:
    """生成标准UUID字符串"""
    return str(uuid.uuid4())


def generate_generation_id() -> str:
    """生成任务跟踪ID（每次调用唯一）"""
    return generate_uuid()


def is_valid_uuid(uuid_string: str) -> bool:
    """
    验证字符串是否为有效的UUID

    Args:
        uuid_string: 要验证的字符串

    Returns:
        bool: 是否为有效UUID
    """
    try:
        uuid.UUID(uuid_string)
        return True
    except (ValueError, AttributeError, TypeError):
        return False
