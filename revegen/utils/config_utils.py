"""
配置工具模块
处理配置文件路径计算与配置值解析
"""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def get_project_root() -> Path:
    """获取项目根目录路径"""
    return Path(__file__).parent.parent.parent


def get_config_path(sub_path: str = "") -> Path:
    """
    获取配置文件路径

    优先使用项目根目录下已存在的文件；以安装包方式运行时项目根目录位于
    site-packages，此时回退到当前工作目录。
    """
    root = get_project_root()
    if not sub_path:
        return root
    candidate = root / sub_path
    if candidate.exists():
        return candidate
    return Path.cwd() / sub_path


def parse_json_config(value: str) -> Any:
    """解析JSON格式的配置字符串"""
    if not value:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        logger.warning(f"JSON配置解析失败: {value}")
        return None


def ensure_directory_exists(path: Path) -> None:
    """确保目录存在，不存在则创建"""
    if not path.exists():
        path.mkdir(parents=True, exist_ok=True)
        logger.info(f"创建目录: {path}")
