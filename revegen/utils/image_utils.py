"""
图片数据工具
提供data URI的构建、解析与保存
"""

import base64
import mimetypes
import time
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from revegen.core.log_utils import get_logger
from revegen.utils.config_utils import ensure_directory_exists

logger = get_logger(__name__)

DEFAULT_MIME_TYPE = "image/webp"

# mimetypes 在部分平台上不认识 webp
_EXTENSION_OVERRIDES = {
    "image/webp": ".webp",
    "image/jpeg": ".jpg",
}


def normalize_mime_type(content_type: Optional[str], default: str = DEFAULT_MIME_TYPE) -> str:
    """去掉 Content-Type 中的参数部分，为空时返回默认类型"""
    if not content_type:
        return default
    mime_type = content_type.split(";", 1)[0].strip()
    return mime_type or default


def build_data_url(content: bytes, content_type: Optional[str], default: str = DEFAULT_MIME_TYPE) -> str:
    """
    将二进制图片编码为data URI

    Args:
        content: 图片二进制内容
        content_type: 响应声明的Content-Type
        default: 未声明时使用的MIME类型

    Returns:
        str: data:<mime>;base64,<data>
    """
    mime_type = normalize_mime_type(content_type, default)
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def parse_data_url(data_url: str) -> Tuple[str, bytes]:
    """
    解析data URI

    不带前缀的字符串按纯base64处理，MIME类型取默认值。

    Returns:
        Tuple[str, bytes]: (MIME类型, 二进制内容)

    Raises:
        ValueError: 内容不是有效的base64
    """
    if data_url.startswith("data:") and "base64," in data_url:
        header, encoded = data_url.split("base64,", 1)
        mime_type = header[len("data:"):].rstrip(";") or DEFAULT_MIME_TYPE
    else:
        mime_type, encoded = DEFAULT_MIME_TYPE, data_url

    try:
        return mime_type, base64.b64decode(encoded, validate=True)
    except (ValueError, TypeError) as e:
        raise ValueError(f"无效的base64图片数据: {e}") from e


def extension_for(mime_type: str) -> str:
    """根据MIME类型获取文件扩展名"""
    if mime_type in _EXTENSION_OVERRIDES:
        return _EXTENSION_OVERRIDES[mime_type]
    return mimetypes.guess_extension(mime_type) or ".webp"


def save_data_urls(data_urls: Sequence[str], output_dir: Path, prefix: str = "image") -> List[Path]:
    """
    将data URI列表保存为文件

    文件名格式为 <prefix>_<毫秒时间戳>_<序号><扩展名>，避免覆盖已有文件。

    Args:
        data_urls: 图片data URI列表
        output_dir: 输出目录，不存在时自动创建
        prefix: 文件名前缀

    Returns:
        List[Path]: 保存的文件路径
    """
    output_dir = Path(output_dir)
    ensure_directory_exists(output_dir)

    timestamp = int(time.time() * 1000)
    saved = []
    for index, data_url in enumerate(data_urls):
        mime_type, content = parse_data_url(data_url)
        file_path = output_dir / f"{prefix}_{timestamp}_{index}{extension_for(mime_type)}"
        file_path.write_bytes(content)
        saved.append(file_path)

    logger.info("图片保存完成", count=len(saved), output_dir=str(output_dir))
    return saved
