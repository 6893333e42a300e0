"""
通用工具模块包

image_utils 依赖日志模块（进而依赖配置），不在此处导出，按需直接导入。
"""

from .config_utils import (
    get_project_root,
    get_config_path,
    parse_json_config,
    ensure_directory_exists
)

from .id_utils import (
    generate_uuid,
    generate_generation_id,
    is_valid_uuid
)

from .validation_utils import (
    is_valid_dimension,
    is_valid_batch_size,
    validate_image_options,
    validate_prompt
)

__all__ = [
    # config_utils
    'get_project_root', 'get_config_path', 'parse_json_config', 'ensure_directory_exists',

    # id_utils
    'generate_uuid', 'generate_generation_id', 'is_valid_uuid',

    # validation_utils
    'is_valid_dimension', 'is_valid_batch_size', 'validate_image_options', 'validate_prompt',
]
