#!/usr/bin/env python3
"""
图片生成示例脚本

功能：
1. 根据提示词生成一张或多张图片
2. 将结果保存到本地目录

使用方法：
    export REVE_AUTHORIZATION="Bearer <token>"
    export REVE_COOKIE="<cookie>"
    python -m scripts.generate_image "a beautiful landscape with mountains" --batch-size 2

认证信息、项目ID等也可以写在项目根目录的 .env 文件中（变量前缀 REVE_）。
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from revegen.client import ReveImageClient
from revegen.core.exceptions import ReveError
from revegen.core.log_messages import log_messages
from revegen.core.log_utils import get_logger, setup_logging
from revegen.utils.image_utils import save_data_urls

logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="根据提示词生成图片")
    parser.add_argument("prompt", help="提示词")
    parser.add_argument("--negative-prompt", default="", help="负面提示词")
    parser.add_argument("--width", type=int, default=1024, help="图片宽度（384-1024，8的倍数）")
    parser.add_argument("--height", type=int, default=1024, help="图片高度（384-1024，8的倍数）")
    parser.add_argument("--batch-size", type=int, default=1, help="生成数量（1-8）")
    parser.add_argument("--seed", type=int, default=-1, help="基础种子，-1表示随机")
    parser.add_argument("--model", default=None, help="生成模型")
    parser.add_argument("--no-enhance", action="store_true", help="关闭提示词增强")
    parser.add_argument("--output-dir", default="output", help="图片保存目录")
    parser.add_argument("--prefix", default="reve", help="文件名前缀")
    parser.add_argument("--verbose", action="store_true", help="输出请求与响应详情")
    return parser.parse_args()


async def main() -> None:
    args = parse_args()
    setup_logging()
    logger.info(log_messages.START_OPERATION, operation_name="图片生成")

    print("=" * 60)
    print(f"生成图片: {args.prompt}")
    print("=" * 60)

    try:
        async with ReveImageClient(verbose=args.verbose) as client:
            result = await client.generate_image(
                args.prompt,
                negative_prompt=args.negative_prompt,
                width=args.width,
                height=args.height,
                batch_size=args.batch_size,
                seed=args.seed,
                model=args.model,
                enhance_prompt=not args.no_enhance
            )
    except ReveError as e:
        logger.error(log_messages.OPERATION_FAILED, exception=e, operation_name="图片生成")
        print(f"  ✗ 失败 [{e.error_type.value}]: {e.message}")
        sys.exit(1)

    saved = save_data_urls(result.image_urls, Path(args.output_dir), prefix=args.prefix)

    summary = result.to_dict()
    summary.pop("imageUrls", None)
    summary["files"] = [str(path) for path in saved]
    print(json.dumps(summary, ensure_ascii=False, indent=2, default=str))

    print()
    print("=" * 60)
    print(f"生成完成: 共 {len(saved)} 张图片，保存在 {args.output_dir}")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
