"""SU2 + MPICH 源码安装命令行入口。"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .pipeline import PipelineConfig, run_pipeline
from .steps import StepStatus
from .utils.commands import CommandRunner
from .utils.config import DEFAULT_CONFIG_PATH, ConfigError

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="从源码安装 SU2 与 MPICH，并生成 shell 便捷函数")
    parser.add_argument(
        "config",
        nargs="?",
        default=DEFAULT_CONFIG_PATH,
        type=Path,
        help="配置文件路径 (默认: 包内 config.yaml)",
    )
    parser.add_argument("--dry-run", action="store_true", help="只打印将要执行的命令，不做任何修改")
    parser.add_argument("-v", "--verbose", action="store_true", help="输出外部命令的完整日志")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    try:
        config = PipelineConfig.load(args.config)
    except ConfigError as exc:
        LOGGER.error("%s", exc)
        return 1

    runner = CommandRunner(dry_run=args.dry_run, log_file=None if args.dry_run else config.log_file)
    results = run_pipeline(config, runner)

    failed = [result for result in results if result.status is StepStatus.FAILED]
    if failed:
        step = failed[0]
        if step.returncode is not None:
            LOGGER.error("安装中止于步骤 %s (返回码 %d)", step.name, step.returncode)
        else:
            LOGGER.error("安装中止于步骤 %s", step.name)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
