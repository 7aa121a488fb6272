"""SU2 源码获取与编译模块。

克隆 SU2 仓库（目录已存在时跳过，重复运行不会重新克隆），然后使用刚编译好的
MPICH 编译器包装脚本，通过 meson 生成构建文件并由 ninja 完成编译与安装。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from ..steps import StepResult
from ..utils.commands import CommandRunner
from ..utils.config import resolve_path
from ..mpi.build import mpi_compilers

LOGGER = logging.getLogger(__name__)

DEFAULT_REPOSITORY = "https://github.com/su2code/SU2.git"


@dataclass
class SU2Config:
    """SU2 仓库地址、源码目录、安装前缀与 meson 选项。"""

    repository: str
    install_dir: Path
    source_dir: Path
    prefix: Path
    python: str
    meson_options: List[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any], install_dir: Path) -> "SU2Config":
        return cls(
            repository=str(data.get("repository", DEFAULT_REPOSITORY)),
            install_dir=install_dir,
            source_dir=resolve_path(install_dir, data.get("source_dir", "SU2")),
            prefix=resolve_path(install_dir, data.get("prefix", "SU2")),
            python=str(data.get("python", "python3")),
            meson_options=[str(item) for item in data.get("meson_options", ["-Dcustom-mpi=true"])],
        )

    @property
    def executable(self) -> Path:
        return self.prefix / "bin" / "SU2_CFD"


def clone_su2(config: SU2Config, runner: CommandRunner) -> StepResult:
    """克隆 SU2 仓库；目标目录已存在时跳过。"""

    if config.source_dir.is_dir():
        LOGGER.info("SU2 源码目录已存在，跳过克隆: %s", config.source_dir)
        return StepResult.skipped("clone_su2", f"{config.source_dir} 已存在", source=config.source_dir)

    LOGGER.info("克隆 SU2 仓库: %s", config.repository)
    runner.run(["git", "clone", config.repository, config.source_dir.name], cwd=config.source_dir.parent)
    return StepResult.succeeded("clone_su2", source=config.source_dir)


def build_su2(config: SU2Config, runner: CommandRunner, mpich_prefix: Path) -> StepResult:
    """使用 MPICH 编译器包装脚本构建并安装 SU2。"""

    runner.export(**mpi_compilers(mpich_prefix))

    LOGGER.info("生成 SU2 构建文件 (安装前缀 %s)", config.prefix)
    runner.run(
        [config.python, "./meson.py", "build", f"--prefix={config.prefix}", *config.meson_options],
        cwd=config.source_dir,
    )
    runner.run([config.python, "-m", "ninja", "-C", "build", "install"], cwd=config.source_dir)
    return StepResult.succeeded("build_su2", prefix=config.prefix, executable=config.executable)


__all__ = ["DEFAULT_REPOSITORY", "SU2Config", "build_su2", "clone_su2"]
