"""MPICH 源码下载与编译模块。

下载固定版本的源码包（已存在则跳过），解压后执行标准的
``configure`` / ``make -j N`` / ``make install`` 流程，安装到独立前缀。
每次运行都会重新解压并编译，不做构建缓存，也不校验下载内容。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from ..steps import StepResult
from ..utils.commands import CommandRunner
from ..utils.config import resolve_path

LOGGER = logging.getLogger(__name__)

DEFAULT_MPICH_VERSION = "4.0.3"
DEFAULT_URL_TEMPLATE = "https://www.mpich.org/static/downloads/{version}/mpich-{version}.tar.gz"


@dataclass
class MPICHConfig:
    """MPICH 版本、下载地址以及安装路径。"""

    version: str
    url_template: str
    install_dir: Path
    prefix: Path

    @classmethod
    def from_dict(cls, data: Dict[str, Any], install_dir: Path) -> "MPICHConfig":
        return cls(
            version=str(data.get("version", DEFAULT_MPICH_VERSION)),
            url_template=str(data.get("url_template", DEFAULT_URL_TEMPLATE)),
            install_dir=install_dir,
            prefix=resolve_path(install_dir, data.get("prefix", "mpich")),
        )

    @property
    def url(self) -> str:
        return self.url_template.format(version=self.version)

    @property
    def tarball(self) -> Path:
        return self.install_dir / f"mpich-{self.version}.tar.gz"

    @property
    def source_dir(self) -> Path:
        return self.install_dir / f"mpich-{self.version}"

    @property
    def bin_dir(self) -> Path:
        return self.prefix / "bin"


def mpi_compilers(prefix: Path) -> Dict[str, Path]:
    """返回指向 MPICH 编译器包装脚本的 CC/CXX。"""

    return {"CC": prefix / "bin" / "mpicc", "CXX": prefix / "bin" / "mpicxx"}


def download_mpich(config: MPICHConfig, runner: CommandRunner) -> StepResult:
    """下载源码包；安装目录中已有同名文件时跳过。"""

    if config.tarball.exists():
        LOGGER.info("源码包已存在，跳过下载: %s", config.tarball)
        return StepResult.skipped("download_mpich", f"{config.tarball.name} 已存在", tarball=config.tarball)

    LOGGER.info("下载 MPICH %s: %s", config.version, config.url)
    runner.run(["wget", "-nc", config.url], cwd=config.install_dir)
    return StepResult.succeeded("download_mpich", tarball=config.tarball)


def build_mpich(config: MPICHConfig, runner: CommandRunner, num_cores: int) -> StepResult:
    """解压、配置、编译并安装 MPICH，随后将其 bin 目录加入 PATH。"""

    LOGGER.info("编译 MPICH %s (make -j %d)", config.version, num_cores)
    runner.run(["tar", "-xf", config.tarball.name], cwd=config.install_dir)
    runner.run(["./configure", f"--prefix={config.prefix}"], cwd=config.source_dir)
    runner.run(["make", "-j", str(num_cores)], cwd=config.source_dir)
    runner.run(["make", "install"], cwd=config.source_dir)

    # 后续编译 SU2 需要优先找到刚安装的 mpicc/mpicxx
    runner.prepend_path(config.bin_dir)
    return StepResult.succeeded("build_mpich", prefix=config.prefix)


__all__ = [
    "DEFAULT_MPICH_VERSION",
    "DEFAULT_URL_TEMPLATE",
    "MPICHConfig",
    "build_mpich",
    "download_mpich",
    "mpi_compilers",
]
