"""系统依赖安装模块。

根据探测到的包管理器安装编译 MPICH 与 SU2 所需的编译器和工具，
macOS 上若缺少 Homebrew 会先执行官方安装脚本。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Sequence

from ..steps import StepResult
from ..system.detect import PlatformInfo, UnsupportedPlatformError
from ..utils.commands import CommandRunner

LOGGER = logging.getLogger(__name__)

APT_PACKAGES = ["build-essential", "make", "gfortran", "wget", "git", "python3-pip", "python3-dev"]
YUM_GROUPS = ["Development Tools"]
YUM_PACKAGES = ["gcc", "gcc-c++", "gcc-gfortran", "make", "wget", "git", "python3-pip", "python3-devel"]
BREW_PACKAGES = ["gcc", "make", "wget", "git", "python3"]

HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
# Apple Silicon 与 Intel 上的默认安装位置
HOMEBREW_BIN_DIRS = (Path("/opt/homebrew/bin"), Path("/usr/local/bin"))

PYTHON_BUILD_TOOLS = ["meson", "ninja"]


def _privileged(command: Sequence[str], use_sudo: bool) -> List[str]:
    return ["sudo", *command] if use_sudo else list(command)


def system_package_commands(platform: PlatformInfo, use_sudo: bool = True) -> List[List[str]]:
    """返回指定包管理器下需要依次执行的安装命令。"""

    manager = platform.package_manager
    if manager == "apt":
        return [
            _privileged(["apt-get", "update"], use_sudo),
            _privileged(["apt-get", "install", "-y", *APT_PACKAGES], use_sudo),
        ]
    if manager == "yum":
        return [
            _privileged(["yum", "-y", "update"], use_sudo),
            _privileged(["yum", "-y", "groupinstall", *YUM_GROUPS], use_sudo),
            _privileged(["yum", "-y", "install", *YUM_PACKAGES], use_sudo),
        ]
    if manager == "brew":
        # Homebrew 拒绝以 root 身份运行
        return [["brew", "install", *BREW_PACKAGES]]
    raise UnsupportedPlatformError(f"Unsupported package manager: {manager}")


def bootstrap_homebrew(runner: CommandRunner, bin_dirs: Iterable[Path] = HOMEBREW_BIN_DIRS) -> None:
    """下载并执行 Homebrew 官方安装脚本，再把 brew 所在目录加入 PATH。"""

    LOGGER.info("未找到 Homebrew，开始安装 Homebrew ...")
    script = runner.run(["curl", "-fsSL", HOMEBREW_INSTALL_URL])
    runner.run(["/bin/bash", "-c", script])

    if runner.which("brew"):
        return
    for bin_dir in bin_dirs:
        if (bin_dir / "brew").is_file():
            runner.prepend_path(bin_dir)
            return


def install_system_packages(
    platform: PlatformInfo,
    runner: CommandRunner,
    *,
    use_sudo: bool = True,
) -> StepResult:
    """安装编译工具链；任何一条命令失败都会抛出 CommandError。"""

    if platform.package_manager == "brew" and not runner.which("brew"):
        bootstrap_homebrew(runner)

    LOGGER.info("正在安装系统依赖 (%s) ...", platform.package_manager)
    for command in system_package_commands(platform, use_sudo):
        runner.run(command)
    return StepResult.succeeded("install_system_packages")


def install_python_tools(runner: CommandRunner, pip: str = "pip3") -> StepResult:
    """以用户模式安装 SU2 构建所需的 meson 与 ninja。"""

    LOGGER.info("正在安装 Python 依赖: %s", ", ".join(PYTHON_BUILD_TOOLS))
    runner.run([pip, "install", "--user", *PYTHON_BUILD_TOOLS])
    return StepResult.succeeded("install_python_tools")


__all__ = [
    "APT_PACKAGES",
    "BREW_PACKAGES",
    "HOMEBREW_BIN_DIRS",
    "HOMEBREW_INSTALL_URL",
    "PYTHON_BUILD_TOOLS",
    "YUM_GROUPS",
    "YUM_PACKAGES",
    "bootstrap_homebrew",
    "install_python_tools",
    "install_system_packages",
    "system_package_commands",
]
