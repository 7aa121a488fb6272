"""操作系统、包管理器与 CPU 核数探测。

安装流程只支持三种组合：Linux + apt、Linux + yum、macOS + Homebrew。
任何其他平台都会在下载或编译之前以 :class:`UnsupportedPlatformError` 终止。
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional

LOGGER = logging.getLogger(__name__)

DEFAULT_NUM_CORES = 4
CPUINFO_PATH = Path("/proc/cpuinfo")

CoreProbe = Callable[[], Optional[int]]


class UnsupportedPlatformError(RuntimeError):
    """未知操作系统，或 Linux 上既没有 apt-get 也没有 yum。"""


@dataclass(frozen=True)
class PlatformInfo:
    """探测结果：系统类别、包管理器以及原始 OSTYPE 字符串。"""

    os_type: str
    package_manager: str
    ostype: str


def current_ostype(environ: Optional[Mapping[str, str]] = None, platform: Optional[str] = None) -> str:
    """返回 OSTYPE；非交互启动时该变量通常未导出，则由 ``sys.platform`` 推断。"""

    environ = os.environ if environ is None else environ
    value = environ.get("OSTYPE")
    if value:
        return value

    platform = sys.platform if platform is None else platform
    if platform.startswith("linux"):
        return "linux-gnu"
    return platform


def detect_platform(
    ostype: str,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> PlatformInfo:
    """根据 OSTYPE 选择唯一的安装分支。

    异常:
        UnsupportedPlatformError: 未知系统或缺少受支持的包管理器。
    """

    if ostype.startswith("linux-gnu"):
        LOGGER.info("检测到 Linux 操作系统")
        if which("apt-get"):
            return PlatformInfo(os_type="linux", package_manager="apt", ostype=ostype)
        if which("yum"):
            return PlatformInfo(os_type="linux", package_manager="yum", ostype=ostype)
        raise UnsupportedPlatformError(
            "Unsupported package manager. Please install the required dependencies manually."
        )

    if ostype.startswith("darwin"):
        LOGGER.info("检测到 macOS 操作系统")
        return PlatformInfo(os_type="macos", package_manager="brew", ostype=ostype)

    raise UnsupportedPlatformError(f"Unsupported operating system: {ostype}")


def count_cpuinfo_processors(path: Path = CPUINFO_PATH) -> Optional[int]:
    """统计 /proc/cpuinfo 中以 ``processor`` 开头的行数。"""

    try:
        with path.open("r", encoding="utf-8", errors="ignore") as fh:
            count = sum(1 for line in fh if line.startswith("processor"))
    except OSError:
        return None
    return count or None


def sysctl_ncpu() -> Optional[int]:
    """macOS 上通过 ``sysctl -n hw.ncpu`` 读取核数。"""

    try:
        proc = subprocess.run(
            ["sysctl", "-n", "hw.ncpu"],
            check=False,
            capture_output=True,
            text=True,
        )
    except OSError:
        return None
    if proc.returncode != 0:
        return None
    try:
        return int(proc.stdout.strip()) or None
    except ValueError:
        return None


def detect_num_cores(
    probes: Optional[Iterable[CoreProbe]] = None,
    default: int = DEFAULT_NUM_CORES,
) -> int:
    """依次尝试各个探测函数，第一个给出正整数的结果生效，全部失败时返回 ``default``。"""

    if probes is None:
        probes = (count_cpuinfo_processors, sysctl_ncpu)

    for probe in probes:
        value = probe()
        if value is not None and value > 0:
            return int(value)

    LOGGER.debug("无法探测 CPU 核数，使用默认值 %d", default)
    return default


__all__ = [
    "DEFAULT_NUM_CORES",
    "PlatformInfo",
    "UnsupportedPlatformError",
    "count_cpuinfo_processors",
    "current_ostype",
    "detect_num_cores",
    "detect_platform",
    "sysctl_ncpu",
]
