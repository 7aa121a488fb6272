"""主流程脚本：串联平台探测、依赖安装、MPICH 编译、SU2 编译与 shell 集成。

所有参数均通过 ``config.yaml`` 控制。各步骤严格按顺序执行，任一步骤失败即停止，
不做回滚；目录或文本已存在等幂等检查会以“跳过”结局记录，不视为错误。
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from .deps.install import install_python_tools, install_system_packages
from .mpi.build import MPICHConfig, build_mpich, download_mpich
from .shell.aliases import ShellConfig, install_shell_aliases
from .solver.build import SU2Config, build_su2, clone_su2
from .steps import StepResult
from .system.detect import (
    CoreProbe,
    PlatformInfo,
    UnsupportedPlatformError,
    current_ostype,
    detect_num_cores,
    detect_platform,
)
from .utils.commands import CommandError, CommandRunner
from .utils.config import DEFAULT_CONFIG_PATH, ConfigError, ensure_directory, load_config, resolve_path

LOGGER = logging.getLogger(__name__)

BANNER = "=" * 45


def _parse_num_cores(value: Any) -> Optional[int]:
    """``auto``/空值表示自动探测，否则必须是正整数。"""

    if value is None or str(value).strip().lower() == "auto":
        return None
    try:
        cores = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"num_cores 必须是正整数或 auto: {value!r}") from exc
    if cores <= 0:
        raise ConfigError(f"num_cores 必须是正整数或 auto: {value!r}")
    return cores


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"配置项 {key} 必须是映射")
    return section


@dataclass
class PipelineConfig:
    """聚合后的整体安装配置。"""

    install_dir: Path
    num_cores: Optional[int]
    use_sudo: bool
    pip: str
    log_file: Optional[Path]
    mpich: MPICHConfig
    su2: SU2Config
    shell: ShellConfig

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Path) -> "PipelineConfig":
        install_dir = resolve_path(base_dir, data.get("install_dir", "~/su2_install"))
        log_file = data.get("log_file", "install.log")
        return cls(
            install_dir=install_dir,
            num_cores=_parse_num_cores(data.get("num_cores", "auto")),
            use_sudo=bool(data.get("use_sudo", True)),
            pip=str(data.get("pip", "pip3")),
            log_file=resolve_path(install_dir, log_file) if log_file else None,
            mpich=MPICHConfig.from_dict(_section(data, "mpich"), install_dir),
            su2=SU2Config.from_dict(_section(data, "su2"), install_dir),
            shell=ShellConfig.from_dict(_section(data, "shell"), base_dir),
        )

    @classmethod
    def load(cls, config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> "PipelineConfig":
        data, base_dir = load_config(config_path)
        return cls.from_dict(data, base_dir)


@dataclass
class Step:
    """流水线中的一个具名步骤。"""

    name: str
    title: str
    action: Callable[[], StepResult]


def _print_header(config: PipelineConfig, num_cores: int) -> None:
    print(BANNER)
    print(f"SU2 Installation Script with MPICH {config.mpich.version}")
    print(BANNER)
    print("Installation directories:")
    print(f"  MPICH: {config.mpich.prefix}")
    print(f"  SU2:   {config.su2.prefix}")
    print(f"Using {num_cores} cores for compilation")
    print(BANNER)


def _print_footer(config: PipelineConfig) -> None:
    aliases = config.shell.aliases_file
    print(BANNER)
    print("Installation complete!")
    print(BANNER)
    print(f"SU2 has been installed to: {config.su2.prefix}")
    print(f"MPICH has been installed to: {config.mpich.prefix}")
    print("")
    print("Usage examples:")
    print("  su2 4 config.cfg     # Run SU2 with 4 cores")
    print("  su2back 8 config.cfg # Run SU2 in background with 8 cores")
    print("  su2dry config.cfg    # Perform a dry run")
    print("")
    print(f"Please restart your terminal or run 'source {aliases}'")
    print("to use the su2, su2back, and su2dry commands.")
    print(BANNER)


def build_steps(
    config: PipelineConfig,
    runner: CommandRunner,
    *,
    num_cores: int,
    ostype: Optional[str] = None,
    which: Optional[Callable[[str], Optional[str]]] = None,
) -> List[Step]:
    """按执行顺序组装全部安装步骤。"""

    detected: Dict[str, PlatformInfo] = {}

    def detect() -> StepResult:
        platform = detect_platform(ostype or current_ostype(), which or runner.which)
        detected["platform"] = platform
        LOGGER.info("安装分支: %s / %s", platform.os_type, platform.package_manager)
        return StepResult.succeeded("detect_platform")

    return [
        Step("detect_platform", "检测操作系统与包管理器", detect),
        Step(
            "install_system_packages",
            "安装系统依赖",
            lambda: install_system_packages(detected["platform"], runner, use_sudo=config.use_sudo),
        ),
        Step("install_python_tools", "安装 Python 构建工具", lambda: install_python_tools(runner, config.pip)),
        Step("download_mpich", "下载 MPICH 源码", lambda: download_mpich(config.mpich, runner)),
        Step("build_mpich", "编译安装 MPICH", lambda: build_mpich(config.mpich, runner, num_cores)),
        Step("clone_su2", "获取 SU2 源码", lambda: clone_su2(config.su2, runner)),
        Step("build_su2", "编译安装 SU2", lambda: build_su2(config.su2, runner, config.mpich.prefix)),
        Step(
            "install_shell_aliases",
            "生成 shell 便捷函数",
            lambda: install_shell_aliases(
                config.shell,
                runner,
                mpich_prefix=config.mpich.prefix,
                su2_prefix=config.su2.prefix,
            ),
        ),
    ]


def run_steps(steps: Iterable[Step]) -> List[StepResult]:
    """顺序执行步骤，第一个失败的步骤之后不再继续。"""

    steps = list(steps)
    results: List[StepResult] = []
    for index, step in enumerate(steps, start=1):
        print(f"[{index}/{len(steps)}] {step.title} ...")
        try:
            result = step.action()
        except (UnsupportedPlatformError, CommandError, OSError) as exc:
            LOGGER.error("步骤 %s 失败: %s", step.name, exc)
            returncode = exc.returncode if isinstance(exc, CommandError) else None
            results.append(StepResult.failed(step.name, str(exc), returncode))
            break
        if result.reason:
            LOGGER.info("步骤 %s %s: %s", step.name, result.status.value, result.reason)
        results.append(result)
    return results


def run_pipeline(
    config: PipelineConfig,
    runner: Optional[CommandRunner] = None,
    *,
    ostype: Optional[str] = None,
    which: Optional[Callable[[str], Optional[str]]] = None,
    core_probes: Optional[Iterable[CoreProbe]] = None,
) -> List[StepResult]:
    """执行完整安装流程并返回各步骤结果。"""

    runner = runner or CommandRunner(log_file=config.log_file)
    num_cores = config.num_cores or detect_num_cores(core_probes)

    _print_header(config, num_cores)
    if not runner.dry_run:
        ensure_directory(config.install_dir)

    steps = build_steps(config, runner, num_cores=num_cores, ostype=ostype, which=which)
    results = run_steps(steps)
    if results and results[-1].ok and len(results) == len(steps):
        _print_footer(config)
    return results


if __name__ == "__main__":  # pragma: no cover
    run_pipeline(PipelineConfig.load())
