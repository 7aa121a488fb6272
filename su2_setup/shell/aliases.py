"""Shell 便捷函数生成模块。

生成定义 ``su2`` / ``su2back`` / ``su2dry`` 三个函数的脚本，安装路径在生成时写死，
因此与调用时所在的工作目录无关。随后在已存在的 shell 启动文件末尾追加 source 语句
（已包含时跳过，重复运行不会产生重复行），并立即 source 一次以确认脚本可被解析。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List

from ..steps import StepResult
from ..utils.commands import CommandRunner
from ..utils.config import resolve_path, write_text_file

LOGGER = logging.getLogger(__name__)

DEFAULT_ALIASES_FILE = "~/.su2_aliases"
DEFAULT_STARTUP_FILES = ("~/.bashrc", "~/.bash_profile", "~/.zshrc")

ALIASES_TEMPLATE = """\
# SU2 convenience functions
su2() {{
  "{mpiexec}" -n $1 "{su2_cfd}" $2
}}

su2back() {{
  nohup "{mpiexec}" -n $1 "{su2_cfd}" $2 &
}}

su2dry() {{
  "{su2_cfd}" -d $1
}}
"""


@dataclass
class ShellConfig:
    """别名脚本路径与需要更新的 shell 启动文件。"""

    aliases_file: Path
    startup_files: List[Path]

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Path) -> "ShellConfig":
        return cls(
            aliases_file=resolve_path(base_dir, data.get("aliases_file", DEFAULT_ALIASES_FILE)),
            startup_files=[
                resolve_path(base_dir, item) for item in data.get("startup_files", DEFAULT_STARTUP_FILES)
            ],
        )


def render_aliases(mpich_prefix: Path, su2_prefix: Path) -> str:
    """生成别名脚本文本，两个安装前缀以绝对路径写入。"""

    return ALIASES_TEMPLATE.format(
        mpiexec=Path(mpich_prefix) / "bin" / "mpiexec",
        su2_cfd=Path(su2_prefix) / "bin" / "SU2_CFD",
    )


def source_line(aliases_file: Path) -> str:
    """启动文件中追加的带存在性判断的 source 语句。"""

    return f"[ -f {aliases_file} ] && . {aliases_file}"


def add_source_line(startup_files: Iterable[Path], aliases_file: Path, *, dry_run: bool = False) -> List[Path]:
    """向已存在且尚未引用别名脚本的启动文件追加 source 语句，返回被修改的文件。

    不存在的启动文件不会被创建。
    """

    line = source_line(aliases_file)
    updated: List[Path] = []
    for rc_file in startup_files:
        if not rc_file.is_file():
            continue
        content = rc_file.read_text(encoding="utf-8", errors="ignore")
        if str(aliases_file) in content:
            LOGGER.debug("%s 已包含别名脚本，跳过", rc_file)
            continue

        LOGGER.info("在 %s 中追加: %s", rc_file, line)
        if not dry_run:
            prefix = "" if not content or content.endswith("\n") else "\n"
            with rc_file.open("a", encoding="utf-8") as fh:
                fh.write(f"{prefix}{line}\n")
        updated.append(rc_file)
    return updated


def source_aliases(aliases_file: Path, runner: CommandRunner) -> None:
    """在子 shell 中 source 别名脚本，脚本有语法错误时抛出 CommandError。"""

    runner.run(["bash", "-c", f'. "{aliases_file}"'])


def install_shell_aliases(
    config: ShellConfig,
    runner: CommandRunner,
    *,
    mpich_prefix: Path,
    su2_prefix: Path,
) -> StepResult:
    """写出别名脚本、更新启动文件并 source 一次。"""

    content = render_aliases(mpich_prefix, su2_prefix)
    if runner.dry_run:
        LOGGER.info("[dry-run] 写出别名脚本: %s", config.aliases_file)
    else:
        write_text_file(config.aliases_file, content)
        LOGGER.info("别名脚本已写出: %s", config.aliases_file)

    updated = add_source_line(config.startup_files, config.aliases_file, dry_run=runner.dry_run)
    source_aliases(config.aliases_file, runner)

    artifacts = {"aliases": config.aliases_file}
    artifacts.update({rc_file.name: rc_file for rc_file in updated})
    return StepResult.succeeded("install_shell_aliases", **artifacts)


__all__ = [
    "ALIASES_TEMPLATE",
    "ShellConfig",
    "add_source_line",
    "install_shell_aliases",
    "render_aliases",
    "source_aliases",
    "source_line",
]
