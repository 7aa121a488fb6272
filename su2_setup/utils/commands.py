"""外部命令执行工具。

安装流程的每一步都是对包管理器、wget、make、meson 等外部程序的顺序调用。
:class:`CommandRunner` 统一持有这些命令共享的环境变量（PATH/CC/CXX），
逐行转发输出到日志，并在返回码非零时抛出 :class:`CommandError`。
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]


class CommandError(RuntimeError):
    """外部命令执行失败。"""

    def __init__(self, command: Sequence[str], returncode: int, output: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        message = f"命令执行失败 (返回码 {returncode}): {format_command(command)}"
        if output:
            message += "\n" + output
        super().__init__(message)


def format_command(command: Sequence[str]) -> str:
    """将参数列表转换为可复制到终端的命令行文本。"""

    return " ".join(shlex.quote(str(part)) for part in command)


class CommandRunner:
    """顺序执行外部命令，并维护整个安装过程共享的环境变量。"""

    def __init__(
        self,
        *,
        dry_run: bool = False,
        env: Optional[Mapping[str, str]] = None,
        log_file: Optional[Path] = None,
        tail_lines: int = 40,
    ) -> None:
        self.dry_run = dry_run
        self.env: Dict[str, str] = dict(os.environ if env is None else env)
        self.log_file = log_file
        self.tail_lines = tail_lines

    def which(self, name: str) -> Optional[str]:
        """按照当前环境的 PATH 查找可执行文件。"""

        return shutil.which(name, path=self.env.get("PATH"))

    def prepend_path(self, directory: PathLike) -> None:
        """将目录加入 PATH 最前面，作用于后续所有命令。"""

        current = self.env.get("PATH", "")
        self.env["PATH"] = f"{directory}{os.pathsep}{current}" if current else str(directory)
        LOGGER.debug("PATH 更新为: %s", self.env["PATH"])

    def export(self, **variables: PathLike) -> None:
        """设置环境变量，相当于 shell 中的 ``export``。"""

        for key, value in variables.items():
            self.env[key] = str(value)
            LOGGER.info("export %s=%s", key, value)

    def run(self, command: Sequence[PathLike], *, cwd: Optional[PathLike] = None) -> str:
        """执行命令并返回完整输出（stdout 与 stderr 合并）。

        异常:
            CommandError: 命令返回码非零，或可执行文件不存在（返回码 127）。
        """

        args = [str(part) for part in command]
        location = f" (cwd={cwd})" if cwd else ""
        if self.dry_run:
            LOGGER.info("[dry-run] $ %s%s", format_command(args), location)
            return ""

        LOGGER.info("$ %s%s", format_command(args), location)
        returncode, lines = self._execute(args, cwd)
        output = "".join(lines)
        self._write_log(args, cwd, returncode, output)

        if returncode != 0:
            tail = "".join(lines[-self.tail_lines:])
            raise CommandError(args, returncode, tail)
        return output

    def _execute(self, args: List[str], cwd: Optional[PathLike]) -> Tuple[int, List[str]]:
        """启动子进程并逐行读取输出，返回 (返回码, 输出行列表)。"""

        try:
            process = subprocess.Popen(
                args,
                cwd=str(cwd) if cwd else None,
                env=self.env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except FileNotFoundError as exc:
            return 127, [f"{exc}\n"]

        lines: List[str] = []
        try:
            if process.stdout:
                for line in iter(process.stdout.readline, ""):
                    lines.append(line)
                    LOGGER.debug("%s", line.rstrip())
            process.wait()
        finally:
            if process.stdout:
                process.stdout.close()
            if process.poll() is None:
                process.kill()
                process.wait()

        return process.returncode, lines

    def _write_log(self, args: List[str], cwd: Optional[PathLike], returncode: int, output: str) -> None:
        """追加命令及其输出到日志文件，便于排查编译失败的原因。"""

        if self.log_file is None:
            return
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        with self.log_file.open("a", encoding="utf-8") as fh:
            fh.write(f"$ {format_command(args)}\n")
            if cwd:
                fh.write(f"# cwd: {cwd}\n")
            fh.write(output)
            if output and not output.endswith("\n"):
                fh.write("\n")
            fh.write(f"# 返回码: {returncode}\n\n")


__all__ = ["CommandError", "CommandRunner", "format_command"]
