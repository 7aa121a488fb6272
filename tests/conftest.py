"""测试公共夹具：记录命令而不真正执行的 CommandRunner。"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pytest

from su2_setup.pipeline import PipelineConfig
from su2_setup.utils.commands import CommandRunner


class RecordingRunner(CommandRunner):
    """按可执行文件名返回预设输出，或模拟失败。"""

    def __init__(
        self,
        *,
        outputs: Optional[Dict[str, str]] = None,
        failures: Iterable[str] = (),
        available: Iterable[str] = (),
        dry_run: bool = False,
    ) -> None:
        super().__init__(dry_run=dry_run, env={"PATH": "/usr/bin"})
        self.calls: List[Tuple[List[str], Optional[Path]]] = []
        self.outputs = outputs or {}
        self.failures = set(failures)
        self.available = set(available)

    def which(self, name: str) -> Optional[str]:
        return f"/usr/bin/{name}" if name in self.available else None

    def _execute(self, args, cwd):
        self.calls.append((list(args), Path(cwd) if cwd else None))
        if args[0] in self.failures:
            return 2, ["error: simulated failure\n"]
        return 0, [self.outputs.get(args[0], "")]

    @property
    def commands(self) -> List[List[str]]:
        return [args for args, _ in self.calls]

    def executables(self) -> List[str]:
        return [args[0] for args in self.commands]


@pytest.fixture
def home(tmp_path, monkeypatch):
    home_dir = tmp_path.resolve() / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


@pytest.fixture
def install_dir(tmp_path):
    return tmp_path.resolve() / "su2_install"


@pytest.fixture
def config(tmp_path, home, install_dir):
    data = {
        "install_dir": str(install_dir),
        "num_cores": 2,
        "log_file": None,
    }
    return PipelineConfig.from_dict(data, tmp_path)


@pytest.fixture
def runner():
    return RecordingRunner()


@pytest.fixture
def make_runner():
    return RecordingRunner
