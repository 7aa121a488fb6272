"""配置加载与外部命令执行工具。"""

from .commands import CommandError, CommandRunner
from .config import ConfigError, load_config, resolve_path

__all__ = [
    "CommandError",
    "CommandRunner",
    "ConfigError",
    "load_config",
    "resolve_path",
]
