"""Shell 集成子模块。"""

from .aliases import ShellConfig, add_source_line, install_shell_aliases, render_aliases, source_line

__all__ = [
    "ShellConfig",
    "add_source_line",
    "install_shell_aliases",
    "render_aliases",
    "source_line",
]
