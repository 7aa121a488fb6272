"""系统依赖安装子模块。"""

from .install import install_python_tools, install_system_packages, system_package_commands

__all__ = [
    "install_python_tools",
    "install_system_packages",
    "system_package_commands",
]
