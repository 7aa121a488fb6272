"""SU2 编译子模块。"""

from .build import SU2Config, build_su2, clone_su2

__all__ = [
    "SU2Config",
    "build_su2",
    "clone_su2",
]
