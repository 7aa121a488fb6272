"""MPICH 编译子模块。"""

from .build import MPICHConfig, build_mpich, download_mpich, mpi_compilers

__all__ = [
    "MPICHConfig",
    "build_mpich",
    "download_mpich",
    "mpi_compilers",
]
