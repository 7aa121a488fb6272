"""平台探测子模块。"""

from .detect import (
    PlatformInfo,
    UnsupportedPlatformError,
    current_ostype,
    detect_num_cores,
    detect_platform,
)

__all__ = [
    "PlatformInfo",
    "UnsupportedPlatformError",
    "current_ostype",
    "detect_num_cores",
    "detect_platform",
]
