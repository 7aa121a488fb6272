"""从源码安装 SU2 与 MPICH 的自动化工具。"""

from .pipeline import PipelineConfig, run_pipeline
from .steps import StepResult, StepStatus

__version__ = "0.1.0"

__all__ = [
    "PipelineConfig",
    "StepResult",
    "StepStatus",
    "run_pipeline",
]
