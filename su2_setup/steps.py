"""安装步骤的执行结果模型。"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional


class StepStatus(Enum):
    """单个安装步骤的结局。"""

    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class StepResult:
    """记录步骤名称、结局、原因以及产出的文件路径。"""

    name: str
    status: StepStatus
    reason: Optional[str] = None
    artifacts: Dict[str, Path] = field(default_factory=dict)
    returncode: Optional[int] = None

    @classmethod
    def succeeded(cls, name: str, **artifacts: Path) -> "StepResult":
        return cls(name=name, status=StepStatus.SUCCEEDED, artifacts=dict(artifacts))

    @classmethod
    def skipped(cls, name: str, reason: str, **artifacts: Path) -> "StepResult":
        return cls(name=name, status=StepStatus.SKIPPED, reason=reason, artifacts=dict(artifacts))

    @classmethod
    def failed(cls, name: str, reason: str, returncode: Optional[int] = None) -> "StepResult":
        return cls(name=name, status=StepStatus.FAILED, reason=reason, returncode=returncode)

    @property
    def ok(self) -> bool:
        """跳过与成功都不阻断流程。"""

        return self.status is not StepStatus.FAILED


__all__ = ["StepResult", "StepStatus"]
