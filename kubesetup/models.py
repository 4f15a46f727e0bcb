"""Data models for single-node provisioning."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from kubesetup.modules.context import StepContext


class ClusterState(str, Enum):
    """Whether kubeadm has already initialised a control plane on this host."""
    UNINITIALIZED = 'uninitialized'
    INITIALIZED = 'initialized'


@dataclass
class OSRelease:
    """Identity fields read from the OS descriptor file."""
    id: str
    version_id: str
    pretty_name: str = ''


@dataclass
class OperatorAccount:
    """A local account that receives a kubeconfig and runs kubectl steps."""
    name: str
    home: str
    uid: int = 0
    gid: int = 0

    @property
    def is_root(self) -> bool:
        return self.uid == 0


@dataclass
class CommandResult:
    """Outcome of one external command."""
    args: List[str]
    returncode: int
    output: str = ''

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class Step:
    """One named host-mutation step."""
    name: str
    description: str
    action: Callable[['StepContext'], None]


@dataclass
class StepResult:
    """Outcome of one step."""
    name: str
    success: bool
    returncode: Optional[int] = None
    error: Optional[str] = None
    duration: float = 0.0


@dataclass
class RunReport:
    """Tracks the results of a provisioning run."""
    results: List[StepResult] = field(default_factory=list)
    failed_step: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.failed_step is None

    @property
    def exit_code(self) -> int:
        if self.success:
            return 0
        failed = self.results[-1]
        return failed.returncode or 1

    def add(self, result: StepResult) -> None:
        """Record a step result, remembering the first failure."""
        self.results.append(result)
        if not result.success and self.failed_step is None:
            self.failed_step = result.name
