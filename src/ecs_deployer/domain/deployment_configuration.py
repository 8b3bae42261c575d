from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DeploymentConfiguration:
    poll_interval_seconds: float = 5
    convergence_timeout_seconds: Optional[float] = None
    stop_stale_tasks: bool = True
