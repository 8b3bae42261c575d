from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ServiceDeployment:
    task_definition_arn: str
    desired_count: int
    pending_count: int
    running_count: int
    status: Optional[str] = None
    rollout_state: Optional[str] = None

    @property
    def converged(self) -> bool:
        return self.running_count == self.desired_count
