from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional

from ecs_deployer.domain.container_definition import ContainerDefinition


@dataclass(frozen=True)
class TaskDefinition:
    family: str
    container_definitions: List[ContainerDefinition]
    task_role_arn: Optional[str] = None
    network_mode: Optional[str] = None
    volumes: List[Dict[str, Any]] = field(default_factory=list)
    placement_constraints: List[Dict[str, Any]] = field(default_factory=list)
    # Registrable fields with no dedicated attribute, e.g. cpu, memory, executionRoleArn, tags
    additional_properties: Dict[str, Any] = field(default_factory=dict)
    revision: Optional[int] = None
