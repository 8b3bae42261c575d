from dataclasses import dataclass, field
from typing import Dict, Any


@dataclass(frozen=True)
class ContainerDefinition:
    name: str
    image: str
    settings: Dict[str, Any] = field(default_factory=dict)
