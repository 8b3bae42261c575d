from dataclasses import dataclass

from ecs_deployer.domain.task_definition_identifier import TaskDefinitionIdentifier


@dataclass(frozen=True)
class RunningTask:
    task_arn: str
    task_definition_arn: str

    @property
    def task_definition(self) -> TaskDefinitionIdentifier:
        return TaskDefinitionIdentifier.parse(self.task_definition_arn)
