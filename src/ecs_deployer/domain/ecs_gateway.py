from abc import ABCMeta, abstractmethod
from typing import List, Optional

from ecs_deployer.domain.running_task import RunningTask
from ecs_deployer.domain.service_deployment import ServiceDeployment
from ecs_deployer.domain.task_definition import TaskDefinition


class EcsGateway(metaclass=ABCMeta):
    @abstractmethod
    def describe_task_definition(self, family: str) -> TaskDefinition:
        pass

    @abstractmethod
    def register_task_definition(self, task_definition: TaskDefinition) -> str:
        pass

    @abstractmethod
    def update_service(self, cluster: str, service: str, desired_count: Optional[int] = None,
                       task_definition_arn: Optional[str] = None) -> None:
        pass

    @abstractmethod
    def list_tasks(self, cluster: str) -> List[str]:
        pass

    @abstractmethod
    def describe_tasks(self, cluster: str, task_arns: List[str]) -> List[RunningTask]:
        pass

    @abstractmethod
    def stop_task(self, cluster: str, task_arn: str, reason: str) -> None:
        pass

    @abstractmethod
    def describe_services(self, cluster: str, service: str) -> List[ServiceDeployment]:
        pass
