from logging import Logger
from typing import List, Tuple

from ecs_deployer.domain.ecs_gateway import EcsGateway
from ecs_deployer.domain.running_task import RunningTask
from ecs_deployer.domain.task_definition_identifier import TaskDefinitionIdentifier


class StaleTaskReconciler:
    def __init__(self, ecs_gateway: EcsGateway, logger: Logger):
        self.__ecs_gateway = ecs_gateway
        self.__logger = logger

    def stop_stale_tasks(self, cluster: str, new_family: str) -> None:
        """
        Stops every task in the cluster that was started from a task definition family other than `new_family`.

        Tasks of `new_family` are left to the service's own rolling update.
        """
        task_arns = self.__ecs_gateway.list_tasks(cluster)

        if not task_arns:
            self.__logger.info(f'No tasks running in cluster "{cluster}"')
            return

        running_tasks = self.__ecs_gateway.describe_tasks(cluster, task_arns)

        # Decompose every identifier before stopping anything so a malformed one leaves the cluster untouched
        identified_tasks: List[Tuple[RunningTask, TaskDefinitionIdentifier]] = [
            (running_task, running_task.task_definition) for running_task in running_tasks
        ]

        for running_task, task_definition in identified_tasks:
            fields = dict(
                task_arn=running_task.task_arn,
                family=task_definition.family,
                revision=task_definition.revision
            )

            if task_definition.family == new_family:
                self.__logger.info(f'Leaving task {running_task.task_arn} running', extra=fields)
                continue

            self.__logger.warning(
                f'Stopping task {running_task.task_arn} from family "{task_definition.family}"',
                extra=fields
            )
            self.__ecs_gateway.stop_task(
                cluster,
                running_task.task_arn,
                f'Superseded by deployment of task definition family "{new_family}"'
            )
