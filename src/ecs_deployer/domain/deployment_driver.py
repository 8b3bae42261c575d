from logging import Logger
from threading import Event
from typing import Optional, Callable, TypeVar

from ecs_deployer.domain.convergence_poller import ConvergencePoller
from ecs_deployer.domain.deployment_configuration import DeploymentConfiguration
from ecs_deployer.domain.deployment_stage import DeploymentStage
from ecs_deployer.domain.deployment_stage_failed_exception import DeploymentStageFailedException
from ecs_deployer.domain.ecs_gateway import EcsGateway
from ecs_deployer.domain.ecs_gateway_exception import EcsGatewayException
from ecs_deployer.domain.stale_task_reconciler import StaleTaskReconciler
from ecs_deployer.domain.task_definition_mutator import TaskDefinitionMutator

T = TypeVar('T')


class DeploymentDriver:
    def __init__(self, ecs_gateway: EcsGateway, task_definition_mutator: TaskDefinitionMutator,
                 stale_task_reconciler: StaleTaskReconciler, convergence_poller: ConvergencePoller,
                 configuration: DeploymentConfiguration, logger: Logger):
        self.__ecs_gateway = ecs_gateway
        self.__task_definition_mutator = task_definition_mutator
        self.__stale_task_reconciler = stale_task_reconciler
        self.__convergence_poller = convergence_poller
        self.__configuration = configuration
        self.__logger = logger

    def deploy(self, cluster: str, service: str, family: str, image_name: str, tag: str,
               desired_count: Optional[int] = None, cancellation: Optional[Event] = None) -> str:
        """
        Rolls the service out onto a new revision of `family` that runs `<image_name>:<tag>`, blocking until the
        service has converged on it.

        Returns the ARN of the newly registered task definition revision. A desired count of None leaves the
        service's desired count as it is.
        """
        if desired_count is not None and desired_count < 0:
            raise ValueError(f'Desired count must not be negative, got {desired_count}')

        current_task_definition = self.__in_stage(
            DeploymentStage.DESCRIBE_TASK_DEFINITION,
            lambda: self.__ecs_gateway.describe_task_definition(family)
        )
        self.__logger.info(
            f'Deriving new revision from {family}:{current_task_definition.revision}',
            extra=dict(family=family, revision=current_task_definition.revision)
        )

        new_task_definition = self.__task_definition_mutator.derive_new_revision(
            current_task_definition, image_name, tag
        )

        task_definition_arn = self.__in_stage(
            DeploymentStage.REGISTER_TASK_DEFINITION,
            lambda: self.__ecs_gateway.register_task_definition(new_task_definition)
        )
        self.__logger.info(f'Registered {task_definition_arn}', extra=dict(task_definition_arn=task_definition_arn))

        self.__in_stage(
            DeploymentStage.UPDATE_SERVICE,
            lambda: self.__ecs_gateway.update_service(cluster, service, desired_count, task_definition_arn)
        )
        self.__logger.info(
            f'Updated service "{service}" to use {task_definition_arn}',
            extra=dict(task_definition_arn=task_definition_arn)
        )

        if self.__configuration.stop_stale_tasks:
            self.__in_stage(
                DeploymentStage.STOP_STALE_TASKS,
                lambda: self.__stale_task_reconciler.stop_stale_tasks(cluster, family)
            )

        self.__convergence_poller.wait_for_convergence(cluster, service, task_definition_arn, cancellation)

        return task_definition_arn

    def __in_stage(self, stage: DeploymentStage, action: Callable[[], T]) -> T:
        self.__logger.debug(f'Starting to {stage.value}...', extra=dict(stage=stage.name))

        try:
            return action()
        except EcsGatewayException as e:
            self.__logger.error(f'Failed to {stage.value}', extra=dict(stage=stage.name))
            raise DeploymentStageFailedException(stage, e) from e
