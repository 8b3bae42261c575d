from logging import Logger
from threading import Event
from time import monotonic
from typing import Optional

from ecs_deployer.domain.convergence_timeout_exception import ConvergenceTimeoutException
from ecs_deployer.domain.convergence_wait_aborted_exception import ConvergenceWaitAbortedException
from ecs_deployer.domain.deployment_cancelled_exception import DeploymentCancelledException
from ecs_deployer.domain.deployment_configuration import DeploymentConfiguration
from ecs_deployer.domain.ecs_gateway import EcsGateway
from ecs_deployer.domain.ecs_gateway_exception import EcsGatewayException
from ecs_deployer.domain.service_deployment import ServiceDeployment


class ConvergencePoller:
    def __init__(self, ecs_gateway: EcsGateway, configuration: DeploymentConfiguration, logger: Logger):
        self.__ecs_gateway = ecs_gateway
        self.__configuration = configuration
        self.__logger = logger

    def wait_for_convergence(self, cluster: str, service: str, task_definition_arn: str,
                             cancellation: Optional[Event] = None) -> None:
        """
        Blocks until the service's deployment of the given task definition is running its desired number of tasks.

        The first status query is made straight away and then once per poll interval. Setting the cancellation
        event interrupts the wait between queries.
        """
        if cancellation is None:
            cancellation = Event()

        timeout_seconds = self.__configuration.convergence_timeout_seconds
        deadline = None if timeout_seconds is None else monotonic() + timeout_seconds

        while True:
            if cancellation.is_set():
                raise DeploymentCancelledException(f'Cancelled whilst waiting for service "{service}" to converge')

            deployment = self.__find_deployment(cluster, service, task_definition_arn)

            if deployment is None:
                self.__logger.info(
                    f'Deployment of {task_definition_arn} is not visible on service "{service}" yet',
                    extra=dict(task_definition_arn=task_definition_arn)
                )
            else:
                self.__logger.info(
                    f'--> desired: {deployment.desired_count}, pending: {deployment.pending_count}, '
                    f'running: {deployment.running_count}',
                    extra=dict(
                        desired_count=deployment.desired_count,
                        pending_count=deployment.pending_count,
                        running_count=deployment.running_count
                    )
                )

                if deployment.converged:
                    self.__logger.info(f'Service "{service}" has converged on {task_definition_arn}')
                    return

            pause_seconds = self.__configuration.poll_interval_seconds

            if deadline is not None:
                remaining_seconds = deadline - monotonic()

                if remaining_seconds <= 0:
                    assert timeout_seconds is not None
                    raise ConvergenceTimeoutException(service, timeout_seconds)

                pause_seconds = min(pause_seconds, remaining_seconds)

            if cancellation.wait(pause_seconds):
                raise DeploymentCancelledException(f'Cancelled whilst waiting for service "{service}" to converge')

    def __find_deployment(self, cluster: str, service: str, task_definition_arn: str) -> Optional[ServiceDeployment]:
        try:
            deployments = self.__ecs_gateway.describe_services(cluster, service)
        except EcsGatewayException as e:
            raise ConvergenceWaitAbortedException(service, e) from e

        return next(
            (deployment for deployment in deployments if deployment.task_definition_arn == task_definition_arn),
            None
        )
