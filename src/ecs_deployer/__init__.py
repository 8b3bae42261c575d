from logging import Logger
from typing import Optional

from boto3 import Session

from ecs_deployer.domain.convergence_poller import ConvergencePoller
from ecs_deployer.domain.deployment_configuration import DeploymentConfiguration
from ecs_deployer.domain.deployment_driver import DeploymentDriver
from ecs_deployer.domain.stale_task_reconciler import StaleTaskReconciler
from ecs_deployer.domain.task_definition_mutator import TaskDefinitionMutator
from ecs_deployer.infrastructure.boto_ecs_gateway import BotoEcsGateway

__all__ = ["ecs_deployer", "DeploymentConfiguration", "DeploymentDriver"]


def ecs_deployer(logger: Logger, aws_profile: Optional[str] = None, region: Optional[str] = None,
                 configuration: Optional[DeploymentConfiguration] = None) -> DeploymentDriver:
    boto_session = Session(profile_name=aws_profile, region_name=region)
    configuration = configuration or DeploymentConfiguration()
    ecs_gateway = BotoEcsGateway(boto_session.client('ecs'), logger)

    return DeploymentDriver(
        ecs_gateway,
        TaskDefinitionMutator(logger),
        StaleTaskReconciler(ecs_gateway, logger),
        ConvergencePoller(ecs_gateway, configuration, logger),
        configuration,
        logger
    )
