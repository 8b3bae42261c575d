from ecs_deployer.domain.deployment_stage import DeploymentStage
from ecs_deployer.domain.ecs_gateway_exception import EcsGatewayException


class DeploymentStageFailedException(Exception):
    def __init__(self, stage: DeploymentStage, cause: EcsGatewayException):
        super().__init__(f'Deployment failed whilst attempting to {stage.value}: {cause}')
        self.stage = stage
        self.cause = cause
