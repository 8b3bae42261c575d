from ecs_deployer.domain.ecs_gateway_exception import EcsGatewayException


class ConvergenceWaitAbortedException(Exception):
    def __init__(self, service: str, cause: EcsGatewayException):
        super().__init__(f'Stopped waiting for service "{service}" to converge: {cause}')
        self.service = service
        self.cause = cause
