from ecs_deployer.domain.deployment_cancelled_exception import DeploymentCancelledException


class ConvergenceTimeoutException(DeploymentCancelledException):
    def __init__(self, service: str, timeout_seconds: float):
        super().__init__(f'Service "{service}" did not converge within {timeout_seconds} seconds')
        self.service = service
        self.timeout_seconds = timeout_seconds
