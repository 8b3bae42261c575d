class DeploymentCancelledException(Exception):
    pass
