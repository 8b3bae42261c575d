from enum import Enum


class DeploymentStage(Enum):
    DESCRIBE_TASK_DEFINITION = 'describe task definition'
    REGISTER_TASK_DEFINITION = 'register task definition'
    UPDATE_SERVICE = 'update service'
    STOP_STALE_TASKS = 'stop stale tasks'
