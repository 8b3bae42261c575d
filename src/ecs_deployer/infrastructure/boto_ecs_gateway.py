from logging import Logger
from typing import List, Optional, Dict, Any, Callable, TypeVar

from botocore.exceptions import ClientError, BotoCoreError
from mypy_boto3_ecs import ECSClient
from mypy_boto3_ecs.type_defs import ContainerDefinitionOutputTypeDef, DeploymentTypeDef

from ecs_deployer.domain.container_definition import ContainerDefinition
from ecs_deployer.domain.ecs_gateway import EcsGateway
from ecs_deployer.domain.ecs_gateway_exception import EcsGatewayException
from ecs_deployer.domain.running_task import RunningTask
from ecs_deployer.domain.service_deployment import ServiceDeployment
from ecs_deployer.domain.task_definition import TaskDefinition

T = TypeVar('T')

# Reported by DescribeTaskDefinition but rejected by RegisterTaskDefinition
POST_REGISTRATION_FIELDS = [
    'taskDefinitionArn',
    'revision',
    'status',
    'requiresAttributes',
    'compatibilities',
    'registeredAt',
    'registeredBy',
    'deregisteredAt',
]

MAPPED_FIELDS = [
    'family',
    'containerDefinitions',
    'taskRoleArn',
    'networkMode',
    'volumes',
    'placementConstraints',
]

DESCRIBE_TASKS_BATCH_SIZE = 100


class BotoEcsGateway(EcsGateway):
    def __init__(self, ecs_client: ECSClient, logger: Logger):
        self.__ecs_client = ecs_client
        self.__logger = logger

    def describe_task_definition(self, family: str) -> TaskDefinition:
        describe_task_definition_result = self.__call(
            'DescribeTaskDefinition',
            lambda: self.__ecs_client.describe_task_definition(taskDefinition=family, include=['TAGS'])
        )
        task_definition_description = describe_task_definition_result['taskDefinition']

        additional_properties: Dict[str, Any] = {
            key: value for key, value in task_definition_description.items()
            if key not in MAPPED_FIELDS and key not in POST_REGISTRATION_FIELDS
        }

        tags = describe_task_definition_result.get('tags')

        if tags:
            additional_properties['tags'] = tags

        return TaskDefinition(
            family=task_definition_description['family'],
            container_definitions=[
                self.__to_container_definition(container_definition_description)
                for container_definition_description in task_definition_description.get('containerDefinitions', [])
            ],
            task_role_arn=task_definition_description.get('taskRoleArn'),
            network_mode=task_definition_description.get('networkMode'),
            volumes=[dict(volume) for volume in task_definition_description.get('volumes', [])],
            placement_constraints=[
                dict(placement_constraint)
                for placement_constraint in task_definition_description.get('placementConstraints', [])
            ],
            additional_properties=additional_properties,
            revision=task_definition_description.get('revision')
        )

    def register_task_definition(self, task_definition: TaskDefinition) -> str:
        register_task_definition_kwargs: Dict[str, Any] = dict(
            task_definition.additional_properties,
            family=task_definition.family,
            containerDefinitions=[
                dict(container_definition.settings, name=container_definition.name, image=container_definition.image)
                for container_definition in task_definition.container_definitions
            ],
            volumes=task_definition.volumes,
            placementConstraints=task_definition.placement_constraints
        )

        if task_definition.task_role_arn is not None:
            register_task_definition_kwargs['taskRoleArn'] = task_definition.task_role_arn

        if task_definition.network_mode is not None:
            register_task_definition_kwargs['networkMode'] = task_definition.network_mode

        self.__logger.debug(f'Registering new revision of task definition family "{task_definition.family}"...')

        register_task_definition_result = self.__call(
            'RegisterTaskDefinition',
            lambda: self.__ecs_client.register_task_definition(**register_task_definition_kwargs)
        )

        return register_task_definition_result['taskDefinition']['taskDefinitionArn']

    def update_service(self, cluster: str, service: str, desired_count: Optional[int] = None,
                       task_definition_arn: Optional[str] = None) -> None:
        update_service_kwargs: Dict[str, Any] = dict(cluster=cluster, service=service)

        if desired_count is not None:
            update_service_kwargs['desiredCount'] = desired_count

        if task_definition_arn is not None:
            update_service_kwargs['taskDefinition'] = task_definition_arn

        self.__call('UpdateService', lambda: self.__ecs_client.update_service(**update_service_kwargs))

    def list_tasks(self, cluster: str) -> List[str]:
        def list_all_task_arns() -> List[str]:
            list_tasks_paginator = self.__ecs_client.get_paginator('list_tasks')

            return [
                task_arn
                for page in list_tasks_paginator.paginate(cluster=cluster)
                for task_arn in page['taskArns']
            ]

        return self.__call('ListTasks', list_all_task_arns)

    def describe_tasks(self, cluster: str, task_arns: List[str]) -> List[RunningTask]:
        running_tasks: List[RunningTask] = []

        for batch_start in range(0, len(task_arns), DESCRIBE_TASKS_BATCH_SIZE):
            batch = task_arns[batch_start:batch_start + DESCRIBE_TASKS_BATCH_SIZE]
            describe_tasks_result = self.__call(
                'DescribeTasks',
                lambda: self.__ecs_client.describe_tasks(cluster=cluster, tasks=batch)
            )

            # Tasks that stopped after being listed are reported as failures
            for failure in describe_tasks_result.get('failures', []):
                self.__logger.debug(f'Task {failure.get("arn")} could not be described: {failure.get("reason")}')

            running_tasks.extend(
                RunningTask(task_arn=task['taskArn'], task_definition_arn=task['taskDefinitionArn'])
                for task in describe_tasks_result['tasks']
            )

        return running_tasks

    def stop_task(self, cluster: str, task_arn: str, reason: str) -> None:
        self.__call('StopTask', lambda: self.__ecs_client.stop_task(cluster=cluster, task=task_arn, reason=reason))

    def describe_services(self, cluster: str, service: str) -> List[ServiceDeployment]:
        describe_services_result = self.__call(
            'DescribeServices',
            lambda: self.__ecs_client.describe_services(cluster=cluster, services=[service])
        )

        service_descriptions = describe_services_result.get('services', [])

        if not service_descriptions:
            failure_reasons = ', '.join(
                failure.get('reason', 'unknown reason') for failure in describe_services_result.get('failures', [])
            )
            raise EcsGatewayException(
                'DescribeServices',
                f'service "{service}" not found in cluster "{cluster}"' +
                (f' ({failure_reasons})' if failure_reasons else '')
            )

        return [
            self.__to_service_deployment(deployment_description)
            for deployment_description in service_descriptions[0].get('deployments', [])
        ]

    @staticmethod
    def __to_container_definition(container_definition_description: ContainerDefinitionOutputTypeDef) \
            -> ContainerDefinition:
        return ContainerDefinition(
            name=container_definition_description['name'],
            image=container_definition_description['image'],
            settings={
                key: value for key, value in container_definition_description.items() if key not in ('name', 'image')
            }
        )

    @staticmethod
    def __to_service_deployment(deployment_description: DeploymentTypeDef) -> ServiceDeployment:
        return ServiceDeployment(
            task_definition_arn=deployment_description['taskDefinition'],
            desired_count=deployment_description['desiredCount'],
            pending_count=deployment_description['pendingCount'],
            running_count=deployment_description['runningCount'],
            status=deployment_description.get('status'),
            rollout_state=deployment_description.get('rolloutState')
        )

    @staticmethod
    def __call(operation: str, action: Callable[[], T]) -> T:
        try:
            return action()
        except ClientError as client_error:
            error = client_error.response.get('Error', {})
            raise EcsGatewayException(
                operation,
                f'{error.get("Code", "UnknownError")}: {error.get("Message", str(client_error))}'
            ) from client_error
        except BotoCoreError as botocore_error:
            raise EcsGatewayException(operation, str(botocore_error)) from botocore_error
