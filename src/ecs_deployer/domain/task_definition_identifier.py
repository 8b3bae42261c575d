from dataclasses import dataclass

from ecs_deployer.domain.malformed_task_definition_identifier_exception import \
    MalformedTaskDefinitionIdentifierException

TASK_DEFINITION_RESOURCE_PREFIX = 'task-definition/'


@dataclass(frozen=True)
class TaskDefinitionIdentifier:
    """
    Family and revision of a task definition, as decomposed from its ARN:

        arn:aws:ecs:eu-west-1:123456789012:task-definition/web:42
    """
    family: str
    revision: int

    @classmethod
    def parse(cls, task_definition_arn: str) -> 'TaskDefinitionIdentifier':
        arn_parts = task_definition_arn.split(':')

        if len(arn_parts) != 7:
            raise MalformedTaskDefinitionIdentifierException(
                task_definition_arn,
                f'expected 7 colon-separated components but found {len(arn_parts)}'
            )

        resource, revision = arn_parts[5], arn_parts[6]

        if not resource.startswith(TASK_DEFINITION_RESOURCE_PREFIX) or \
                len(resource) == len(TASK_DEFINITION_RESOURCE_PREFIX):
            raise MalformedTaskDefinitionIdentifierException(
                task_definition_arn,
                f'expected resource of the form "{TASK_DEFINITION_RESOURCE_PREFIX}<family>" but found "{resource}"'
            )

        if not revision.isdigit():
            raise MalformedTaskDefinitionIdentifierException(
                task_definition_arn,
                f'expected a numeric revision but found "{revision}"'
            )

        return cls(family=resource[len(TASK_DEFINITION_RESOURCE_PREFIX):], revision=int(revision))
