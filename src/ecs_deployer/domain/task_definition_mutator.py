from copy import deepcopy
from dataclasses import replace
from logging import Logger

from ecs_deployer.domain.container_definition import ContainerDefinition
from ecs_deployer.domain.task_definition import TaskDefinition


class TaskDefinitionMutator:
    def __init__(self, logger: Logger):
        self.__logger = logger

    def derive_new_revision(self, current: TaskDefinition, image_name: str, tag: str) -> TaskDefinition:
        """
        Returns a copy of the given task definition, ready for registration, in which every container whose image
        starts with the given image name runs `<image_name>:<tag>` instead.

        All other fields are carried over unchanged because registration replaces the whole task definition.
        """
        if not image_name:
            raise ValueError('Image name must not be empty')

        if not tag:
            raise ValueError('Tag must not be empty')

        new_image = f'{image_name}:{tag}'
        container_definitions = [
            self.__with_image(container_definition, new_image)
            if container_definition.image.startswith(image_name)
            else deepcopy(container_definition)
            for container_definition in current.container_definitions
        ]

        if not any(container_definition.image.startswith(image_name)
                   for container_definition in current.container_definitions):
            self.__logger.warning(
                f'No container in task definition family "{current.family}" uses image "{image_name}"; '
                f'the new revision will be identical to the current one',
                extra=dict(family=current.family)
            )

        return replace(
            deepcopy(current),
            container_definitions=container_definitions,
            revision=None
        )

    @staticmethod
    def __with_image(container_definition: ContainerDefinition, image: str) -> ContainerDefinition:
        return replace(deepcopy(container_definition), image=image)
