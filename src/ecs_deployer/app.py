import logging
import os
import signal
import sys
from threading import Event
from types import FrameType
from typing import Mapping, Optional

from ecs_deployer import ecs_deployer
from ecs_deployer.domain.deployment_cancelled_exception import DeploymentCancelledException
from ecs_deployer.domain.deployment_configuration import DeploymentConfiguration
from ecs_deployer.json_log_formatter import JsonLogFormatter

EXIT_CODE_FAILED = 1
EXIT_CODE_MISCONFIGURED = 2
EXIT_CODE_CANCELLED = 130


def configuration_from(environment: Mapping[str, str]) -> DeploymentConfiguration:
    timeout_seconds = environment.get('ECS_DEPLOYER_TIMEOUT_SECONDS')

    return DeploymentConfiguration(
        poll_interval_seconds=float(environment.get('ECS_DEPLOYER_POLL_INTERVAL_SECONDS', '5')),
        convergence_timeout_seconds=float(timeout_seconds) if timeout_seconds else None,
        stop_stale_tasks=environment.get('ECS_DEPLOYER_STOP_STALE_TASKS', 'true').lower() not in ('false', '0', 'no')
    )


def desired_count_from(environment: Mapping[str, str]) -> Optional[int]:
    desired_count = environment.get('ECS_DEPLOYER_DESIRED_COUNT')
    return int(desired_count) if desired_count else None


def create_logger() -> logging.Logger:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonLogFormatter())

    logger = logging.getLogger('ecs_deployer')
    logger.addHandler(handler)
    logger.setLevel(os.environ.get('ECS_DEPLOYER_LOG_LEVEL', 'INFO').upper())

    return logger


def main() -> None:
    logger = create_logger()
    environment = os.environ

    try:
        configuration = configuration_from(environment)
        desired_count = desired_count_from(environment)
        cluster = environment['ECS_DEPLOYER_CLUSTER']
        service = environment['ECS_DEPLOYER_SERVICE']
        family = environment['ECS_DEPLOYER_FAMILY']
        image_name = environment['ECS_DEPLOYER_IMAGE']
        tag = environment['ECS_DEPLOYER_TAG']
    except KeyError as e:
        logger.error(f'Missing required environment variable {e}')
        sys.exit(EXIT_CODE_MISCONFIGURED)
    except ValueError as e:
        logger.error(f'Invalid configuration: {e}')
        sys.exit(EXIT_CODE_MISCONFIGURED)

    cancellation = Event()

    def cancel(signal_number: int, _: Optional[FrameType]) -> None:
        logger.warning(f'Received signal {signal_number}, cancelling deployment...')
        cancellation.set()

    signal.signal(signal.SIGINT, cancel)
    signal.signal(signal.SIGTERM, cancel)

    deployment_driver = ecs_deployer(
        logger,
        aws_profile=environment.get('AWS_PROFILE'),
        region=environment.get('AWS_REGION'),
        configuration=configuration
    )

    logger.info(f'Deploying {image_name}:{tag} to service "{service}" in cluster "{cluster}"')

    try:
        task_definition_arn = deployment_driver.deploy(
            cluster, service, family, image_name, tag, desired_count, cancellation
        )
    except DeploymentCancelledException as e:
        logger.error(str(e))
        sys.exit(EXIT_CODE_CANCELLED)
    except Exception as e:
        logger.exception('Deployment failed', exc_info=e)
        sys.exit(EXIT_CODE_FAILED)

    logger.info('Deployment completed successfully', extra=dict(task_definition_arn=task_definition_arn))


if __name__ == "__main__":
    main()
