from logging import Logger

import pytest

from ecs_deployer.domain.ecs_gateway import EcsGateway
from ecs_deployer.domain.ecs_gateway_exception import EcsGatewayException
from ecs_deployer.domain.malformed_task_definition_identifier_exception import \
    MalformedTaskDefinitionIdentifierException
from ecs_deployer.domain.running_task import RunningTask
from ecs_deployer.domain.stale_task_reconciler import StaleTaskReconciler
from ecs_deployer_tests.support.builders.ecs_builders import a_running_task_with
from ecs_deployer_tests.support.mocking import mock_class, when_calling, verify, inspect


@pytest.fixture(scope='function')
def ecs_gateway() -> EcsGateway:
    return mock_class(EcsGateway)


@pytest.fixture(scope='function')
def stale_task_reconciler(ecs_gateway: EcsGateway, logger: Logger) -> StaleTaskReconciler:
    return StaleTaskReconciler(ecs_gateway, logger)


def test_stops_only_tasks_from_other_families(ecs_gateway: EcsGateway,
                                              stale_task_reconciler: StaleTaskReconciler) -> None:
    when_calling(ecs_gateway.list_tasks).always_return(['task-1', 'task-2', 'task-3'])
    when_calling(ecs_gateway.describe_tasks).always_return([
        a_running_task_with(task_arn='task-1', family='app', revision=1),
        a_running_task_with(task_arn='task-2', family='app', revision=2),
        a_running_task_with(task_arn='task-3', family='other', revision=5)
    ])

    stale_task_reconciler.stop_stale_tasks('the-cluster', 'app')

    verify(ecs_gateway.stop_task).was_called_once_with(
        'the-cluster', 'task-3', 'Superseded by deployment of task definition family "app"'
    )


def test_describes_listed_tasks_in_cluster(ecs_gateway: EcsGateway,
                                           stale_task_reconciler: StaleTaskReconciler) -> None:
    when_calling(ecs_gateway.list_tasks).always_return(['task-1', 'task-2'])
    when_calling(ecs_gateway.describe_tasks).always_return([])

    stale_task_reconciler.stop_stale_tasks('the-cluster', 'app')

    verify(ecs_gateway.list_tasks).was_called_once_with('the-cluster')
    verify(ecs_gateway.describe_tasks).was_called_once_with('the-cluster', ['task-1', 'task-2'])


def test_does_nothing_when_cluster_has_no_tasks(ecs_gateway: EcsGateway,
                                                stale_task_reconciler: StaleTaskReconciler) -> None:
    when_calling(ecs_gateway.list_tasks).always_return([])

    stale_task_reconciler.stop_stale_tasks('the-cluster', 'app')

    verify(ecs_gateway.describe_tasks).was_not_called()
    verify(ecs_gateway.stop_task).was_not_called()


def test_leaves_tasks_running_when_all_belong_to_new_family(ecs_gateway: EcsGateway,
                                                            stale_task_reconciler: StaleTaskReconciler) -> None:
    when_calling(ecs_gateway.list_tasks).always_return(['task-1', 'task-2'])
    when_calling(ecs_gateway.describe_tasks).always_return([
        a_running_task_with(task_arn='task-1', family='app', revision=3),
        a_running_task_with(task_arn='task-2', family='app', revision=4)
    ])

    stale_task_reconciler.stop_stale_tasks('the-cluster', 'app')

    verify(ecs_gateway.stop_task).was_not_called()


def test_raises_exception_without_stopping_anything_when_task_definition_identifier_is_malformed(
        ecs_gateway: EcsGateway, stale_task_reconciler: StaleTaskReconciler) -> None:
    when_calling(ecs_gateway.list_tasks).always_return(['task-1', 'task-2'])
    when_calling(ecs_gateway.describe_tasks).always_return([
        a_running_task_with(task_arn='task-1', family='other'),
        RunningTask(task_arn='task-2', task_definition_arn='not-an-arn')
    ])

    with pytest.raises(MalformedTaskDefinitionIdentifierException, match='not-an-arn'):
        stale_task_reconciler.stop_stale_tasks('the-cluster', 'app')

    verify(ecs_gateway.stop_task).was_not_called()


def test_stops_reconciling_when_a_stop_request_fails(ecs_gateway: EcsGateway,
                                                     stale_task_reconciler: StaleTaskReconciler) -> None:
    when_calling(ecs_gateway.list_tasks).always_return(['task-1', 'task-2', 'task-3'])
    when_calling(ecs_gateway.describe_tasks).always_return([
        a_running_task_with(task_arn='task-1', family='other'),
        a_running_task_with(task_arn='task-2', family='another'),
        a_running_task_with(task_arn='task-3', family='yet-another')
    ])
    when_calling(ecs_gateway.stop_task).respond_with(None, EcsGatewayException('StopTask', 'ServerException: boom'))

    with pytest.raises(EcsGatewayException, match='boom'):
        stale_task_reconciler.stop_stale_tasks('the-cluster', 'app')

    assert [kall.args[1] for kall in inspect(ecs_gateway.stop_task).call_args_list] == ['task-1', 'task-2']
