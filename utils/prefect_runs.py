from typing import List

from prefect.client.orchestration import get_client
from prefect.client.schemas.filters import (
    FlowFilter,
    FlowFilterName,
    FlowRunFilter,
    FlowRunFilterState,
    FlowRunFilterStateType,
)
from prefect.client.schemas.objects import FlowRun, StateType

ACTIVE_STATE_TYPES = [StateType.PENDING, StateType.RUNNING, StateType.CANCELLING]


def find_active_flow_runs(flow_name: str) -> List[FlowRun]:
    """
    Return flow runs of flow_name that Prefect still considers in progress.
    """
    with get_client(sync_client=True) as client:
        return client.read_flow_runs(
            flow_filter=FlowFilter(name=FlowFilterName(any_=[flow_name])),
            flow_run_filter=FlowRunFilter(
                state=FlowRunFilterState(
                    type=FlowRunFilterStateType(any_=ACTIVE_STATE_TYPES)
                )
            ),
        )
