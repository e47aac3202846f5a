import time
from functools import partial
from typing import Callable, Optional

from prefect import flow, get_run_logger

from flows.import_flow import IMPORT_FLOW_NAME, import_job
from utils.prefect_runs import find_active_flow_runs


class RunGuard:
    """
    Launch a job unless a previous run of it is still active.

    The check against the run ledger is cooperative, not a lock: two triggers
    racing between check and launch can both start a run.
    """

    def __init__(
        self,
        flow_name: str,
        launch: Callable,
        find_active: Callable,
        logger,
        clock: Callable[[], float] = time.time,
    ):
        self.flow_name = flow_name
        self.launch = launch
        self.find_active = find_active
        self.logger = logger
        self.clock = clock
        self._last_run_id = 0

    def next_run_id(self) -> int:
        run_id = max(int(self.clock() * 1000), self._last_run_id + 1)
        self._last_run_id = run_id
        return run_id

    def trigger(self):
        """Returns the launched run's final state, or None when the trigger was skipped."""
        active = self.find_active(self.flow_name)
        if active:
            self.logger.info(
                f"⏸ Job {self.flow_name} is already running ({len(active)} active). Skipping this trigger."
            )
            return None

        run_id = self.next_run_id()
        self.logger.info("=" * 44)
        self.logger.info(f"🚀 JOB START [{run_id}] - {time.strftime('%Y-%m-%d %H:%M:%S')}")
        self.logger.info("=" * 44)

        state = self.launch(run_timestamp=run_id)

        self.logger.info("-" * 44)
        self.logger.info(f"✅ JOB END [{run_id}] - Status: {state.name}")
        self.logger.info("-" * 44)
        return state


@flow(name="Greenbook_Import_Scheduler")
def scheduled_import(
    container_name: Optional[str] = None,
    batch_size: Optional[int] = None,
) -> str:
    """
    Cron entry point: run the import job unless one is already in progress.
    """
    logger = get_run_logger()
    guard = RunGuard(
        IMPORT_FLOW_NAME,
        launch=partial(
            import_job,
            container_name=container_name,
            batch_size=batch_size,
            return_state=True,
        ),
        find_active=find_active_flow_runs,
        logger=logger,
    )
    state = guard.trigger()
    return state.name if state is not None else "Skipped"
