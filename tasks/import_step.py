"""
Per-entity import step: fetch the source blob, validate its header, upsert its
rows in fixed-size chunks and always remove the downloaded temp file.

The step is an explicit state machine:

    NOT_STARTED -> FETCHING -> VALIDATING -> WRITING -> CLEANING_UP -> DONE

FAILED is reachable from every non-terminal state. A fetch failure goes
straight to FAILED because no local file exists yet; every later failure
passes through CLEANING_UP first.
"""
import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from prefect import get_run_logger, task
from prefect.cache_policies import NO_CACHE

from models.errors import InvalidTransition
from models.schemas import EntityConfig
from utils.blob import download_blob
from utils.csv_files import read_records, validate_header
from utils.pagination import chunk_iter
from utils.postgres import get_connection, upsert_records

DEFAULT_BATCH_SIZE = 10


class StepState(enum.Enum):
    NOT_STARTED = "not_started"
    FETCHING = "fetching"
    VALIDATING = "validating"
    WRITING = "writing"
    CLEANING_UP = "cleaning_up"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES = {StepState.DONE, StepState.FAILED}

ALLOWED_TRANSITIONS = {
    StepState.NOT_STARTED: {StepState.FETCHING, StepState.FAILED},
    StepState.FETCHING: {StepState.VALIDATING, StepState.FAILED},
    StepState.VALIDATING: {StepState.WRITING, StepState.CLEANING_UP, StepState.FAILED},
    StepState.WRITING: {StepState.CLEANING_UP, StepState.FAILED},
    StepState.CLEANING_UP: {StepState.DONE, StepState.FAILED},
    StepState.DONE: set(),
    StepState.FAILED: set(),
}


@dataclass
class StepResult:
    entity_name: str
    state: StepState
    rows_written: int
    chunks_committed: int


class ImportStep:
    """Import one entity's source file into its table."""

    def __init__(
        self,
        entity: EntityConfig,
        container_name: str,
        batch_size: int = DEFAULT_BATCH_SIZE,
        logger: Optional[logging.Logger] = None,
        fetch: Optional[Callable] = None,
        validate: Optional[Callable] = None,
        read: Optional[Callable] = None,
        connect: Optional[Callable] = None,
        write: Optional[Callable] = None,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.entity = entity
        self.container_name = container_name
        self.batch_size = batch_size
        self.logger = logger or logging.getLogger(__name__)
        self.fetch = fetch or download_blob
        self.validate = validate or validate_header
        self.read = read or read_records
        self.connect = connect or get_connection
        self.write = write or upsert_records

        self.state = StepState.NOT_STARTED
        self.path: Optional[Path] = None
        self.rows_written = 0
        self.chunks_committed = 0

    def _transition(self, new_state: StepState) -> None:
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            raise InvalidTransition(
                f"{self.entity.entity_name}: cannot move from {self.state.name} to {new_state.name}"
            )
        self.logger.debug(f"{self.entity.entity_name}: {self.state.name} -> {new_state.name}")
        self.state = new_state

    def run(self) -> StepResult:
        entity = self.entity

        self._transition(StepState.FETCHING)
        try:
            self.path = Path(self.fetch(self.container_name, entity.file_name))
        except Exception as exc:
            self.logger.error(f"❌ Could not fetch {entity.file_name}: {exc}")
            self._transition(StepState.FAILED)
            raise
        self.logger.info(f"📁 Downloaded {entity.file_name} to temp file: {self.path}")

        succeeded = False
        try:
            self._transition(StepState.VALIDATING)
            self.validate(self.path, entity.columns)

            self._transition(StepState.WRITING)
            self._write_chunks()
            succeeded = True
        except Exception as exc:
            self.logger.error(f"❌ {entity.entity_name} import failed in {self.state.name}: {exc}")
            raise
        finally:
            self._transition(StepState.CLEANING_UP)
            self._cleanup()
            self._transition(StepState.DONE if succeeded else StepState.FAILED)

        self.logger.info(
            f"✅ {entity.entity_name}: {self.rows_written} rows upserted into "
            f"{entity.table_name} in {self.chunks_committed} chunks"
        )
        return StepResult(
            entity_name=entity.entity_name,
            state=self.state,
            rows_written=self.rows_written,
            chunks_committed=self.chunks_committed,
        )

    def _write_chunks(self) -> None:
        records = self.read(self.path, self.entity.columns, self.entity.record_type)
        conn = self.connect()
        try:
            for chunk in chunk_iter(records, self.batch_size):
                self.rows_written += self.write(conn, self.entity, chunk)
                self.chunks_committed += 1
                self.logger.debug(
                    f"Committed chunk {self.chunks_committed} ({len(chunk)} rows) to {self.entity.table_name}"
                )
        finally:
            conn.close()

    def _cleanup(self) -> None:
        try:
            self.path.unlink()
            self.logger.info(f"🧹 Deleted temp file {self.path}")
        except OSError as exc:
            self.logger.warning(f"⚠️ Could not delete temp file {self.path}: {exc}")


@task(
    name="import_entity",
    description="Fetch one entity's CSV from blob storage and upsert it into PostgreSQL",
    cache_policy=NO_CACHE,
    tags=["import", "blob", "postgres"],
)
def import_entity(
    entity: EntityConfig,
    container_name: str,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> StepResult:
    """
    Run the import step for a single entity with the task's run logger.
    """
    logger = get_run_logger()
    logger.info(f"Starting import of {entity.file_name} into {entity.table_name}")
    step = ImportStep(entity, container_name, batch_size=batch_size, logger=logger)
    return step.run()
