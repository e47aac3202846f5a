from typing import Dict, Optional

from prefect import flow, get_run_logger
from prefect.runtime import flow_run

from config import get_blob_storage_params, get_import_settings
from models.errors import MissingTargetTable
from models.schemas import ENTITY_META
from tasks.import_step import import_entity
from tasks.postgres import validate_database_schema

IMPORT_FLOW_NAME = "Greenbook_Import"


def generate_import_run_name() -> str:
    run_timestamp = flow_run.parameters.get("run_timestamp")
    if run_timestamp is None:
        return "import-manual"
    return f"import-{run_timestamp}"


@flow(name=IMPORT_FLOW_NAME, flow_run_name=generate_import_run_name)
def import_job(
    run_timestamp: Optional[int] = None,
    container_name: Optional[str] = None,
    batch_size: Optional[int] = None,
    check_schema: bool = True,
) -> Dict[str, int]:
    """
    Import offices, then departments. A failed step fails the run and the
    remaining steps are not attempted; chunks already committed stay committed.

    run_timestamp only identifies the run; the scheduler sets it to the launch
    time in epoch milliseconds.
    """
    logger = get_run_logger()
    container_name = container_name or get_blob_storage_params()["container_name"]
    if batch_size is None:
        batch_size = get_import_settings()["batch_size"]

    logger.info(
        f"Starting import run {run_timestamp} from container {container_name} "
        f"(batch size {batch_size})"
    )

    if check_schema:
        missing = validate_database_schema()
        if missing:
            raise MissingTargetTable(missing)

    results: Dict[str, int] = {}
    for entity in ENTITY_META:
        result = import_entity(entity, container_name, batch_size)
        results[entity.entity_name] = result.rows_written

    logger.info("=" * 60)
    logger.info("IMPORT SUMMARY")
    logger.info("=" * 60)
    for entity_name, rows in results.items():
        logger.info(f"{entity_name}: {rows} rows upserted")
    logger.info("=" * 60)
    return results
