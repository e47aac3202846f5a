from typing import List

from prefect import get_run_logger, task
from prefect.cache_policies import NO_CACHE

from models.schemas import ENTITY_META
from utils.postgres import get_connection, missing_tables


@task(name="validate_database_schema", tags=["validation"], cache_policy=NO_CACHE)
def validate_database_schema() -> List[str]:
    """Check that every target table exists. Returns the missing table names."""
    logger = get_run_logger()

    required_tables = {entity.table_name for entity in ENTITY_META}
    conn = get_connection()
    try:
        missing = sorted(missing_tables(conn, required_tables))
    finally:
        conn.close()

    if missing:
        logger.error(f"Missing tables in database: {missing}")
    else:
        logger.info("All required tables exist in database")
    return missing
