import os
from functools import lru_cache

from prefect.blocks.system import Secret


@lru_cache
def get_postgres_connection_params():
    """
    Return PostgreSQL connection parameters from environment variables.
    """
    return {
        "host": os.environ["POSTGRES_HOST"],
        "port": int(os.environ.get("POSTGRES_PORT", "5432")),
        "dbname": os.environ["POSTGRES_DB"],
        "user": os.environ["POSTGRES_USER"],
        "password": os.environ["POSTGRES_PASSWORD"],
        "sslmode": os.environ.get("POSTGRES_SSLMODE", "prefer"),
    }


@lru_cache
def get_blob_storage_params():
    """
    Return Azure Blob Storage settings. The connection string comes from the
    environment, or from the Prefect Secret block named in
    AZURE_STORAGE_SECRET_BLOCK.
    """
    connection_string = os.environ.get("AZURE_STORAGE_CONNECTION_STRING")
    if not connection_string:
        block_name = os.environ["AZURE_STORAGE_SECRET_BLOCK"]
        connection_string = Secret.load(block_name).get()
    return {
        "connection_string": connection_string,
        "container_name": os.environ["AZURE_STORAGE_CONTAINER"],
    }


@lru_cache
def get_import_settings():
    """
    Return batch and schedule settings for the import job.
    """
    batch_size = int(os.environ.get("IMPORT_BATCH_SIZE", "10"))
    if batch_size < 1:
        raise ValueError(f"IMPORT_BATCH_SIZE must be positive, got {batch_size}")
    return {
        "batch_size": batch_size,
        "cron": os.environ.get("IMPORT_CRON", "0 * * * *"),
        "timezone": os.environ.get("IMPORT_TIMEZONE", "UTC"),
    }
