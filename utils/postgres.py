import datetime
import uuid
from typing import Iterable, Set

import psycopg

from config import get_postgres_connection_params
from models.errors import WriteFailure
from models.schemas import EntityConfig, ImportRecord

# Existing offices only get their "updatedAt" refreshed; existing departments are left alone.
UPSERT_SQL = {
    "Office": """
        INSERT INTO "Office" ("id", "name", "createdAt", "updatedAt")
        VALUES (%s, %s, %s, %s)
        ON CONFLICT ("name")
        DO UPDATE SET "updatedAt" = EXCLUDED."updatedAt"
    """,
    "Department": """
        INSERT INTO "Department" ("id", "name")
        VALUES (%s, %s)
        ON CONFLICT ("name") DO NOTHING
    """,
}


def get_connection() -> psycopg.Connection:
    """
    Open a PostgreSQL connection. Autocommit is on so every chunk gets its own
    explicit transaction block.
    """
    params = get_postgres_connection_params()
    return psycopg.connect(**params, autocommit=True)


def _row_params(table_name: str, record: ImportRecord, now: datetime.datetime) -> tuple:
    if table_name == "Office":
        return (uuid.uuid4(), record.name, now, now)
    return (uuid.uuid4(), record.name)


def upsert_records(
    conn: psycopg.Connection,
    entity: EntityConfig,
    records: Iterable[ImportRecord],
) -> int:
    """
    Upsert one chunk of records into the entity's table in a single transaction.

    Returns the number of records submitted. Raises WriteFailure after the
    transaction has been rolled back.
    """
    table_name = entity.table_name
    statement = UPSERT_SQL[table_name]
    # "createdAt" and "updatedAt" are timestamp without time zone columns holding UTC.
    now = datetime.datetime.now(datetime.UTC).replace(tzinfo=None)
    rows = [_row_params(table_name, record, now) for record in records]
    if not rows:
        return 0
    try:
        with conn.transaction():
            with conn.cursor() as cur:
                cur.executemany(statement, rows)
    except psycopg.Error as exc:
        raise WriteFailure(table_name, exc) from exc
    return len(rows)


def missing_tables(conn: psycopg.Connection, tables: Iterable[str]) -> Set[str]:
    """
    Return the subset of tables that do not exist in the current schema.
    """
    required = set(tables)
    with conn.cursor() as cur:
        cur.execute(
            """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = current_schema()
              AND table_name = ANY(%s)
            """,
            (sorted(required),),
        )
        existing = {row[0] for row in cur.fetchall()}
    return required - existing
