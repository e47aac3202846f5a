from dataclasses import dataclass
from typing import Tuple, Type


@dataclass(frozen=True)
class ImportRecord:
    """One parsed source row. The source ``id`` column is discarded on read."""
    name: str


@dataclass(frozen=True)
class Office(ImportRecord):
    pass


@dataclass(frozen=True)
class Department(ImportRecord):
    pass


@dataclass(frozen=True)
class EntityConfig:
    entity_name: str
    file_name: str
    table_name: str
    record_type: Type[ImportRecord]
    columns: Tuple[str, ...] = ("id", "name")


OFFICE = EntityConfig(
    entity_name="office",
    file_name="offices.csv",
    table_name="Office",
    record_type=Office,
)

DEPARTMENT = EntityConfig(
    entity_name="department",
    file_name="departments.csv",
    table_name="Department",
    record_type=Department,
)

# Import order matters: departments are only loaded after offices succeed.
ENTITY_META = (OFFICE, DEPARTMENT)
