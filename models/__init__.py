"""
Data models for the import pipeline: source records, entity metadata and errors.
"""
from .schemas import ImportRecord, Office, Department, EntityConfig, OFFICE, DEPARTMENT, ENTITY_META
from .errors import (
    GreenbookImportError,
    MissingSourceFile,
    HeaderValidationError,
    HeaderColumnCountMismatch,
    HeaderNameMismatch,
    ParseError,
    WriteFailure,
    MissingTargetTable,
    InvalidTransition,
)

__all__ = [
    "ImportRecord",
    "Office",
    "Department",
    "EntityConfig",
    "OFFICE",
    "DEPARTMENT",
    "ENTITY_META",
    "GreenbookImportError",
    "MissingSourceFile",
    "HeaderValidationError",
    "HeaderColumnCountMismatch",
    "HeaderNameMismatch",
    "ParseError",
    "WriteFailure",
    "MissingTargetTable",
    "InvalidTransition",
]
