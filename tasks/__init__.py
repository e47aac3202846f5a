"""
Prefect task definitions for the entity import step and database schema checks.
"""
from .import_step import ImportStep, StepResult, StepState, import_entity
from .postgres import validate_database_schema

__all__ = ["ImportStep", "StepResult", "StepState", "import_entity", "validate_database_schema"]
