"""
Prefect flow definitions for the import job and its scheduled entry point.
"""
from .import_flow import import_job
from .scheduled_import import scheduled_import

__all__ = ["import_job", "scheduled_import"]
