"""
Helpers for blob downloads, CSV parsing, PostgreSQL upserts and the Prefect run ledger.
"""
