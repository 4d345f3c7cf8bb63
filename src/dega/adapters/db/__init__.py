"""Application database adapters.

Contents:
- app_db: asyncpg pool wrapper and schema bootstrap for the content tables
"""

from .app_db import AppDatabase, schema_statements

__all__ = ["AppDatabase", "schema_statements"]
