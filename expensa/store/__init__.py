"""Database store layer - provides persistence for the application.

This module re-exports all public database functions for easy importing.
"""

from expensa.store.queries import get_saved_at, load_or_default, load_state, save_state
from expensa.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "get_saved_at",
    "load_or_default",
    "load_state",
    "save_state",
]
