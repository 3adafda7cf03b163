"""Database store layer - provides persistence for the application.

This module re-exports all public store functions for easy importing.
"""

from fireledger.store.backup import export_state_json, load_state_json, state_from_dict, state_to_dict
from fireledger.store.queries import load_state, save_state
from fireledger.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "load_state",
    "save_state",
    # Backup
    "export_state_json",
    "load_state_json",
    "state_from_dict",
    "state_to_dict",
]
