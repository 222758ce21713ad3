"""Database query functions for the persisted ledger snapshot."""

import json
import sqlite3
from datetime import datetime
from pathlib import Path

import structlog

from expensa.domain.models import LedgerState, default_state
from expensa.store.schema import get_db_path
from expensa.store.serialization import state_from_dict, state_to_dict

logger = structlog.get_logger(__name__)


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def load_state(db_path: Path | None = None) -> LedgerState | None:
    """Load the persisted snapshot.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The stored LedgerState, or None if nothing has been saved yet.

    Raises:
        sqlite3.Error: If database operation fails.
        ValueError: If the stored payload is not valid JSON or has bad dates.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT payload FROM ledger_state WHERE id = 1")
        row = cursor.fetchone()

    if row is None:
        return None

    state = state_from_dict(json.loads(row["payload"]))
    logger.debug("state_loaded", expenses=len(state.expenses), categories=len(state.categories))
    return state


def load_or_default(db_path: Path | None = None) -> LedgerState:
    """Load the persisted snapshot, falling back to the built-in default.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Stored LedgerState, or default_state() when nothing is stored.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    state = load_state(db_path)
    if state is None:
        logger.info("state_defaulted")
        return default_state()
    return state


def save_state(state: LedgerState, db_path: Path | None = None) -> None:
    """Persist a snapshot, replacing the previous one.

    Args:
        state: Snapshot to store.
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    payload = json.dumps(state_to_dict(state), ensure_ascii=False)

    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                """
                INSERT INTO ledger_state (id, payload, saved_at) VALUES (1, ?, ?)
                ON CONFLICT(id) DO UPDATE SET payload = excluded.payload, saved_at = excluded.saved_at
                """,
                (payload, datetime.now().isoformat(timespec="seconds")),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise

    logger.debug("state_saved", expenses=len(state.expenses))


def get_saved_at(db_path: Path | None = None) -> str | None:
    """Get the timestamp of the last save, if any.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT saved_at FROM ledger_state WHERE id = 1")
        row = cursor.fetchone()
        return row["saved_at"] if row else None
