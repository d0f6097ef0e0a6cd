"""
FILE: pcrm/core/repository.py
PURPOSE: Persistence adapter: local key-value storage in SQLite
EXPORTS:
  - get_connection() -> Connection
  - init_database(conn) -> None
  - read_record(key) -> Optional[str]
  - write_record(key, value) -> None
  - load_tasks(today) -> LoadResult
  - save_tasks(tasks) -> None
  - LoadResult (dataclass)
DEPENDENCIES:
  - sqlite3 (stdlib)
  - pathlib (stdlib)
  - pcrm.config (data directory)
  - pcrm.core.transfer (JSON format)
  - pcrm.core.seed (first-run data)
NOTES:
  - Database stored at ~/.pcrm/pcrm.db (override with PCRM_HOME)
  - Auto-creates directory and initializes schema on first connection
  - The whole task list lives in ONE record (STORAGE_KEY) as a JSON array
  - Absent or unparsable record, or an unreadable database -> seed tasks;
    the failure is returned on the LoadResult and logged, never raised
  - Writes are full-list overwrites; sqlite errors become PersistenceError
"""

import logging
import sqlite3
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, List, Optional

from ..config import get_settings
from .constants import STORAGE_KEY
from .exceptions import ParseFailure, PcrmError, PersistenceError
from .models import Task
from .seed import seed_tasks
from .transfer import parse_tasks_json, tasks_to_json

logger = logging.getLogger(__name__)

# Database file location (cross-platform, PCRM_HOME overrides)
_settings = get_settings()
DB_DIR = _settings.data_dir
DB_PATH = _settings.db_path

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS kv_store (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

# Where load_tasks() got its data from
SOURCE_STORED = "stored"
SOURCE_SEED = "seed"


@dataclass
class LoadResult:
    """
    Outcome of loading the task list at startup.

    Attributes:
        tasks: The tasks to start the store with
        source: SOURCE_STORED or SOURCE_SEED
        failure: The parse or read failure that forced the seed fallback, if any
    """
    tasks: List[Task]
    source: str
    failure: Optional[PcrmError] = None


def get_connection() -> sqlite3.Connection:
    """
    Get SQLite connection to the pcrm database.

    Creates the data directory if it doesn't exist.
    Enables row_factory for dict-like row access.
    Initializes database schema on first connection.
    """
    # Ensure directory exists
    Path(DB_DIR).mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row

    try:
        init_database(conn)
    except sqlite3.Error:
        conn.close()
        raise

    return conn


def init_database(conn: sqlite3.Connection) -> None:
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times (uses CREATE TABLE IF NOT EXISTS).
    """
    conn.executescript(SCHEMA_SQL)
    conn.commit()


def read_record(key: str) -> Optional[str]:
    """
    Fetch a stored value by key.

    Returns:
        The stored text, or None if the key is absent

    Raises:
        PersistenceError: If the database cannot be opened or read
    """
    try:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        finally:
            conn.close()
    except (sqlite3.Error, OSError) as e:
        raise PersistenceError(f"Could not read '{key}' from {DB_PATH}: {e}") from e

    return row["value"] if row else None


def write_record(key: str, value: str) -> None:
    """
    Insert or overwrite a stored value.

    Raises:
        PersistenceError: If the database cannot be written
    """
    now = datetime.now().isoformat()
    try:
        conn = get_connection()
        try:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, now),
            )
            conn.commit()
        finally:
            conn.close()
    except (sqlite3.Error, OSError) as e:
        raise PersistenceError(f"Could not write '{key}' to {DB_PATH}: {e}") from e


def load_tasks(today: Optional[date] = None) -> LoadResult:
    """
    Load the task list from local storage.

    Args:
        today: Reference date for seed due dates (defaults to today)

    Returns:
        LoadResult with the stored tasks, or seed tasks when the record is
        absent or unparsable, or the database can't be read

    Note:
        Seeding can be disabled with PCRM_SEED=0 (empty list instead).
    """
    failure = None
    try:
        raw = read_record(STORAGE_KEY)
    except PersistenceError as e:
        logger.warning("%s; falling back to seed data", e)
        raw = None
        failure = e

    if raw is not None:
        try:
            tasks = parse_tasks_json(raw, source=f"stored record '{STORAGE_KEY}'")
            logger.debug("Loaded %d task(s) from %s", len(tasks), DB_PATH)
            return LoadResult(tasks=tasks, source=SOURCE_STORED)
        except ParseFailure as e:
            logger.warning("%s; falling back to seed data", e)
            failure = e

    if get_settings().seed_on_first_run:
        tasks = seed_tasks(today)
    else:
        tasks = []
    logger.info("Starting with %d seed task(s)", len(tasks))
    return LoadResult(tasks=tasks, source=SOURCE_SEED, failure=failure)


def save_tasks(tasks: Iterable[Task]) -> None:
    """
    Overwrite the persisted task list with `tasks`.

    Raises:
        PersistenceError: If the write fails
    """
    write_record(STORAGE_KEY, tasks_to_json(tasks))
