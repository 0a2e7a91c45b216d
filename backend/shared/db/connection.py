"""SQLite database connection and schema management."""

import os
import sqlite3
from pathlib import Path

import structlog

logger = structlog.get_logger()

_DB_FILE_PERMISSIONS = 0o600

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS episodes (
    id TEXT PRIMARY KEY,
    season INTEGER NOT NULL,
    episode_number INTEGER NOT NULL,
    title TEXT NOT NULL,
    wiki_url TEXT,
    plot_summary TEXT,
    image_url TEXT,
    still_url TEXT,
    quote_text TEXT,
    quote_speaker TEXT,
    quote_location TEXT,
    store_next_door TEXT,
    pest_control_truck TEXT,
    original_air_date TEXT,
    guest_stars TEXT,
    UNIQUE (season, episode_number)
);

CREATE TABLE IF NOT EXISTS burgers (
    id TEXT PRIMARY KEY,
    episode_id TEXT NOT NULL REFERENCES episodes (id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    description TEXT,
    UNIQUE (episode_id, name)
);

CREATE TABLE IF NOT EXISTS daily_puzzles (
    date TEXT PRIMARY KEY,
    burger_id TEXT NOT NULL REFERENCES burgers (id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS game_stats (
    date TEXT PRIMARY KEY,
    win_on_guess_1 INTEGER NOT NULL DEFAULT 0,
    win_on_guess_2 INTEGER NOT NULL DEFAULT 0,
    win_on_guess_3 INTEGER NOT NULL DEFAULT 0,
    win_on_guess_4 INTEGER NOT NULL DEFAULT 0,
    win_on_guess_5 INTEGER NOT NULL DEFAULT 0,
    win_on_guess_6 INTEGER NOT NULL DEFAULT 0,
    losses INTEGER NOT NULL DEFAULT 0
);
"""


class Database:
    """SQLite database wrapper with schema management."""

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        self._conn: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Return the active connection or raise if disconnected."""
        if self._conn is None:
            raise RuntimeError("Database is not connected")
        return self._conn

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    def connect(self) -> None:
        """Open the database, apply pragmas, create schema, and harden file permissions."""
        if self._path != ":memory:":
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._conn.execute("PRAGMA busy_timeout=5000")
        self._conn.executescript(_SCHEMA_SQL)
        logger.info("database connected", path=self._path)

        self._harden_permissions()

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _harden_permissions(self) -> None:
        """Set owner-only permissions on the database and its WAL/SHM files (POSIX, best effort)."""
        if os.name != "posix" or self._path == ":memory:":  # pragma: no cover
            return
        for suffix in ("", "-wal", "-shm"):
            p = Path(self._path + suffix)
            if p.exists():
                try:
                    p.chmod(_DB_FILE_PERMISSIONS)
                except OSError:
                    logger.warning("could not set file permissions", permissions=oct(_DB_FILE_PERMISSIONS), path=str(p))
