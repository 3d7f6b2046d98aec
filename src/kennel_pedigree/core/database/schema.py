"""SQLite schema creation and migration for the pedigree database."""

import sqlite3

SCHEMA_VERSION = 1

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS dogs (
    id TEXT PRIMARY KEY,
    name TEXT,
    gender TEXT NOT NULL DEFAULT 'unknown',
    registration_number TEXT,
    date_of_birth TEXT,
    breed TEXT,
    color TEXT,
    owner_id TEXT,
    sire_id TEXT,
    dam_id TEXT,
    updated_at INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_dogs_sire ON dogs(sire_id);
CREATE INDEX IF NOT EXISTS idx_dogs_dam ON dogs(dam_id);
CREATE INDEX IF NOT EXISTS idx_dogs_registration ON dogs(registration_number);

CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS sync_state (
    source_name TEXT PRIMARY KEY,
    last_import_at INTEGER,
    source_hash TEXT
);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes."""
    conn.executescript(_SCHEMA_SQL)
    conn.execute(
        "INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)",
        ("schema_version", str(SCHEMA_VERSION)),
    )
    conn.commit()


def get_schema_version(conn: sqlite3.Connection) -> int | None:
    """Return the current schema version, or None if metadata table doesn't exist."""
    try:
        row = conn.execute(
            "SELECT value FROM metadata WHERE key = 'schema_version'"
        ).fetchone()
    except sqlite3.OperationalError:
        return None
    return int(row[0]) if row else None


def migrate_schema(conn: sqlite3.Connection) -> None:
    """Create or migrate the database schema to the latest version."""
    version = get_schema_version(conn)
    if version is None:
        create_schema(conn)
