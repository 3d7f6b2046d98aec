"""Tests for database schema."""

import sqlite3

from kennel_pedigree.core.database.schema import create_schema, get_schema_version, migrate_schema


def test_create_schema_creates_tables() -> None:
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    tables = {
        row[0]
        for row in conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ).fetchall()
    }
    assert {"dogs", "metadata", "sync_state"} <= tables


def test_create_schema_indexes_parent_columns() -> None:
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    indexes = {
        row[0]
        for row in conn.execute(
            "SELECT name FROM sqlite_master WHERE type='index' AND tbl_name='dogs'"
        ).fetchall()
    }
    assert {"idx_dogs_sire", "idx_dogs_dam"} <= indexes


def test_migrate_schema_on_empty_db_creates_schema_and_sets_version() -> None:
    conn = sqlite3.connect(":memory:")
    assert get_schema_version(conn) is None
    migrate_schema(conn)
    assert get_schema_version(conn) == 1


def test_migrate_schema_is_idempotent() -> None:
    conn = sqlite3.connect(":memory:")
    migrate_schema(conn)
    conn.execute("INSERT INTO dogs (id, updated_at) VALUES ('a', 0)")
    conn.commit()
    migrate_schema(conn)
    assert conn.execute("SELECT COUNT(*) FROM dogs").fetchone()[0] == 1
