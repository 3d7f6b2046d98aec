"""Orchestrate importing dog record .json files into SQLite."""

import hashlib
import json
import sqlite3
import time
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from kennel_pedigree.core.importer.json_reader import parse_dogs_data
from kennel_pedigree.repository import insert_dogs


@dataclass(frozen=True)
class ImportStats:
    """Summary of an import operation."""

    files_imported: int
    files_skipped: int
    dogs_imported: int


def _file_hash(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


def _should_reimport(conn: sqlite3.Connection, source_name: str, source_hash: str) -> bool:
    row = conn.execute(
        "SELECT source_hash FROM sync_state WHERE source_name = ?",
        (source_name,),
    ).fetchone()
    if row is None:
        return True
    return row[0] != source_hash


def import_source_dir(
    conn: sqlite3.Connection,
    source_dir: Path,
    *,
    force: bool = False,
) -> ImportStats:
    """Import all .json files from source_dir into the database.

    Args:
        conn: SQLite connection (schema must already exist).
        source_dir: Directory containing exported dog records.
        force: Re-import even if a source file hasn't changed.

    Returns:
        ImportStats with counts of imported/skipped files.
    """
    files_imported = 0
    files_skipped = 0
    total_dogs = 0

    for json_path in sorted(source_dir.glob("*.json")):
        source_hash = _file_hash(json_path)
        if not force and not _should_reimport(conn, json_path.name, source_hash):
            files_skipped += 1
            continue

        try:
            dogs = parse_dogs_data(json.loads(json_path.read_text(encoding="utf-8")))
        except ValueError:
            # json.JSONDecodeError is a ValueError too
            logger.exception("Skipping {}: not a valid dogs export", json_path.name)
            continue

        try:
            insert_dogs(conn, dogs)
            conn.execute(
                """INSERT OR REPLACE INTO sync_state
                   (source_name, last_import_at, source_hash)
                   VALUES (?, ?, ?)""",
                (json_path.name, int(time.time() * 1000), source_hash),
            )
            conn.commit()
        except Exception:
            conn.rollback()
            logger.exception("Failed to import {}", json_path.name)
            continue

        files_imported += 1
        total_dogs += len(dogs)
        logger.debug("Imported {} ({} dogs)", json_path.name, len(dogs))

    logger.info(
        "Import complete: {} imported, {} skipped, {} dogs",
        files_imported, files_skipped, total_dogs,
    )
    return ImportStats(
        files_imported=files_imported,
        files_skipped=files_skipped,
        dogs_imported=total_dogs,
    )
