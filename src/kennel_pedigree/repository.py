"""SQLite-backed dog repository."""

import sqlite3
import time
from datetime import date

from loguru import logger

from kennel_pedigree.errors import DogNotFoundError, RepositoryError
from kennel_pedigree.models.dog import DogRecord, Gender, ParentLinks

_DOG_COLUMNS = (
    "id, name, gender, registration_number, date_of_birth, breed, color, "
    "owner_id, sire_id, dam_id"
)


def row_to_dog(row: tuple) -> DogRecord:
    return DogRecord(
        id=row[0],
        name=row[1],
        gender=Gender.parse(row[2]),
        registration_number=row[3],
        date_of_birth=date.fromisoformat(row[4]) if row[4] else None,
        breed=row[5],
        color=row[6],
        owner_id=row[7],
        sire_id=row[8],
        dam_id=row[9],
    )


def insert_dogs(conn: sqlite3.Connection, dogs: list[DogRecord]) -> None:
    """Insert or update dogs. Fields missing from a record keep their stored value."""
    now_ms = int(time.time() * 1000)
    conn.executemany(
        f"""INSERT INTO dogs ({_DOG_COLUMNS}, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name = COALESCE(excluded.name, dogs.name),
                gender = CASE WHEN excluded.gender = 'unknown'
                              THEN dogs.gender ELSE excluded.gender END,
                registration_number = COALESCE(
                    excluded.registration_number, dogs.registration_number),
                date_of_birth = COALESCE(excluded.date_of_birth, dogs.date_of_birth),
                breed = COALESCE(excluded.breed, dogs.breed),
                color = COALESCE(excluded.color, dogs.color),
                owner_id = COALESCE(excluded.owner_id, dogs.owner_id),
                sire_id = COALESCE(excluded.sire_id, dogs.sire_id),
                dam_id = COALESCE(excluded.dam_id, dogs.dam_id),
                updated_at = excluded.updated_at""",
        [
            (
                d.id, d.name, d.gender.value, d.registration_number,
                d.date_of_birth.isoformat() if d.date_of_birth else None,
                d.breed, d.color, d.owner_id, d.sire_id, d.dam_id, now_ms,
            )
            for d in dogs
        ],
    )


class SqliteDogRepository:
    """Dog repository over the local pedigree database."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def resolve_dog(self, dog_id: str) -> DogRecord:
        try:
            row = self._conn.execute(
                f"SELECT {_DOG_COLUMNS} FROM dogs WHERE id = ?", (dog_id,)
            ).fetchone()
        except sqlite3.Error as e:
            msg = f"Failed to read dog {dog_id!r}: {e}"
            raise RepositoryError(msg) from e
        if row is None:
            raise DogNotFoundError(dog_id)
        return row_to_dog(row)

    def _exists(self, dog_id: str) -> bool:
        row = self._conn.execute("SELECT 1 FROM dogs WHERE id = ?", (dog_id,)).fetchone()
        return row is not None

    def write_parent_links(self, dog_id: str, links: ParentLinks) -> None:
        assignments: list[str] = []
        params: list[str | int] = []
        for column, parent_id in (("sire_id", links.sire_id), ("dam_id", links.dam_id)):
            if parent_id is None:
                continue
            assignments.append(f"{column} = ?")
            params.append(parent_id)
        if not assignments:
            msg = "No parent links to write"
            raise RepositoryError(msg)

        try:
            missing = [
                i for i in (dog_id, links.sire_id, links.dam_id)
                if i is not None and not self._exists(i)
            ]
            if missing:
                msg = f"Invalid dog ID: {', '.join(missing)}"
                raise RepositoryError(msg)

            params.extend([int(time.time() * 1000), dog_id])
            self._conn.execute(
                f"UPDATE dogs SET {', '.join(assignments)}, updated_at = ? WHERE id = ?",
                params,
            )
            self._conn.commit()
        except sqlite3.Error as e:
            self._conn.rollback()
            logger.exception("Failed to write parent links for {}", dog_id)
            msg = f"Failed to write parent links for {dog_id!r}: {e}"
            raise RepositoryError(msg) from e

    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM dogs").fetchone()[0]
