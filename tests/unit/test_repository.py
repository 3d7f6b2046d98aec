"""Tests for the SQLite dog repository."""

import sqlite3
from datetime import date

import pytest

from kennel_pedigree.errors import DogNotFoundError, RepositoryError
from kennel_pedigree.models.dog import Gender, ParentLinks
from kennel_pedigree.protocols import DogRepositoryProtocol
from kennel_pedigree.repository import SqliteDogRepository


def test_satisfies_protocol(populated_db: sqlite3.Connection) -> None:
    assert isinstance(SqliteDogRepository(populated_db), DogRepositoryProtocol)


def test_resolve_dog(populated_db: sqlite3.Connection) -> None:
    rex = SqliteDogRepository(populated_db).resolve_dog("rex")
    assert rex.name == "Rex"
    assert rex.gender is Gender.MALE
    assert rex.date_of_birth == date(2021, 4, 2)
    assert rex.registration_number == "KC-100"
    assert (rex.sire_id, rex.dam_id) == ("max", "luna")


def test_resolve_missing_dog(populated_db: sqlite3.Connection) -> None:
    with pytest.raises(DogNotFoundError):
        SqliteDogRepository(populated_db).resolve_dog("nobody")


def test_resolve_on_broken_database_raises_repository_error() -> None:
    conn = sqlite3.connect(":memory:")
    with pytest.raises(RepositoryError, match="Failed to read"):
        SqliteDogRepository(conn).resolve_dog("rex")


def test_write_only_supplied_parent(populated_db: sqlite3.Connection) -> None:
    repo = SqliteDogRepository(populated_db)
    repo.write_parent_links("rex", ParentLinks(dam_id="solo"))

    rex = repo.resolve_dog("rex")
    assert rex.sire_id == "max"
    assert rex.dam_id == "solo"


def test_write_rejects_unknown_ids(populated_db: sqlite3.Connection) -> None:
    repo = SqliteDogRepository(populated_db)
    with pytest.raises(RepositoryError, match="Invalid dog ID: ghost"):
        repo.write_parent_links("rex", ParentLinks(sire_id="ghost"))
    assert repo.resolve_dog("rex").sire_id == "max"


def test_write_requires_a_link(populated_db: sqlite3.Connection) -> None:
    with pytest.raises(RepositoryError):
        SqliteDogRepository(populated_db).write_parent_links("rex", ParentLinks())


def test_count(populated_db: sqlite3.Connection) -> None:
    assert SqliteDogRepository(populated_db).count() == 7
