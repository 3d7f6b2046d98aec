"""Shared test fixtures."""

import sqlite3
from pathlib import Path

import pytest

from kennel_pedigree.core.database.schema import create_schema
from kennel_pedigree.core.importer.loader import import_source_dir
from kennel_pedigree.models.dog import Gender
from tests.unit.fakes import FakeDogRepository, make_dog, write_source

M = Gender.MALE
F = Gender.FEMALE


@pytest.fixture
def line_bred() -> FakeDogRepository:
    """A out of B x C, where B and C share their sire D.

    E has no recorded parents and X is a female with no parents.
    """
    return FakeDogRepository(
        [
            make_dog("A", M, sire="B", dam="C", owner="u1"),
            make_dog("B", M, sire="D"),
            make_dog("C", F, sire="D"),
            make_dog("D", M),
            make_dog("E", M),
            make_dog("X", F),
        ]
    )


@pytest.fixture
def populated_db(tmp_path: Path) -> sqlite3.Connection:
    """Return an in-memory DB with the sample kennel imported."""
    source = tmp_path / "source"
    write_source(source)

    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    import_source_dir(conn, source)
    return conn
