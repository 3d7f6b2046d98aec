"""Fake implementations for testing the pedigree engine."""

import dataclasses
import json
from collections.abc import Callable
from pathlib import Path

from kennel_pedigree.errors import DogNotFoundError, RepositoryError
from kennel_pedigree.models.dog import DogRecord, Gender, ParentLinks


def make_dog(
    dog_id: str,
    gender: Gender = Gender.UNKNOWN,
    *,
    sire: str | None = None,
    dam: str | None = None,
    owner: str | None = None,
) -> DogRecord:
    """Build a DogRecord named after its id."""
    return DogRecord(
        id=dog_id, name=f"Dog {dog_id}", gender=gender, sire_id=sire, dam_id=dam, owner_id=owner
    )


class FakeDogRepository:
    """In-memory fake for DogRepositoryProtocol.

    Records every lookup and write. Successful writes update the stored dog, so a
    later resolve sees the new parents.
    """

    def __init__(self, dogs: list[DogRecord] | None = None) -> None:
        self.dogs: dict[str, DogRecord] = {d.id: d for d in dogs or []}
        self.resolve_calls: list[str] = []
        self.write_calls: list[tuple[str, ParentLinks]] = []
        self.write_errors: list[RepositoryError] = []
        # Ids whose lookup fails with a RepositoryError instead of resolving.
        self.broken_ids: set[str] = set()
        # Returns a failure reason to refuse a write, or None to accept it.
        self.reject_write: Callable[[ParentLinks], str | None] | None = None

    def add(self, *dogs: DogRecord) -> None:
        for dog in dogs:
            self.dogs[dog.id] = dog

    def resolve_dog(self, dog_id: str) -> DogRecord:
        self.resolve_calls.append(dog_id)
        if dog_id in self.broken_ids:
            msg = f"connection lost while reading {dog_id}"
            raise RepositoryError(msg)
        if dog_id not in self.dogs:
            raise DogNotFoundError(dog_id)
        return self.dogs[dog_id]

    def write_parent_links(self, dog_id: str, links: ParentLinks) -> None:
        self.write_calls.append((dog_id, links))
        reason = self.reject_write(links) if self.reject_write else None
        if reason is not None:
            error = RepositoryError(reason)
            self.write_errors.append(error)
            raise error

        updates = {}
        if links.sire_id is not None:
            updates["sire_id"] = links.sire_id
        if links.dam_id is not None:
            updates["dam_id"] = links.dam_id
        self.dogs[dog_id] = dataclasses.replace(self.dogs[dog_id], **updates)


class FakePermission:
    """EditPermissionProtocol fake with a fixed answer."""

    def __init__(self, *, allowed: bool = True) -> None:
        self.allowed = allowed
        self.checked: list[str] = []

    def can_edit_pedigree(self, dog: DogRecord) -> bool:
        self.checked.append(dog.id)
        return self.allowed


# A nested export as the kennel application returns it for a pedigree query,
# plus a flat list with the rest of the kennel.
SOURCE_FILES = {
    "rex-pedigree.json": {
        "dogPedigree": {
            "id": "rex",
            "name": "Rex",
            "gender": "MALE",
            "registrationNumber": "KC-100",
            "breed": "Beagle",
            "dateOfBirth": "2021-04-02T00:00:00.000Z",
            "sire": {
                "id": "max",
                "name": "Max",
                "gender": "male",
                "sire": {"id": "duke", "name": "Duke", "gender": "male"},
                "dam": {"id": "bella", "name": "Bella", "gender": "female"},
            },
            "dam": {
                "id": "luna",
                "name": "Luna",
                "gender": "female",
                "sire": {"id": "duke", "name": "Duke", "gender": "male"},
            },
        }
    },
    "kennel.json": {
        "dogs": [
            {"id": "solo", "name": "Solo", "gender": "female", "color": "tricolor"},
            {"id": "pup", "name": "Pup", "gender": "male", "sireId": "rex", "damId": "solo"},
        ]
    },
}


def write_source(source: Path) -> None:
    """Write SOURCE_FILES into a (possibly new) source directory."""
    source.mkdir(parents=True, exist_ok=True)
    for name, data in SOURCE_FILES.items():
        (source / name).write_text(json.dumps(data))
