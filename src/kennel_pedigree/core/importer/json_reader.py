"""Parse exported dog records (.json files) into domain models."""

import dataclasses
from collections import deque
from datetime import UTC, date, datetime
from typing import Any

from kennel_pedigree.models.dog import DogRecord, Gender


def parse_date(value: Any) -> date | None:
    """Parse an ISO date/datetime string or a millisecond timestamp."""
    if value is None or value == "":
        return None
    if isinstance(value, int | float) or (isinstance(value, str) and value.isdigit()):
        try:
            return datetime.fromtimestamp(int(value) / 1000, tz=UTC).date()
        except (OverflowError, OSError, ValueError) as e:
            msg = f"Timestamp out of range: {value!r}"
            raise ValueError(msg) from e
    if not isinstance(value, str):
        msg = f"Unsupported date value: {value!r}"
        raise ValueError(msg)
    return date.fromisoformat(value[:10])


def _parent_id(raw: dict[str, Any], side: str) -> str | None:
    nested = raw.get(side)
    if isinstance(nested, dict):
        return nested.get("id")
    return raw.get(f"{side}Id")


def parse_dog(raw: dict[str, Any]) -> DogRecord:
    """Parse one dog object, flat or with nested sire/dam objects."""
    if not isinstance(raw, dict):
        msg = f"Dog record is not an object: {raw!r}"
        raise ValueError(msg)
    if not raw.get("id"):
        msg = f"Dog record without id: {raw!r}"
        raise ValueError(msg)

    breed = raw.get("breed")
    if not breed and isinstance(raw.get("breedObj"), dict):
        breed = raw["breedObj"].get("name")

    owner_id = raw.get("ownerId")
    if not owner_id and isinstance(raw.get("currentOwner"), dict):
        owner_id = raw["currentOwner"].get("id")

    return DogRecord(
        id=str(raw["id"]),
        name=raw.get("name"),
        gender=Gender.parse(raw.get("gender")),
        registration_number=raw.get("registrationNumber") or None,
        date_of_birth=parse_date(raw.get("dateOfBirth")),
        breed=breed or None,
        color=raw.get("color") or None,
        owner_id=owner_id or None,
        sire_id=_parent_id(raw, "sire"),
        dam_id=_parent_id(raw, "dam"),
    )


def _merge(existing: DogRecord, other: DogRecord) -> DogRecord:
    """Fill fields missing from existing with values from other."""
    updates = {
        f.name: getattr(other, f.name)
        for f in dataclasses.fields(DogRecord)
        if getattr(existing, f.name) in (None, Gender.UNKNOWN)
        and getattr(other, f.name) not in (None, Gender.UNKNOWN)
    }
    return dataclasses.replace(existing, **updates) if updates else existing


def parse_dogs_data(data: Any) -> list[DogRecord]:
    """Flatten a dogs export into unique DogRecords.

    Args:
        data: A list of dog objects, a single dog object, or a dict with a "dogs"
            or "dogPedigree" key. Nested "sire"/"dam" objects are walked too.

    Returns:
        One record per dog id, in breadth-first order of first appearance.
    """
    if isinstance(data, dict):
        if "dogs" in data:
            data = data["dogs"]
        elif "dogPedigree" in data:
            data = data["dogPedigree"]
    items = data if isinstance(data, list) else [data]

    by_id: dict[str, DogRecord] = {}
    # BFS so that shallow occurrences (with more parents filled in) come first.
    todo: deque[dict[str, Any]] = deque(items)
    while todo:
        raw = todo.popleft()
        dog = parse_dog(raw)
        by_id[dog.id] = _merge(by_id[dog.id], dog) if dog.id in by_id else dog
        for side in ("sire", "dam"):
            nested = raw.get(side)
            if isinstance(nested, dict) and nested.get("id"):
                todo.append(nested)

    return list(by_id.values())
