"""Domain models for dog records as the repository stores them."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class Gender(Enum):
    """Recorded gender of a dog."""

    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> "Gender":
        """Parse a stored value case-insensitively; anything unrecognized is UNKNOWN."""
        if isinstance(value, Gender):
            return value
        if not value or not isinstance(value, str):
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_known(self) -> bool:
        return self is not Gender.UNKNOWN

    @property
    def symbol(self) -> str:
        return {"male": "♂", "female": "♀"}.get(self.value, "?")


@dataclass(frozen=True)
class DogRecord:
    """A single dog with its recorded parent identifiers."""

    id: str
    name: str | None = None
    gender: Gender = Gender.UNKNOWN
    registration_number: str | None = None
    date_of_birth: date | None = None
    breed: str | None = None
    color: str | None = None
    owner_id: str | None = None
    sire_id: str | None = None
    dam_id: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass(frozen=True)
class ParentLinks:
    """Sire/dam identifiers to write. None leaves that parent unchanged."""

    sire_id: str | None = None
    dam_id: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.sire_id is None and self.dam_id is None
