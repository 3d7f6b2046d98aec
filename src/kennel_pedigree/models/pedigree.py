"""Domain models for pedigree trees, inbreeding results and parent links."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import TYPE_CHECKING

from kennel_pedigree.config import (
    COI_HIGH_THRESHOLD,
    COI_MODERATE_THRESHOLD,
    COI_VERY_HIGH_THRESHOLD,
)
from kennel_pedigree.models.dog import DogRecord, Gender, ParentLinks

if TYPE_CHECKING:
    from kennel_pedigree.errors import RepositoryError


class ParentSide(Enum):
    """One step up a pedigree: to the sire or to the dam."""

    SIRE = "sire"
    DAM = "dam"

    @property
    def expected_gender(self) -> Gender:
        return Gender.MALE if self is ParentSide.SIRE else Gender.FEMALE


# Sequence of steps from the root to a slot; its length is the slot's generation.
PositionPath = tuple[ParentSide, ...]


@dataclass(frozen=True)
class AncestorNode:
    """A known dog at one position of a pedigree tree.

    A parent slot holding None is an unknown ancestor.
    """

    dog: DogRecord
    sire: AncestorNode | None = None
    dam: AncestorNode | None = None

    @property
    def id(self) -> str:
        return self.dog.id

    @property
    def name(self) -> str | None:
        return self.dog.name

    @property
    def gender(self) -> Gender:
        return self.dog.gender

    def parent(self, side: ParentSide) -> AncestorNode | None:
        return self.sire if side is ParentSide.SIRE else self.dam


@dataclass(frozen=True)
class GenderMismatch:
    """A sire slot holding a dog recorded female, or a dam slot holding a male."""

    path: PositionPath
    dog_id: str
    expected: Gender
    recorded: Gender


@dataclass(frozen=True)
class PedigreeTree:
    """Ancestry of one dog unrolled to a fixed number of generations."""

    root: AncestorNode
    max_generations: int
    gender_mismatches: tuple[GenderMismatch, ...] = ()

    @property
    def sire(self) -> AncestorNode | None:
        return self.root.sire

    @property
    def dam(self) -> AncestorNode | None:
        return self.root.dam


class RiskLevel(Enum):
    """Inbreeding risk bands for a coefficient."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very high"

    @classmethod
    def for_value(cls, value: float) -> RiskLevel:
        if value < COI_MODERATE_THRESHOLD:
            return cls.LOW
        if value < COI_HIGH_THRESHOLD:
            return cls.MODERATE
        if value < COI_VERY_HIGH_THRESHOLD:
            return cls.HIGH
        return cls.VERY_HIGH

    @property
    def guidance(self) -> str:
        return _RISK_GUIDANCE[self]


_RISK_GUIDANCE = {
    RiskLevel.LOW: "Low inbreeding level indicates good genetic diversity.",
    RiskLevel.MODERATE: (
        "Moderate inbreeding is acceptable for linebreeding, but monitor carefully."
    ),
    RiskLevel.HIGH: (
        "High inbreeding suggests close relative breeding. "
        "Consider outbreeding for future matings."
    ),
    RiskLevel.VERY_HIGH: (
        "Very high inbreeding indicates significant genetic risk. "
        "Outbreeding is strongly recommended."
    ),
}


@dataclass(frozen=True)
class PathPairContribution:
    """One sire-side path and one dam-side path meeting at a common ancestor."""

    sire_path: PositionPath
    dam_path: PositionPath
    contribution: Fraction

    @property
    def sire_length(self) -> int:
        # The sire itself sits one step below the root, at distance 0.
        return len(self.sire_path) - 1

    @property
    def dam_length(self) -> int:
        return len(self.dam_path) - 1


@dataclass(frozen=True)
class CommonAncestor:
    """An individual found on both the sire side and the dam side."""

    dog: DogRecord
    sire_paths: tuple[PositionPath, ...]
    dam_paths: tuple[PositionPath, ...]
    path_pairs: tuple[PathPairContribution, ...]

    @property
    def id(self) -> str:
        return self.dog.id

    @property
    def contribution(self) -> Fraction:
        return sum((p.contribution for p in self.path_pairs), Fraction(0))

    @property
    def occurrences(self) -> int:
        return len(self.sire_paths) + len(self.dam_paths)

    @property
    def genetic_influence(self) -> Fraction:
        """Share of the root's genes expected from this ancestor, over all its slots."""
        paths = self.sire_paths + self.dam_paths
        return sum((Fraction(1, 2 ** len(p)) for p in paths), Fraction(0))


@dataclass(frozen=True)
class CoefficientResult:
    """Wright's coefficient of inbreeding with its per-ancestor breakdown."""

    value: Fraction = Fraction(0)
    common_ancestors: tuple[CommonAncestor, ...] = ()

    def __float__(self) -> float:
        return float(self.value)

    @property
    def percentage(self) -> float:
        return round(float(self.value) * 100, 2)

    @property
    def risk_level(self) -> RiskLevel:
        return RiskLevel.for_value(float(self.value))

    @property
    def genetic_diversity(self) -> float:
        return 1.0 - float(self.value)


@dataclass(frozen=True)
class LinkAttempt:
    """One write_parent_links call made while linking parents."""

    links: ParentLinks
    succeeded: bool
    error: str | None = None
    # The adapter exception behind a failed attempt.
    exception: RepositoryError | None = field(default=None, compare=False, repr=False)

    @property
    def description(self) -> str:
        if self.links.sire_id is not None and self.links.dam_id is not None:
            return "sire and dam"
        return "sire only" if self.links.sire_id is not None else "dam only"


@dataclass(frozen=True)
class LinkResult:
    """Outcome of a successful parent link."""

    dog_id: str
    links: ParentLinks
    attempts: tuple[LinkAttempt, ...] = field(default_factory=tuple)

    @property
    def used_fallback(self) -> bool:
        return len(self.attempts) > 1
