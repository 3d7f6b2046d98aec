"""Exceptions raised by the pedigree engine and its repository adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kennel_pedigree.models.pedigree import LinkAttempt


class PedigreeError(Exception):
    """Base class for all pedigree engine errors."""


class DogNotFoundError(PedigreeError, LookupError):
    """A dog identifier did not resolve."""

    def __init__(self, dog_id: str) -> None:
        super().__init__(f"Dog {dog_id!r} not found")
        self.dog_id = dog_id


class RepositoryError(PedigreeError):
    """The repository adapter failed to read or write."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class InvalidGenderError(PedigreeError):
    """A sire is recorded female, or a dam is recorded male."""

    def __init__(self, dog_id: str, *, role: str, gender: str) -> None:
        super().__init__(f"Dog {dog_id!r} is recorded {gender} and cannot be a {role}")
        self.dog_id = dog_id
        self.role = role
        self.gender = gender


class CyclicAncestryError(PedigreeError):
    """Linking would make a dog its own ancestor."""

    def __init__(self, dog_id: str, parent_id: str) -> None:
        if dog_id == parent_id:
            msg = f"Dog {dog_id!r} cannot be its own parent"
        else:
            msg = f"Dog {dog_id!r} already appears in the ancestry of {parent_id!r}"
        super().__init__(msg)
        self.dog_id = dog_id
        self.parent_id = parent_id


class PermissionDeniedError(PedigreeError):
    """The caller's capability does not allow editing this dog's pedigree."""


class NoParentSuppliedError(PedigreeError, ValueError):
    """Neither a sire nor a dam was given to link."""


class PartialLinkFailureError(PedigreeError):
    """The combined write failed and a single-parent fallback failed as well.

    ``attempts`` holds every write attempt in the order it was made, so the caller
    can tell which parent (if any) was linked.
    """

    def __init__(self, dog_id: str, attempts: tuple[LinkAttempt, ...]) -> None:
        self.dog_id = dog_id
        self.attempts = attempts
        failed = ", ".join(
            f"{a.description}: {a.error}" for a in attempts[1:] if not a.succeeded
        )
        super().__init__(f"Linking parents of {dog_id!r} partially failed ({failed})")

    def _fallback_error(self, *, sire: bool) -> str | None:
        for attempt in self.attempts[1:]:
            only_this_side = (
                attempt.links.sire_id is not None
                if sire
                else attempt.links.dam_id is not None
            )
            if only_this_side:
                return attempt.error
        return None

    @property
    def sire_error(self) -> str | None:
        """Failure reason of the sire-only attempt, None if it succeeded."""
        return self._fallback_error(sire=True)

    @property
    def dam_error(self) -> str | None:
        """Failure reason of the dam-only attempt, None if it succeeded."""
        return self._fallback_error(sire=False)
