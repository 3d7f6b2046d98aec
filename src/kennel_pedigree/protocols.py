"""Protocols for dependency injection in the pedigree engine."""

from typing import Protocol, runtime_checkable

from kennel_pedigree.models.dog import DogRecord, ParentLinks


@runtime_checkable
class DogRepositoryProtocol(Protocol):
    """Protocol for stores that resolve dogs and persist their parent links."""

    def resolve_dog(self, dog_id: str) -> DogRecord:
        """Return the dog with its sire/dam ids.

        Raises DogNotFoundError for unknown ids and RepositoryError on failure.
        """
        ...

    def write_parent_links(self, dog_id: str, links: ParentLinks) -> None:
        """Set the supplied parent ids on the dog in a single write.

        Raises RepositoryError with the reason when the write is refused.
        """
        ...


@runtime_checkable
class EditPermissionProtocol(Protocol):
    """Capability deciding whether the caller may edit a dog's pedigree."""

    def can_edit_pedigree(self, dog: DogRecord) -> bool:
        """Return True if the caller may change this dog's sire/dam."""
        ...
