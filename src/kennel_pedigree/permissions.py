"""Edit capabilities handed to the parent linker by its caller."""

from dataclasses import dataclass
from enum import Enum

from kennel_pedigree.models.dog import DogRecord


class UserRole(Enum):
    ADMIN = "admin"
    OWNER = "owner"
    BREEDER = "breeder"
    HANDLER = "handler"
    CLUB = "club"
    VIEWER = "viewer"


# Roles allowed to edit any pedigree, in addition to admins and a dog's owner.
_PEDIGREE_EDIT_ROLES = frozenset({UserRole.OWNER, UserRole.BREEDER})


@dataclass(frozen=True)
class PedigreeEditCapability:
    """Role-based permission to change sire/dam links."""

    role: UserRole
    user_id: str | None = None

    def can_edit_pedigree(self, dog: DogRecord) -> bool:
        if self.role is UserRole.ADMIN:
            return True
        is_owner = bool(self.user_id and dog.owner_id and dog.owner_id == self.user_id)
        return is_owner or self.role in _PEDIGREE_EDIT_ROLES


class AllowAllCapability:
    """Permission for trusted callers such as import scripts."""

    def can_edit_pedigree(self, dog: DogRecord) -> bool:
        return True
