"""Attach or replace a dog's sire and dam after validating the new links."""

from loguru import logger

from kennel_pedigree.config import CYCLE_CHECK_GENERATIONS
from kennel_pedigree.core.tree.builder import build_tree, contains_dog
from kennel_pedigree.errors import (
    CyclicAncestryError,
    InvalidGenderError,
    NoParentSuppliedError,
    PartialLinkFailureError,
    PermissionDeniedError,
    RepositoryError,
)
from kennel_pedigree.models.dog import Gender, ParentLinks
from kennel_pedigree.models.pedigree import LinkAttempt, LinkResult, ParentSide
from kennel_pedigree.protocols import DogRepositoryProtocol, EditPermissionProtocol


def _validate_parent(
    repository: DogRepositoryProtocol,
    dog_id: str,
    parent_id: str,
    side: ParentSide,
    cycle_check_generations: int,
) -> None:
    """Check one candidate parent. Raises on the first violated rule."""
    if parent_id == dog_id:
        raise CyclicAncestryError(dog_id, parent_id)

    # Resolving the parent's ancestry also resolves the parent itself.
    ancestry = build_tree(repository, parent_id, cycle_check_generations)
    parent = ancestry.root.dog

    expected = side.expected_gender
    if parent.gender.is_known and parent.gender is not expected:
        raise InvalidGenderError(parent_id, role=side.value, gender=parent.gender.value)

    if contains_dog(ancestry, dog_id):
        raise CyclicAncestryError(dog_id, parent_id)


def _attempt(repository: DogRepositoryProtocol, dog_id: str, links: ParentLinks) -> LinkAttempt:
    try:
        repository.write_parent_links(dog_id, links)
    except RepositoryError as e:
        return LinkAttempt(links=links, succeeded=False, error=e.reason, exception=e)
    return LinkAttempt(links=links, succeeded=True)


def link_parents(
    repository: DogRepositoryProtocol,
    dog_id: str,
    *,
    permission: EditPermissionProtocol,
    sire_id: str | None = None,
    dam_id: str | None = None,
    cycle_check_generations: int = CYCLE_CHECK_GENERATIONS,
) -> LinkResult:
    """Set a dog's sire and/or dam.

    Every check runs before the repository is asked to write: the dog and each
    parent must exist, the caller must be allowed to edit the dog, a sire must
    not be recorded female (nor a dam male), and the dog must not already appear
    in a parent's ancestry up to cycle_check_generations.

    When both parents are given and the combined write fails, a sire-only and
    then a dam-only write are tried so that one bad link does not block the other.

    Args:
        repository: Store resolving dogs and persisting links.
        dog_id: The dog whose parents are set.
        permission: Capability of the caller.
        sire_id: New sire, or None to leave the sire unchanged.
        dam_id: New dam, or None to leave the dam unchanged.
        cycle_check_generations: How far up each parent's ancestry to look.

    Returns:
        LinkResult with the links written and every write attempt.

    Raises:
        NoParentSuppliedError: Neither sire_id nor dam_id given.
        DogNotFoundError: The dog or a parent does not resolve.
        PermissionDeniedError: The capability refuses the edit.
        InvalidGenderError: A parent has the wrong recorded gender.
        CyclicAncestryError: A parent is the dog itself or descends from it.
        RepositoryError: The single write of a one-parent link failed.
        PartialLinkFailureError: A two-parent link fell back and a fallback failed.
    """
    links = ParentLinks(sire_id=sire_id, dam_id=dam_id)
    if links.is_empty:
        msg = "At least one of sire_id or dam_id must be given"
        raise NoParentSuppliedError(msg)

    dog = repository.resolve_dog(dog_id)
    if not permission.can_edit_pedigree(dog):
        msg = f"Not allowed to edit the pedigree of {dog_id!r}"
        raise PermissionDeniedError(msg)

    if sire_id is not None:
        _validate_parent(repository, dog_id, sire_id, ParentSide.SIRE, cycle_check_generations)
    if dam_id is not None:
        _validate_parent(repository, dog_id, dam_id, ParentSide.DAM, cycle_check_generations)

    if sire_id is None or dam_id is None:
        # One parent, one write: an adapter failure propagates unchanged.
        repository.write_parent_links(dog_id, links)
        logger.info("Linked {} to sire={} dam={}", dog_id, sire_id, dam_id)
        return LinkResult(dog_id=dog_id, links=links, attempts=(LinkAttempt(links, True),))

    combined = _attempt(repository, dog_id, links)
    if combined.succeeded:
        logger.info("Linked {} to sire={} dam={}", dog_id, sire_id, dam_id)
        return LinkResult(dog_id=dog_id, links=links, attempts=(combined,))

    logger.warning(
        "Combined parent write for {} failed ({}), linking sire and dam separately",
        dog_id, combined.error,
    )
    sire_only = _attempt(repository, dog_id, ParentLinks(sire_id=sire_id))
    dam_only = _attempt(repository, dog_id, ParentLinks(dam_id=dam_id))
    attempts = (combined, sire_only, dam_only)
    if not (sire_only.succeeded and dam_only.succeeded):
        failed = sire_only if not sire_only.succeeded else dam_only
        raise PartialLinkFailureError(dog_id, attempts) from failed.exception

    logger.info("Linked {} to sire={} dam={} in two writes", dog_id, sire_id, dam_id)
    return LinkResult(dog_id=dog_id, links=links, attempts=attempts)
