"""Build bounded-depth ancestry trees from a dog repository."""

from collections.abc import Iterator

from loguru import logger

from kennel_pedigree.config import MAX_GENERATIONS
from kennel_pedigree.errors import DogNotFoundError, RepositoryError
from kennel_pedigree.models.dog import DogRecord
from kennel_pedigree.models.pedigree import (
    AncestorNode,
    GenderMismatch,
    ParentSide,
    PedigreeTree,
    PositionPath,
)
from kennel_pedigree.protocols import DogRepositoryProtocol


def clamp_generations(max_generations: int) -> int:
    return max(0, min(max_generations, MAX_GENERATIONS))


class _TreeBuilder:
    """State for one build_tree call: the per-call lookup cache and mismatches."""

    def __init__(
        self, repository: DogRepositoryProtocol, root: DogRecord, max_generations: int
    ) -> None:
        self._repository = repository
        self._max_generations = max_generations
        # dog id -> record, or None when the lookup failed. A dog recorded as its
        # own ancestor is served from here.
        self._resolved: dict[str, DogRecord | None] = {root.id: root}
        self.mismatches: list[GenderMismatch] = []

    @property
    def lookups(self) -> int:
        return len(self._resolved)

    def resolve_ancestor(self, dog_id: str) -> DogRecord | None:
        if dog_id in self._resolved:
            return self._resolved[dog_id]

        record: DogRecord | None
        try:
            record = self._repository.resolve_dog(dog_id)
        except DogNotFoundError:
            logger.debug("Ancestor {} not found, leaving slot unknown", dog_id)
            record = None
        except RepositoryError as e:
            logger.warning("Could not resolve ancestor {}: {}", dog_id, e.reason)
            record = None

        self._resolved[dog_id] = record
        return record

    def build_node(self, dog: DogRecord, path: PositionPath) -> AncestorNode:
        if len(path) >= self._max_generations:
            return AncestorNode(dog=dog)
        return AncestorNode(
            dog=dog,
            sire=self._build_parent(dog.sire_id, (*path, ParentSide.SIRE)),
            dam=self._build_parent(dog.dam_id, (*path, ParentSide.DAM)),
        )

    def _build_parent(self, parent_id: str | None, path: PositionPath) -> AncestorNode | None:
        if parent_id is None:
            return None
        record = self.resolve_ancestor(parent_id)
        if record is None:
            return None

        expected = path[-1].expected_gender
        if record.gender.is_known and record.gender is not expected:
            logger.warning(
                "{} {} is recorded {} but sits in a {} slot",
                record.display_name, record.id, record.gender.value, path[-1].value,
            )
            self.mismatches.append(
                GenderMismatch(
                    path=path, dog_id=record.id, expected=expected, recorded=record.gender
                )
            )
        return self.build_node(record, path)


def build_tree(
    repository: DogRepositoryProtocol,
    root_id: str,
    max_generations: int,
) -> PedigreeTree:
    """Build the ancestry tree of a dog.

    Args:
        repository: Store used to resolve each dog and its parent ids.
        root_id: The dog whose pedigree is built.
        max_generations: Generations above the root to include (clamped to 0..6).

    Returns:
        A PedigreeTree. Ancestors that cannot be resolved are left unknown.

    Raises:
        DogNotFoundError: If the root dog itself cannot be resolved.
    """
    generations = clamp_generations(max_generations)
    try:
        root = repository.resolve_dog(root_id)
    except RepositoryError as e:
        raise DogNotFoundError(root_id) from e

    builder = _TreeBuilder(repository, root, generations)
    tree = PedigreeTree(
        root=builder.build_node(root, ()),
        max_generations=generations,
        gender_mismatches=tuple(builder.mismatches),
    )
    logger.debug(
        "Built {}-generation pedigree for {} ({} lookups)",
        generations, root_id, builder.lookups,
    )
    return tree


def iter_nodes(tree: PedigreeTree) -> Iterator[tuple[PositionPath, AncestorNode]]:
    """Yield (path, node) for every known node, root first, in pre-order."""
    stack: list[tuple[PositionPath, AncestorNode]] = [((), tree.root)]
    while stack:
        path, node = stack.pop()
        yield path, node
        # Dam pushed first so the sire branch comes out first.
        if node.dam is not None:
            stack.append(((*path, ParentSide.DAM), node.dam))
        if node.sire is not None:
            stack.append(((*path, ParentSide.SIRE), node.sire))


def contains_dog(tree: PedigreeTree, dog_id: str) -> bool:
    """Return True if the dog occurs anywhere in the tree, root included."""
    return any(node.id == dog_id for _, node in iter_nodes(tree))
