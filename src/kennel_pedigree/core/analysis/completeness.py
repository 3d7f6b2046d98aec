"""Pedigree completeness: how many ancestor slots are filled."""

from kennel_pedigree.core.tree.builder import clamp_generations
from kennel_pedigree.core.tree.positions import all_slots, node_at
from kennel_pedigree.models.pedigree import PedigreeTree


def expected_slots(max_generations: int) -> int:
    """Number of ancestor slots in generations 1..max_generations."""
    return 2 ** (max_generations + 1) - 2


def completeness(tree: PedigreeTree, max_generations: int) -> int:
    """Return the percentage (0-100) of ancestor slots holding a known dog.

    Slots deeper than the tree was built to count as unknown.
    """
    generations = clamp_generations(max_generations)
    expected = expected_slots(generations)
    if expected == 0:
        return 0
    actual = sum(1 for path in all_slots(generations) if node_at(tree, path) is not None)
    return round(100 * actual / expected)
