"""Position addressing for pedigree slots.

Every slot of a pedigree is named by the sire/dam steps leading to it from the
root, whether or not a dog is recorded there. Within a generation the order is
the chart order: sire line above dam line at every level.
"""

import itertools
from collections.abc import Iterator

from kennel_pedigree.config import MAX_GENERATIONS
from kennel_pedigree.models.pedigree import AncestorNode, ParentSide, PedigreeTree, PositionPath

_ORDER = (ParentSide.SIRE, ParentSide.DAM)


def generation_slots(generation: int) -> list[PositionPath]:
    """Return the 2**generation paths of one generation in chart order."""
    if generation < 0:
        msg = f"generation must be non-negative, got {generation}"
        raise ValueError(msg)
    return list(itertools.product(_ORDER, repeat=generation))


def all_slots(max_generations: int) -> list[PositionPath]:
    """Return every ancestor slot of generations 1..max_generations.

    Generations are listed in increasing order, each in chart order. The root is
    not a slot.
    """
    return [
        path
        for generation in range(1, max_generations + 1)
        for path in generation_slots(generation)
    ]


def iter_preorder(max_generations: int) -> Iterator[PositionPath]:
    """Yield the root and every slot in pre-order, sire branch first."""

    def walk(path: PositionPath) -> Iterator[PositionPath]:
        yield path
        if len(path) < max_generations:
            for side in _ORDER:
                yield from walk((*path, side))

    yield from walk(())


def node_at(tree: PedigreeTree, path: PositionPath) -> AncestorNode | None:
    """Return the dog recorded at a slot, or None if the slot is unknown."""
    node: AncestorNode | None = tree.root
    for side in path:
        if node is None:
            return None
        node = node.parent(side)
    return node


def extract_generation(
    tree: PedigreeTree, generation: int
) -> list[tuple[PositionPath, AncestorNode | None]]:
    """Return every slot of a generation with its node, None where unknown.

    The result always has exactly 2**generation entries. Generations deeper than
    the tree was built to are returned as all-unknown.
    """
    if generation > MAX_GENERATIONS:
        msg = f"generation must be at most {MAX_GENERATIONS}, got {generation}"
        raise ValueError(msg)
    return [(path, node_at(tree, path)) for path in generation_slots(generation)]


def path_label(path: PositionPath) -> str:
    """Human label for a slot, e.g. "paternal grandsire"."""
    if not path:
        return "subject"
    parent = path[-1].value
    if len(path) == 1:
        return parent

    line = "paternal" if path[0] is ParentSide.SIRE else "maternal"
    greats = len(path) - 2
    if greats == 0:
        prefix = ""
    elif greats <= 2:
        prefix = "great-" * greats
    else:
        prefix = f"{greats}x great-"
    return f"{line} {prefix}grand{parent}"


def pathway(path: PositionPath) -> str:
    """Step-by-step rendering of a slot, e.g. "Sire → Dam → Sire"."""
    return " → ".join(side.value.capitalize() for side in path)


def sosa_number(path: PositionPath) -> int:
    """Ahnentafel number of a slot: root is 1, sire of n is 2n, dam of n is 2n+1."""
    number = 1
    for side in path:
        number = 2 * number + (1 if side is ParentSide.DAM else 0)
    return number
