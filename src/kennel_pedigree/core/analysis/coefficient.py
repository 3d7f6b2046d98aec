"""Wright's coefficient of inbreeding by path counting.

For every individual recorded on both the sire side and the dam side, each
pairing of a sire-side path with a dam-side path adds (1/2)^(n1 + n2 + 1), where
n1 and n2 count generations from the sire and from the dam to that individual.
When an individual occurs more than once on one side, only its nearest
occurrences on that side (the shortest paths) are paired. Two paths that already
meet at a nearer shared individual on the way up do not form a new pairing, so
ancestors of a common ancestor are not counted again through it.
"""

from collections import defaultdict
from dataclasses import dataclass
from fractions import Fraction

from loguru import logger

from kennel_pedigree.core.tree.builder import build_tree, clamp_generations
from kennel_pedigree.core.tree.positions import sosa_number
from kennel_pedigree.errors import InvalidGenderError
from kennel_pedigree.models.dog import DogRecord, Gender
from kennel_pedigree.models.pedigree import (
    AncestorNode,
    CoefficientResult,
    CommonAncestor,
    PathPairContribution,
    ParentSide,
    PedigreeTree,
    PositionPath,
)
from kennel_pedigree.protocols import DogRepositoryProtocol

_HALF = Fraction(1, 2)


@dataclass(frozen=True)
class _Occurrence:
    dog: DogRecord
    path: PositionPath
    # Ids passed on the way from the sire (or dam) up to, not including, this slot.
    through: frozenset[str]


def _collect_occurrences(
    node: AncestorNode, path: PositionPath
) -> dict[str, list[_Occurrence]]:
    """Index every identifiable dog of a subtree by id, one entry per slot."""
    found: dict[str, list[_Occurrence]] = defaultdict(list)

    def walk(current: AncestorNode, current_path: PositionPath, through: frozenset[str]) -> None:
        if current.id and current.gender.is_known:
            found[current.id].append(_Occurrence(current.dog, current_path, through))
        above = through | {current.id} if current.id else through
        if current.sire is not None:
            walk(current.sire, (*current_path, ParentSide.SIRE), above)
        if current.dam is not None:
            walk(current.dam, (*current_path, ParentSide.DAM), above)

    walk(node, path, frozenset())
    return found


def _slot_order(occurrence: _Occurrence) -> int:
    return sosa_number(occurrence.path)


def _nearest(occurrences: list[_Occurrence]) -> list[_Occurrence]:
    """Keep the occurrences with the shortest path, in slot order."""
    shortest = min(len(o.path) for o in occurrences)
    return [o for o in occurrences if len(o.path) == shortest]


def _coefficient_between(
    sire: AncestorNode | None,
    dam: AncestorNode | None,
    *,
    sire_path: PositionPath = (ParentSide.SIRE,),
    dam_path: PositionPath = (ParentSide.DAM,),
) -> CoefficientResult:
    if sire is None or dam is None:
        return CoefficientResult()

    sire_side = _collect_occurrences(sire, sire_path)
    dam_side = _collect_occurrences(dam, dam_path)
    offset_sire = len(sire_path)
    offset_dam = len(dam_path)

    total = Fraction(0)
    ancestors: list[CommonAncestor] = []
    for dog_id in sorted(sire_side.keys() & dam_side.keys()):
        sire_occurrences = sorted(sire_side[dog_id], key=_slot_order)
        dam_occurrences = sorted(dam_side[dog_id], key=_slot_order)

        pairs: list[PathPairContribution] = []
        for s in _nearest(sire_occurrences):
            for d in _nearest(dam_occurrences):
                if s.through & d.through:
                    continue
                n1 = len(s.path) - offset_sire
                n2 = len(d.path) - offset_dam
                pairs.append(
                    PathPairContribution(
                        sire_path=s.path,
                        dam_path=d.path,
                        contribution=_HALF ** (n1 + n2 + 1),
                    )
                )
        if not pairs:
            continue

        ancestor = CommonAncestor(
            dog=sire_occurrences[0].dog,
            sire_paths=tuple(o.path for o in sire_occurrences),
            dam_paths=tuple(o.path for o in dam_occurrences),
            path_pairs=tuple(pairs),
        )
        total += ancestor.contribution
        ancestors.append(ancestor)

    ancestors.sort(key=lambda a: (-a.contribution, a.id))
    return CoefficientResult(value=total, common_ancestors=tuple(ancestors))


def coefficient(tree: PedigreeTree) -> CoefficientResult:
    """Compute the coefficient of inbreeding of a tree's root dog.

    Returns 0 when the sire or the dam is unknown. Only ancestors with an id and
    a recorded gender can be matched across the two sides.
    """
    result = _coefficient_between(tree.sire, tree.dam)
    logger.debug(
        "COI for {}: {:.4%} from {} common ancestors",
        tree.root.id, float(result.value), len(result.common_ancestors),
    )
    return result


def mating_coefficient(
    repository: DogRepositoryProtocol,
    sire_id: str,
    dam_id: str,
    max_generations: int,
) -> CoefficientResult:
    """Compute the coefficient of inbreeding a litter of sire x dam would have.

    Args:
        repository: Store used to resolve both dogs and their ancestry.
        sire_id: Intended sire.
        dam_id: Intended dam.
        max_generations: Generations of the litter's pedigree to consider,
            the parents being generation 1.

    Raises:
        DogNotFoundError: If either dog cannot be resolved.
        InvalidGenderError: If the sire is recorded female or the dam male.
    """
    generations = clamp_generations(max_generations)
    if generations == 0:
        return CoefficientResult()

    sire_tree = build_tree(repository, sire_id, generations - 1)
    dam_tree = build_tree(repository, dam_id, generations - 1)
    if sire_tree.root.gender is Gender.FEMALE:
        raise InvalidGenderError(sire_id, role="sire", gender=Gender.FEMALE.value)
    if dam_tree.root.gender is Gender.MALE:
        raise InvalidGenderError(dam_id, role="dam", gender=Gender.MALE.value)

    result = _coefficient_between(sire_tree.root, dam_tree.root)
    logger.info(
        "Planned mating {} x {}: COI {:.2%}", sire_id, dam_id, float(result.value)
    )
    return result
