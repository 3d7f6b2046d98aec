"""Dog pedigree trees, inbreeding coefficients and parent linking."""

from kennel_pedigree.core.analysis.coefficient import coefficient, mating_coefficient
from kennel_pedigree.core.analysis.completeness import completeness
from kennel_pedigree.core.tree.builder import build_tree
from kennel_pedigree.core.tree.positions import (
    all_slots,
    extract_generation,
    generation_slots,
    path_label,
)
from kennel_pedigree.core.write.linker import link_parents
from kennel_pedigree.models.dog import DogRecord, Gender, ParentLinks
from kennel_pedigree.models.pedigree import (
    AncestorNode,
    CoefficientResult,
    ParentSide,
    PedigreeTree,
    PositionPath,
)
from kennel_pedigree.protocols import DogRepositoryProtocol, EditPermissionProtocol

__all__ = [
    "AncestorNode",
    "CoefficientResult",
    "DogRecord",
    "DogRepositoryProtocol",
    "EditPermissionProtocol",
    "Gender",
    "ParentLinks",
    "ParentSide",
    "PedigreeTree",
    "PositionPath",
    "all_slots",
    "build_tree",
    "coefficient",
    "completeness",
    "extract_generation",
    "generation_slots",
    "link_parents",
    "mating_coefficient",
    "path_label",
]
