"""Tests for markdown pedigree rendering."""

from kennel_pedigree.core.tree.builder import build_tree
from kennel_pedigree.core.tree.markdown import render_pedigree_as_markdown
from kennel_pedigree.models.dog import DogRecord, Gender
from tests.unit.fakes import FakeDogRepository


def test_render_lists_every_slot(line_bred: FakeDogRepository) -> None:
    md = render_pedigree_as_markdown(build_tree(line_bred, "A", 2))
    assert md.splitlines() == [
        "- Subject: **Dog A** ♂",
        "    - Sire: **Dog B** ♂",
        "        - Paternal grandsire: **Dog D** ♂",
        "        - Paternal granddam: unknown",
        "    - Dam: **Dog C** ♀",
        "        - Maternal grandsire: **Dog D** ♂",
        "        - Maternal granddam: unknown",
    ]


def test_render_skips_slots_above_an_unknown(line_bred: FakeDogRepository) -> None:
    md = render_pedigree_as_markdown(build_tree(line_bred, "E", 3))
    assert md.splitlines() == [
        "- Subject: **Dog E** ♂",
        "    - Sire: unknown",
        "    - Dam: unknown",
    ]


def test_render_marks_truncated_ancestry(line_bred: FakeDogRepository) -> None:
    md = render_pedigree_as_markdown(build_tree(line_bred, "A", 3), max_depth=1)
    assert "    - Sire: **Dog B** ♂" in md
    assert "        - ... (ancestry continues, id=B)" in md
    assert "grandsire" not in md


def test_render_details() -> None:
    repo = FakeDogRepository(
        [
            DogRecord(
                id="r",
                name="Rex",
                gender=Gender.MALE,
                registration_number="KC-1",
                breed="Beagle",
                color="tricolor",
            )
        ]
    )
    tree = build_tree(repo, "r", 1)
    assert render_pedigree_as_markdown(tree).startswith(
        "- Subject: **Rex** ♂ (KC-1, Beagle, tricolor)\n"
    )
    assert render_pedigree_as_markdown(tree, include_details=False).startswith(
        "- Subject: **Rex** ♂\n"
    )
